import logging

import pytest

from condex._src.classify import classify_packages
from condex._src.constants import UnsupportedPackagePolicy
from condex._src.exceptions import ConfigurationError
from condex._src.models.package import CondaPackage, PypiPackage
from conftest import MUTEX_MD5, MUTEX_URL, PYTHON_URL, REQUESTS_URL


def _conda(url: str = MUTEX_URL, name: str = "_libgcc_mutex") -> CondaPackage:
    return CondaPackage(name=name, version="0.1", build="0", url=url, md5=MUTEX_MD5)


def _pypi(location: str = REQUESTS_URL, name: str = "requests") -> PypiPackage:
    return PypiPackage(name=name, version="2.31.0", location=location)


def test_conda_only_passes_through_in_order() -> None:
    packages = [_conda(PYTHON_URL, "python"), _conda()]

    result = classify_packages(packages)

    assert [p.name for p in result.conda] == ["python", "_libgcc_mutex"]
    assert result.pypi == []


def test_pypi_without_policy_fails() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        classify_packages([_conda(), _pypi()])

    assert "--ignore-pypi-errors" in excinfo.value.msg
    assert "--write-pypi-requirements" in excinfo.value.msg


def test_pypi_without_policy_fails_without_conda_packages() -> None:
    with pytest.raises(ConfigurationError):
        classify_packages([_pypi()], UnsupportedPackagePolicy.FAIL)


def test_ignore_policy_drops_pypi_with_warning(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="condex"):
        result = classify_packages([_pypi(), _conda()], UnsupportedPackagePolicy.IGNORE)

    assert [p.name for p in result.conda] == ["_libgcc_mutex"]
    assert result.pypi == []
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "requests" in warnings[0].getMessage()


def test_write_requirements_policy_keeps_pypi_in_order() -> None:
    packages = [_pypi(name="a"), _conda(), _pypi("./b", name="b")]

    result = classify_packages(packages, UnsupportedPackagePolicy.WRITE_REQUIREMENTS)

    assert [p.name for p in result.conda] == ["_libgcc_mutex"]
    assert [p.name for p in result.pypi] == ["a", "b"]


@pytest.mark.parametrize(
    "ignore, write, expected",
    [
        (False, False, UnsupportedPackagePolicy.FAIL),
        (True, False, UnsupportedPackagePolicy.IGNORE),
        (False, True, UnsupportedPackagePolicy.WRITE_REQUIREMENTS),
    ],
)
def test_policy_from_flags(ignore: bool, write: bool, expected: UnsupportedPackagePolicy) -> None:
    assert UnsupportedPackagePolicy.from_flags(ignore, write) is expected


def test_policy_from_both_flags_is_rejected() -> None:
    with pytest.raises(ValueError, match="mutually exclusive"):
        UnsupportedPackagePolicy.from_flags(True, True)
