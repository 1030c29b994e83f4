import logging
from typing import Iterable, List, NamedTuple

from condex._src.constants import UnsupportedPackagePolicy
from condex._src.exceptions import ConfigurationError
from condex._src.models.package import CondaPackage, LockedPackage, PypiPackage


logger = logging.getLogger(__name__)


class ClassifiedPackages(NamedTuple):
    conda: List[CondaPackage]
    pypi: List[PypiPackage]


def classify_packages(
    packages: Iterable[LockedPackage],
    policy: UnsupportedPackagePolicy = UnsupportedPackagePolicy.FAIL,
) -> ClassifiedPackages:
    """Split the locked packages of one environment and platform by kind.

    Parameters
    ----------
    packages: Iterable[LockedPackage]
        Packages in lock order, the order is kept in both outputs.
    policy: UnsupportedPackagePolicy
        What to do with pypi packages, which an explicit spec cannot hold.

    Raises
    ------
    ConfigurationError
        If a pypi package is found and the policy is ``FAIL``.
    """
    conda_packages = []
    pypi_packages = []

    for package in packages:
        match package.kind:
            case "conda":
                conda_packages.append(package)
            case "pypi":
                if policy is UnsupportedPackagePolicy.IGNORE:
                    logger.warning(
                        "ignoring PyPI package %s since PyPI packages are not supported", package.name
                    )
                elif policy is UnsupportedPackagePolicy.WRITE_REQUIREMENTS:
                    pypi_packages.append(package)
                else:
                    raise ConfigurationError(
                        "PyPI packages are not supported. Specify `--ignore-pypi-errors` to ignore this error "
                        "or `--write-pypi-requirements` to write pypi requirements to a separate requirements.txt file"
                    )
            case unknown:
                raise TypeError(f"unknown locked package kind '{unknown}'")

    return ClassifiedPackages(conda=conda_packages, pypi=pypi_packages)
