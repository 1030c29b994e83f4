"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest
import yaml


CHANNEL = "https://conda.anaconda.org/conda-forge/"
PYPI_INDEX = "https://pypi.org/simple"

MUTEX_URL = "https://conda.anaconda.org/conda-forge/linux-64/_libgcc_mutex-0.1-conda_forge.tar.bz2"
MUTEX_MD5 = "d7c89558ba9fa0495403155b64376d81"
MUTEX_SHA256 = "fe51de6107f9edc7aa4f786a70f4a883943bc9d39b3bb7307c04c41410990726"

PYTHON_URL = "https://conda.anaconda.org/conda-forge/linux-64/python-3.12.3-hab00c5b_0_cpython.conda"
PYTHON_MD5 = "2540b74d304f71d3e89c81209db4db84"

REQUESTS_URL = (
    "https://files.pythonhosted.org/packages/70/8e/0e2d847013cb52cd35b38c009bb167a1a26b2ce6cd6965bf26b47bc0bf44/"
    "requests-2.31.0-py3-none-any.whl"
)
REQUESTS_SHA256 = "58cd2187c01e70e6e26505bca751777aa9f2ee0b7f4300988b709f44e013003f"


# name, version and build of the archives above
ARCHIVE_FIELDS = {
    MUTEX_URL: ("_libgcc_mutex", "0.1", "conda_forge"),
    PYTHON_URL: ("python", "3.12.3", "hab00c5b_0_cpython"),
}


def conda_record(
    url: str,
    md5: str | None = None,
    sha256: str | None = None,
    name: str | None = None,
    version: str | None = None,
    build: str | None = None,
) -> dict[str, Any]:
    default_name, default_version, default_build = ARCHIVE_FIELDS.get(url, (None, None, None))
    record: dict[str, Any] = {
        "conda": url,
        "name": name or default_name,
        "version": version or default_version,
        "build": build or default_build,
    }
    if sha256 is not None:
        record["sha256"] = sha256
    if md5 is not None:
        record["md5"] = md5
    return record


def pypi_record(location: str, name: str, version: str, **extra: Any) -> dict[str, Any]:
    return {"pypi": location, "name": name, "version": version, **extra}


def lock_data(
    records: list[dict[str, Any]],
    environment: str = "default",
    platform: str = "linux-64",
) -> dict[str, Any]:
    """A v6 lock with one environment locked for one platform."""
    references = []
    for record in records:
        kind = "conda" if "conda" in record else "pypi"
        references.append({kind: record[kind]})
    locked_environment: dict[str, Any] = {"channels": [{"url": CHANNEL}]}
    if any("pypi" in record for record in records):
        locked_environment["indexes"] = [PYPI_INDEX]
    locked_environment["packages"] = {platform: references}
    return {
        "version": 6,
        "environments": {environment: locked_environment},
        "packages": records,
    }


@pytest.fixture
def write_workspace(tmp_path: Path) -> Callable[..., Path]:
    """Write a pixi.toml and pixi.lock into tmp_path, returns the manifest path."""

    def _write(lock: dict[str, Any], platforms: tuple[str, ...] = ("linux-64",), extra: str = "") -> Path:
        platform_list = ", ".join(f'"{p}"' for p in platforms)
        manifest = tmp_path / "pixi.toml"
        manifest.write_text(
            "[workspace]\n"
            'name = "demo"\n'
            f'channels = ["conda-forge"]\n'
            f"platforms = [{platform_list}]\n" + extra,
            encoding="utf-8",
        )
        (tmp_path / "pixi.lock").write_text(yaml.safe_dump(lock, sort_keys=False), encoding="utf-8")
        return manifest

    return _write
