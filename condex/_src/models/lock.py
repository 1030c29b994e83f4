import re
from pathlib import Path
from typing import AbstractSet, List, Optional

from rattler import LockFile
from rattler.exceptions import IoError as RattlerIoError, ParseCondaLockError
from rattler.lock import CondaLockedPackage, LockedPackage as RattlerLockedPackage, PypiLockedPackage

from condex._src.exceptions import LockFileError, NotFoundError
from condex._src.models.package import CondaPackage, LockedPackage, PackageHashes, PypiPackage


def normalize_pypi_name(name: str) -> str:
    """PEP 503 normalized form of a pypi project name"""
    return re.sub(r"[-_.]+", "-", name).lower()


def _hex(digest: Optional[bytes]) -> Optional[str]:
    return None if digest is None else digest.hex()


def to_conda_package(package: CondaLockedPackage) -> CondaPackage:
    """Convert a rattler conda package to the exported model.

    Source packages may not carry a record yet, they end up without an md5
    and cannot be pinned.
    """
    record = package.package_record
    if record is None:
        return CondaPackage(name=package.name, version="", build="", url=package.location)
    return CondaPackage(
        name=record.name.normalized,
        version=str(record.version),
        build=record.build,
        subdir=record.subdir,
        url=package.location,
        md5=_hex(record.md5),
        sha256=_hex(record.sha256),
    )


def to_pypi_package(package: PypiLockedPackage, editable: bool = False) -> PypiPackage:
    # the hashes wrapper raises AttributeError when the lock holds none
    hashes = package.hashes
    md5 = _hex(getattr(hashes, "md5", None))
    sha256 = _hex(getattr(hashes, "sha256", None))
    return PypiPackage(
        name=package.name,
        version=package.version,
        location=package.location,
        editable=editable,
        hashes=None if md5 is None and sha256 is None else PackageHashes(md5=md5, sha256=sha256),
    )


def to_locked_package(package: RattlerLockedPackage, editable_packages: AbstractSet[str] = frozenset()) -> LockedPackage:
    if isinstance(package, PypiLockedPackage):
        return to_pypi_package(package, normalize_pypi_name(package.name) in editable_packages)
    if isinstance(package, CondaLockedPackage):
        return to_conda_package(package)
    raise TypeError(f"unsupported locked package {package!r}")


class LockEnvironment():
    """The locked packages of one environment, per platform"""
    def __init__(self, name: str, environment):
        self.name = name
        self._environment = environment

    def platforms(self) -> List[str]:
        return [platform.name for platform in self._environment.platforms()]

    def packages(self, platform, editable_packages: AbstractSet[str] = frozenset()) -> Optional[List[LockedPackage]]:
        """Packages locked for `platform` in lock order, None if the platform is not locked.

        Parameters
        ----------
        platform: str
            Platform name, eg. 'linux-64'
        editable_packages: AbstractSet[str]
            Normalized names of pypi packages the manifest installs editable,
            the lock does not record this.
        """
        for lock_platform in self._environment.platforms():
            if lock_platform.name == str(platform):
                packages = self._environment.packages(lock_platform) or []
                return [to_locked_package(p, editable_packages) for p in packages]
        return None


class PixiLockFile():
    def __init__(self, lock_file: LockFile):
        self._lock_file = lock_file

    @classmethod
    def from_path(cls, path: str | Path) -> "PixiLockFile":
        if not Path(path).exists():
            raise NotFoundError(f"lock file {path} does not exist")
        try:
            return cls(LockFile.from_path(path))
        except (ParseCondaLockError, RattlerIoError) as err:
            raise LockFileError(f"failed to parse lock file {path}: {err}") from err

    def environment_names(self) -> List[str]:
        return [name for name, _ in self._lock_file.environments()]

    def environment(self, name: str) -> Optional[LockEnvironment]:
        environment = self._lock_file.environment(name)
        if environment is None:
            return None
        return LockEnvironment(name, environment)
