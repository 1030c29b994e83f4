import string
from typing import Annotated, Literal, Optional, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator


# stronger digests first
HASH_PRECEDENCE = ("sha256", "md5")

_HEX_LENGTHS = {"md5": 32, "sha256": 64}


def _validate_hex(value: Optional[str], algorithm: str) -> Optional[str]:
    if value is None:
        return None
    value = value.lower()
    if len(value) != _HEX_LENGTHS[algorithm] or any(c not in string.hexdigits for c in value):
        raise ValueError(f"invalid {algorithm} digest '{value}'")
    return value


def location_is_url(location: str) -> bool:
    """Whether a lock location is a url rather than a filesystem path.

    Single letter schemes are windows drive letters, eg. 'C:\\src\\pkg'.
    """
    return len(urlsplit(location).scheme) > 1


class PackageHashes(BaseModel):
    """Digests recorded for a pypi package, either or both may be present"""
    md5: Optional[str] = None
    sha256: Optional[str] = None

    @field_validator("md5")
    @classmethod
    def _check_md5(cls, value):
        return _validate_hex(value, "md5")

    @field_validator("sha256")
    @classmethod
    def _check_sha256(cls, value):
        return _validate_hex(value, "sha256")


def preferred_hash(hashes: Optional[PackageHashes]) -> Optional[tuple[str, str]]:
    """Pick the single digest used to annotate a requirement.

    Returns
    -------
    (algorithm, hexdigest) | None
        The strongest digest available following ``HASH_PRECEDENCE``,
        or None if the record carries no digest at all.
    """
    if hashes is None:
        return None
    for algorithm in HASH_PRECEDENCE:
        digest = getattr(hashes, algorithm)
        if digest is not None:
            return algorithm, digest
    return None


class CondaPackage(BaseModel):
    kind: Literal["conda"] = "conda"
    name: str
    version: str
    build: str
    # eg. 'linux-64' or 'noarch'
    subdir: Optional[str] = None
    url: str
    md5: Optional[str] = None
    sha256: Optional[str] = None

    @field_validator("md5")
    @classmethod
    def _check_md5(cls, value):
        return _validate_hex(value, "md5")

    @field_validator("sha256")
    @classmethod
    def _check_sha256(cls, value):
        return _validate_hex(value, "sha256")

    def __str__(self):
        return f"conda: {self.name} - {self.version}"


class PypiPackage(BaseModel):
    kind: Literal["pypi"] = "pypi"
    name: str
    version: str
    # remote url or a path relative to the workspace root
    location: str
    editable: bool = False
    hashes: Optional[PackageHashes] = None

    def __str__(self):
        return f"pypi: {self.name} - {self.version}"

    def is_url(self) -> bool:
        return location_is_url(self.location)


LockedPackage = Annotated[Union[CondaPackage, PypiPackage], Field(discriminator="kind")]
