from typing import Iterable, List, Optional

from condex._src.constants import DIRECT_URL_PREFIX
from condex._src.exceptions import EncodingError
from condex._src.models.package import PypiPackage, preferred_hash


def hash_annotation(package: PypiPackage) -> Optional[str]:
    digest = preferred_hash(package.hashes)
    if digest is None:
        return None
    algorithm, hexdigest = digest
    return f"--hash={algorithm}:{hexdigest}"


def _location_text(package: PypiPackage) -> tuple[str, bool]:
    """Returns the location as text and whether it may carry a hash"""
    if package.is_url():
        return package.location, True

    # pip --require-hashes does not accept hashes for local paths
    try:
        package.location.encode("utf-8")
    except UnicodeEncodeError as err:
        raise EncodingError(package.location) from err
    return package.location, False


def render_requirement(package: PypiPackage) -> str:
    location, include_hash = _location_text(package)
    location = location.removeprefix(DIRECT_URL_PREFIX)

    line = location
    if include_hash:
        annotation = hash_annotation(package)
        if annotation is not None:
            line = f"{line} {annotation}"

    if package.editable:
        line = f"-e {line}"
    return f"{line}\n"


def render_requirements(packages: Iterable[PypiPackage]) -> List[str]:
    return [render_requirement(pkg) for pkg in packages]
