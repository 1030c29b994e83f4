from typing import Iterable
from urllib.parse import urlsplit, urlunsplit

from condex._src.exceptions import IntegrityError
from condex._src.models.explicit import ExplicitEnvironmentEntry, ExplicitEnvironmentSpec
from condex._src.models.package import CondaPackage


def with_fragment(url: str, fragment: str) -> str:
    """Replace the fragment of a url, any existing fragment is dropped"""
    return urlunsplit(urlsplit(url)._replace(fragment=fragment))


def build_explicit_spec(platform, conda_packages: Iterable[CondaPackage]) -> ExplicitEnvironmentSpec:
    """Pin every conda package to its url with the md5 as url fragment.

    Order is preserved and nothing is deduplicated. A package without an
    md5 raises ``IntegrityError``, an explicit spec without hashes would be
    indistinguishable from an unpinned one.
    """
    packages = []
    for pkg in conda_packages:
        if pkg.md5 is None:
            raise IntegrityError(pkg.name)
        packages.append(ExplicitEnvironmentEntry(url=with_fragment(pkg.url, pkg.md5.lower())))

    return ExplicitEnvironmentSpec(platform=str(platform), packages=packages)
