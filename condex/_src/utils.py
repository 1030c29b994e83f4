import tomllib
from pathlib import Path

from rattler import Subdir

from condex._src.constants import MANIFEST_FILE_NAMES


def current_platform() -> str:
    return str(Subdir.current())


def parse_platform(value: str) -> str:
    """Validate a platform name, eg. 'linux-64', and return its canonical form"""
    return str(Subdir(value))


def find_manifest(directory: str | Path) -> Path | None:
    """Identify the workspace manifest: the nearest pixi.toml or pixi enabled
    pyproject.toml in `directory` or one of its parents.

    Parameters
    ----------
    directory : str | Path
        Directory inside the workspace

    Returns
    -------
    Path | None
        Path to the manifest, or None if no manifest can be found
    """
    directory = Path(directory).resolve()

    for candidate_dir in [directory, *directory.parents]:
        for name in MANIFEST_FILE_NAMES:
            candidate = candidate_dir / name
            if candidate.is_file() and is_pixi_manifest(candidate):
                return candidate

    return None


def is_pixi_manifest(path: Path) -> bool:
    """pixi.toml always is, a pyproject.toml only with a `tool.pixi` table"""
    if path.name != "pyproject.toml":
        return True
    with open(path, "rb") as file:
        data = tomllib.load(file)
    return data.get("tool", {}).get("pixi") is not None
