import asyncio
import logging
import os
import tomllib
from pathlib import Path
from typing import AbstractSet, Dict, List, Optional

from condex._src.constants import (
    DEFAULT_ENVIRONMENT_NAME,
    ENVIRONMENT_NAME_ENV_VAR,
    LOCK_FILE_NAME,
    LockFileUsage,
)
from condex._src.exceptions import LockFileError, NotFoundError
from condex._src.models.lock import PixiLockFile, normalize_pypi_name
from condex._src.utils import current_platform, find_manifest


logger = logging.getLogger(__name__)

# platforms that can run packages built for another one
_PLATFORM_FALLBACKS = {
    "osx-arm64": "osx-64",
    "win-arm64": "win-64",
}


class Environment():
    def __init__(self, name: str, platforms: List[str], editable_packages: AbstractSet[str] = frozenset()):
        self.name = name
        self.platforms = platforms
        # normalized names of pypi packages installed in editable mode
        self.editable_packages = editable_packages

    def __repr__(self):
        return f"Environment(name={self.name!r}, platforms={self.platforms!r})"

    def best_platform(self) -> str:
        """The platform to export when none is requested.

        The current platform if the environment supports it, then a
        platform the current one can emulate, then the first declared one.
        """
        current = current_platform()
        if current in self.platforms or not self.platforms:
            return current
        fallback = _PLATFORM_FALLBACKS.get(current)
        if fallback in self.platforms:
            return fallback
        return self.platforms[0]


class Project():
    @classmethod
    def discover(cls, directory: str | Path = "."):
        manifest_path = find_manifest(directory)
        if manifest_path is None:
            raise NotFoundError(f"could not find pixi.toml or pyproject.toml in {Path(directory).resolve()}")
        return cls.from_manifest(manifest_path)

    @classmethod
    def from_manifest(cls, manifest_path: str | Path):
        manifest_path = Path(manifest_path).resolve()
        try:
            with open(manifest_path, "rb") as file:
                data = tomllib.load(file)
        except FileNotFoundError as err:
            raise NotFoundError(f"manifest {manifest_path} does not exist") from err

        if manifest_path.name == "pyproject.toml":
            data = data.get("tool", {}).get("pixi", {})

        workspace = data.get("workspace") or data.get("project") or {}
        platforms = [str(p) for p in workspace.get("platforms", [])]
        features = data.get("feature", {})
        feature_platforms = {
            name: [str(p) for p in feature["platforms"]]
            for name, feature in features.items()
            if "platforms" in feature
        }
        default_editable = _editable_pypi_packages(data)

        environments = {
            DEFAULT_ENVIRONMENT_NAME: Environment(DEFAULT_ENVIRONMENT_NAME, platforms, default_editable)
        }
        for name, env in data.get("environments", {}).items():
            # either a list of features or a table with a `features` key
            if isinstance(env, list):
                env_features, no_default = env, False
            else:
                env_features, no_default = env.get("features", []), env.get("no-default-feature", False)
            editable = set() if no_default else set(default_editable)
            for feature in env_features:
                editable |= _editable_pypi_packages(features.get(feature, {}))
            environments[name] = Environment(
                name,
                _environment_platforms(
                    platforms, [feature_platforms[f] for f in env_features if f in feature_platforms]
                ),
                frozenset(editable),
            )

        return cls(manifest_path=manifest_path, environments=environments)

    def __init__(self, manifest_path: Path, environments: Dict[str, Environment]):
        self.manifest_path = manifest_path
        self.root = manifest_path.parent
        self.lock_file_path = self.root / LOCK_FILE_NAME
        self._environments = environments

    def environment_names(self) -> List[str]:
        return list(self._environments)

    def environment(self, name: str) -> Optional[Environment]:
        return self._environments.get(name)

    def environment_from_name_or_env_var(self, name: Optional[str] = None) -> Environment:
        """Resolve the environment to use.

        An explicit name wins, then the PIXI_ENVIRONMENT_NAME variable,
        then the default environment.
        """
        if name is None:
            name = os.environ.get(ENVIRONMENT_NAME_ENV_VAR) or DEFAULT_ENVIRONMENT_NAME
        environment = self.environment(name)
        if environment is None:
            raise NotFoundError(f"unknown environment '{name}' in {self.manifest_path}")
        return environment

    async def update_lock_file(self, lock_file_usage: LockFileUsage = LockFileUsage.UPDATE) -> PixiLockFile:
        """Obtain an up-to-date lock for the workspace.

        With ``UPDATE`` the lock is refreshed by ``pixi lock`` first,
        ``LOCKED`` checks the lock covers every manifest environment and
        ``FROZEN`` reads the lock file as it is.
        """
        if lock_file_usage is LockFileUsage.UPDATE:
            await run_pixi_lock(self.manifest_path)
        elif not self.lock_file_path.exists():
            raise NotFoundError(f"lock file {self.lock_file_path} does not exist")

        lock_file = PixiLockFile.from_path(self.lock_file_path)

        if lock_file_usage is LockFileUsage.LOCKED:
            self._check_lock_is_current(lock_file)

        return lock_file

    def _check_lock_is_current(self, lock_file: PixiLockFile) -> None:
        for name, environment in self._environments.items():
            locked_env = lock_file.environment(name)
            locked_platforms = [] if locked_env is None else locked_env.platforms()
            missing = [p for p in environment.platforms if p not in locked_platforms]
            if missing:
                raise LockFileError(
                    f"lock file is not up-to-date with {self.manifest_path}: "
                    f"environment '{name}' is not locked for {', '.join(missing)}"
                )


def _editable_pypi_packages(table: dict) -> set:
    """Normalized names of the `pypi-dependencies` marked `editable = true`"""
    return {
        normalize_pypi_name(name)
        for name, requirement in table.get("pypi-dependencies", {}).items()
        if isinstance(requirement, dict) and requirement.get("editable", False)
    }


def _environment_platforms(workspace_platforms: List[str], feature_platforms: List[List[str]]) -> List[str]:
    platforms = workspace_platforms
    for restriction in feature_platforms:
        platforms = [p for p in platforms if p in restriction]
    return platforms


async def run_pixi_lock(manifest_path: Path) -> None:
    logger.info("Updating lock file for %s", manifest_path)
    try:
        process = await asyncio.create_subprocess_exec(
            "pixi", "lock", "--manifest-path", str(manifest_path),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as err:
        raise LockFileError("failed to update the lock file: `pixi` executable not found") from err

    _, stderr = await process.communicate()
    if process.returncode != 0:
        raise LockFileError(
            f"failed to update the lock file!"
            f"\nRan command: `pixi lock --manifest-path {manifest_path}`"
            f"\nError message: {stderr.decode('utf-8', errors='replace').strip()}"
        )
