from enum import Enum


TOOL_NAME = "condex"

EXPLICIT_SPEC_HEADER = f"# Generated by `{TOOL_NAME} project export`\n"

EXPLICIT_MARKER = "@EXPLICIT"

CONDA_LOCK_FILE_TEMPLATE = "conda-{platform}-{environment}.lock"

PYPI_REQUIREMENTS_FILE_TEMPLATE = "requirements-{platform}-{environment}.txt"

# the lock format marks direct url references with this scheme prefix,
# pip does not understand it
DIRECT_URL_PREFIX = "direct+"

DEFAULT_ENVIRONMENT_NAME = "default"

ENVIRONMENT_NAME_ENV_VAR = "PIXI_ENVIRONMENT_NAME"

LOCK_FILE_NAME = "pixi.lock"

MANIFEST_FILE_NAMES = ("pixi.toml", "pyproject.toml")


class UnsupportedPackagePolicy(str, Enum):
    """What to do with pypi packages found while exporting a conda spec"""
    FAIL = "fail"
    IGNORE = "ignore"
    WRITE_REQUIREMENTS = "write-requirements"

    @classmethod
    def from_flags(cls, ignore_pypi_errors: bool, write_pypi_requirements: bool):
        if ignore_pypi_errors and write_pypi_requirements:
            raise ValueError(
                "`--ignore-pypi-errors` and `--write-pypi-requirements` are mutually exclusive"
            )
        if ignore_pypi_errors:
            return cls.IGNORE
        if write_pypi_requirements:
            return cls.WRITE_REQUIREMENTS
        return cls.FAIL


class LockFileUsage(str, Enum):
    UPDATE = "update"
    LOCKED = "locked"
    FROZEN = "frozen"

    @classmethod
    def from_flags(cls, locked: bool, frozen: bool):
        if locked and frozen:
            raise ValueError("`--locked` and `--frozen` are mutually exclusive")
        if frozen:
            return cls.FROZEN
        if locked:
            return cls.LOCKED
        return cls.UPDATE
