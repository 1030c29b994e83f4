from pathlib import Path
from typing import Iterable

from condex._src.constants import EXPLICIT_SPEC_HEADER
from condex._src.exceptions import IoError
from condex._src.models.explicit import ExplicitEnvironmentSpec


def write_text(target: str | Path, content: str, what: str = "file") -> None:
    """Write utf-8 text to target, replacing whatever is there"""
    try:
        Path(target).write_text(content, encoding="utf-8")
    except OSError as err:
        raise IoError(target, err, what=what) from err


def write_explicit_spec(target: str | Path, explicit_spec: ExplicitEnvironmentSpec) -> None:
    content = EXPLICIT_SPEC_HEADER + explicit_spec.to_spec_string()
    write_text(target, content, what="environment file")


def write_requirements(target: str | Path, requirement_lines: Iterable[str]) -> None:
    write_text(target, "".join(requirement_lines), what="requirements file")
