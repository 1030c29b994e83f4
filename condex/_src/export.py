import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from condex._src.classify import classify_packages
from condex._src.constants import (
    CONDA_LOCK_FILE_TEMPLATE,
    PYPI_REQUIREMENTS_FILE_TEMPLATE,
    LockFileUsage,
    UnsupportedPackagePolicy,
)
from condex._src.exceptions import NotFoundError
from condex._src.explicit import build_explicit_spec
from condex._src.project import Project
from condex._src.requirements import render_requirements
from condex._src.writer import write_explicit_spec, write_requirements


logger = logging.getLogger(__name__)


class ExportOptions(BaseModel):
    """What to export and how to treat the lock"""
    environment: Optional[str] = None
    platform: Optional[str] = None
    unsupported_packages: UnsupportedPackagePolicy = UnsupportedPackagePolicy.FAIL
    lock_file_usage: LockFileUsage = LockFileUsage.UPDATE
    # defaults to the current working directory
    output_dir: Optional[Path] = None


class ExportResult(BaseModel):
    environment: str
    platform: str
    explicit_spec_path: Path
    requirements_path: Optional[Path] = None


def export_target(template: str, platform: str, environment: str, output_dir: Optional[Path] = None) -> Path:
    if output_dir is None:
        output_dir = Path.cwd()
    return Path(output_dir) / template.format(platform=platform, environment=environment)


async def export_conda_explicit_spec(project: Project, options: ExportOptions) -> ExportResult:
    """Export one environment and platform of the lock to a conda explicit
    spec and, when pypi requirements are requested, a requirements file.

    Any failure aborts the export. A file written by an earlier step stays
    on disk.
    """
    environment = project.environment_from_name_or_env_var(options.environment)
    platform = options.platform or environment.best_platform()

    lock_file = await project.update_lock_file(options.lock_file_usage)

    locked_env = lock_file.environment(environment.name)
    if locked_env is None:
        raise NotFoundError(f"unknown environment '{environment.name}' in {project.manifest_path}")

    packages = locked_env.packages(platform, environment.editable_packages)
    if packages is None:
        raise NotFoundError(f"platform '{platform}' not found in {project.manifest_path}")

    classified = classify_packages(packages, options.unsupported_packages)
    explicit_spec = build_explicit_spec(platform, classified.conda)

    logger.info("Creating conda explicit spec")
    target = export_target(CONDA_LOCK_FILE_TEMPLATE, platform, environment.name, options.output_dir)
    write_explicit_spec(target, explicit_spec)

    result = ExportResult(environment=environment.name, platform=platform, explicit_spec_path=target)

    if options.unsupported_packages is UnsupportedPackagePolicy.WRITE_REQUIREMENTS:
        logger.info("Creating pypi requirements file")
        pypi_target = export_target(
            PYPI_REQUIREMENTS_FILE_TEMPLATE, platform, environment.name, options.output_dir
        )
        write_requirements(pypi_target, render_requirements(classified.pypi))
        result.requirements_path = pypi_target

    return result
