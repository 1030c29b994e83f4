import asyncio
from pathlib import Path
from typing import Optional
from typing_extensions import Annotated

import rich
import typer
from rich.markup import escape
from rattler.exceptions import ParseSubdirError

from condex._src.constants import LockFileUsage, UnsupportedPackagePolicy
from condex._src.exceptions import ExportError
from condex._src.export import ExportOptions, export_conda_explicit_spec
from condex._src.project import Project
from condex._src.utils import parse_platform


export_command = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _platform_callback(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return parse_platform(value)
    except ParseSubdirError as err:
        raise typer.BadParameter(f"unknown platform '{value}'") from err


@export_command.command("conda-explicit-spec")
def conda_explicit_spec(
    ctx: typer.Context,
    environment: Annotated[Optional[str], typer.Option(
        "--environment", "-e",
        help="environment to render"
    )] = None,
    platform: Annotated[Optional[str], typer.Option(
        help="the platform to render. Defaults to the current platform",
        callback=_platform_callback,
    )] = None,
    ignore_pypi_errors: Annotated[bool, typer.Option(
        "--ignore-pypi-errors",
        help="PyPI dependencies are not supported in the conda spec file. "
        "Create the spec file even if PyPI dependencies are present. "
        "Alternatively see --write-pypi-requirements"
    )] = False,
    write_pypi_requirements: Annotated[bool, typer.Option(
        "--write-pypi-requirements",
        help="write a requirements file containing all pypi dependencies"
    )] = False,
    frozen: Annotated[bool, typer.Option(
        "--frozen",
        help="use the lock file as it is, without updating it"
    )] = False,
    locked: Annotated[bool, typer.Option(
        "--locked",
        help="fail if the lock file is not up-to-date with the manifest"
    )] = False,
    manifest_path: Annotated[Optional[Path], typer.Option(
        "--manifest-path",
        help="path to pixi.toml or pyproject.toml, defaults to searching from the current directory"
    )] = None,
    output_dir: Annotated[Optional[Path], typer.Option(
        "--output-dir",
        help="directory to write to, defaults to the current directory"
    )] = None,
):
    """Export a conda explicit specification file for an environment"""
    try:
        unsupported_packages = UnsupportedPackagePolicy.from_flags(ignore_pypi_errors, write_pypi_requirements)
        lock_file_usage = LockFileUsage.from_flags(locked=locked, frozen=frozen)
    except ValueError as err:
        raise typer.BadParameter(str(err)) from err

    options = ExportOptions(
        environment=environment,
        platform=platform,
        unsupported_packages=unsupported_packages,
        lock_file_usage=lock_file_usage,
        output_dir=output_dir,
    )

    try:
        if manifest_path is None:
            project = Project.discover()
        else:
            project = Project.from_manifest(manifest_path)
        result = asyncio.run(export_conda_explicit_spec(project, options))
    except ExportError as err:
        rich.print(f"[red]Error:[/red] {escape(err.msg)}")
        raise typer.Exit(code=1)

    rich.print(f"wrote [bold]{result.explicit_spec_path}[/bold]")
    if result.requirements_path is not None:
        rich.print(f"wrote [bold]{result.requirements_path}[/bold]")
