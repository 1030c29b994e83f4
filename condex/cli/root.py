import typer
from typing_extensions import Annotated

from condex._src.logging_utils import configure_logging
from condex.cli.export import export_command


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

project_command = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

project_command.add_typer(
    export_command,
    name="export",
    help="export the workspace lock to other formats",
)

app.add_typer(
    project_command,
    name="project",
    help="work with the pixi workspace",
    rich_help_panel="Project",
)


@app.callback()
def main(
    verbose: Annotated[int, typer.Option(
        "--verbose", "-v",
        count=True,
        help="increase logging verbosity"
    )] = 0,
):
    """Export pixi lock files to conda explicit specs and pip requirements"""
    configure_logging(verbose)
