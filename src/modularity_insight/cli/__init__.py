"""CLI entry point; registers all subcommands."""

from typing import Optional

import typer

from .. import __version__
from ._common import console

app = typer.Typer(
    name="modularity-insight",
    help="Modularity Insight - module coupling and community structure analyzer",
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"modularity-insight {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """Measure how a codebase's modules depend on each other."""


# Import subcommands to register them
from .audit import audit as _audit  # noqa: F401, E402


def main() -> None:
    app()
