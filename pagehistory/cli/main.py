"""
pagehistory CLI

Main entrypoint for the pagehistory command-line tool.
"""

from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .. import __version__
from ..logging_config import setup_logging
from .commands import history, replay

app = typer.Typer(
    name="pagehistory",
    help="Reconstruct past states of a page from its commit log",
    add_completion=False,
)

console = Console()

app.command(name="replay")(replay.replay_command)
app.command(name="show")(replay.show_command)
app.command(name="history")(history.history_command)


@app.callback()
def configure(
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="DEBUG, INFO, WARNING or ERROR (default: $PAGEHISTORY_LOG_LEVEL)"
    ),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="text or json (default: $PAGEHISTORY_LOG_FORMAT)"
    ),
):
    """Reconstruct past states of a page from its commit log."""
    setup_logging(level=log_level, log_format=log_format)


@app.command()
def version():
    """Show version information."""
    table = Table(show_header=False, box=None)
    table.add_row("[bold]pagehistory[/bold]", f"v{__version__}")
    table.add_row("Engine", "reverse replay")
    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
