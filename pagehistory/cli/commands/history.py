"""
History command: per-line history of a commit log
"""

import json

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...core.errors import PageHistoryError
from ...log import FileCommitLog
from ...replay import build_line_history
from .replay import COMMITS_OPTION, fail, format_ts

console = Console()


def history_command(
    commits_path: str = COMMITS_OPTION,
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List every line of the page with the changes recorded for it.

    Examples:
        pagehistory history -c commits.json
        pagehistory history -c commits.json --json
    """
    try:
        result = build_line_history(FileCommitLog(commits_path).read(), trace_id=commits_path)
    except FileNotFoundError as e:
        raise fail("File not found:", json_output, str(e.filename or e)) from e
    except PageHistoryError as e:
        raise fail(str(e), json_output) from e

    if json_output:
        output = {
            "range": result.range,
            "history": [
                {
                    "id": line.id,
                    "snapshots": {
                        str(ts): {"type": ev.kind, "text": ev.text, "userId": ev.author}
                        for ts, ev in sorted(line.snapshots.items())
                    },
                }
                for line in result.history
            ],
        }
        print(json.dumps(output, indent=2))
        return

    if not result.history:
        console.print("[yellow]No history found[/yellow]")
        return

    table = Table(title=f"Line history: {commits_path}")
    table.add_column("Line", style="cyan")
    table.add_column("Time (UTC)", style="green")
    table.add_column("Change", style="yellow")
    table.add_column("Text")
    table.add_column("Author", style="dim")

    for line in result.history:
        for ts, ev in sorted(line.snapshots.items()):
            table.add_row(line.id, format_ts(ts), ev.kind, Text(ev.text or ""), ev.author or "")

    console.print(table)
    console.print(f"\n[bold]Lines:[/bold] {len(result.history)}  [bold]Commits:[/bold] {len(result.range)}")
