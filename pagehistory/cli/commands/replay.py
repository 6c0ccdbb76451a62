"""
Replay commands: reconstruct snapshots, show one snapshot
"""

import json
from datetime import datetime, timezone
from typing import Optional, Tuple

import typer
from rich.console import Console
from rich.table import Table

from ...config import ReplayConfig
from ...core.canonical import snapshot_digest, snapshot_to_list
from ...core.errors import PageHistoryError
from ...log import FileCommitLog, load_page_lines
from ...query import count_placeholders, nearest_timestamp, snapshot_at_index
from ...replay import Reconstruction, reconstruct_from_log

console = Console()

PAGE_OPTION = typer.Option(..., "--page", "-p", help="Path to page JSON (current lines)")
COMMITS_OPTION = typer.Option(..., "--commits", "-c", help="Path to commits JSON or JSONL")


def format_ts(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def run_reconstruction(page_path: str, commits_path: str) -> Reconstruction:
    lines = load_page_lines(page_path)
    log = FileCommitLog(commits_path)
    return reconstruct_from_log(log, lines, config=ReplayConfig.from_env(), trace_id=page_path)


def fail(message: str, json_output: bool, path: Optional[str] = None) -> typer.Exit:
    if json_output:
        out = {"error": message}
        if path:
            out["path"] = path
        print(json.dumps(out))
    else:
        console.print(f"[red]Error:[/red] {message}" + (f" {path}" if path else ""))
    return typer.Exit(2)


def _load(page_path: str, commits_path: str, json_output: bool) -> Reconstruction:
    try:
        return run_reconstruction(page_path, commits_path)
    except FileNotFoundError as e:
        raise fail("File not found:", json_output, str(e.filename or e)) from e
    except PageHistoryError as e:
        raise fail(str(e), json_output) from e


def replay_command(
    page_path: str = PAGE_OPTION,
    commits_path: str = COMMITS_OPTION,
    show_diagnostics: bool = typer.Option(
        False, "--diagnostics", "-d", help="List orphaned references and unresolved lines"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Reconstruct the page at every commit and summarize the snapshots.

    Examples:
        pagehistory replay -p page.json -c commits.json
        pagehistory replay -p page.json -c commits.json --diagnostics
        pagehistory replay -p page.json -c commits.json --json
    """
    result = _load(page_path, commits_path, json_output)
    stamps = result.range()

    if json_output:
        output = {
            "range": stamps,
            "snapshots": {
                str(ts): {
                    "lines": len(result.snapshots[ts]),
                    "placeholders": count_placeholders(result.snapshots[ts]),
                    "digest": snapshot_digest(result.snapshots[ts]),
                }
                for ts in stamps
            },
        }
        if show_diagnostics:
            output["diagnostics"] = [
                {"kind": d.kind, "ts": d.ts, "line_id": d.line_id, "message": d.message}
                for d in result.diagnostics
            ]
        print(json.dumps(output, indent=2))
        return

    if not stamps:
        console.print("[yellow]No history found[/yellow]")
        return

    table = Table(title=f"Snapshots: {page_path}")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Timestamp", style="cyan")
    table.add_column("Time (UTC)", style="green")
    table.add_column("Lines", justify="right")
    table.add_column("Placeholders", style="yellow", justify="right")
    table.add_column("Digest (prefix)", style="dim")

    for idx, ts in enumerate(stamps):
        lines = result.snapshots[ts]
        table.add_row(
            str(idx),
            str(ts),
            format_ts(ts),
            str(len(lines)),
            str(count_placeholders(lines)),
            snapshot_digest(lines)[:16],
        )

    console.print(table)
    console.print(f"\n[bold]Total snapshots:[/bold] {len(stamps)}")

    if show_diagnostics:
        if not result.diagnostics:
            console.print("[green]No diagnostics[/green]")
        for d in result.diagnostics:
            console.print(f"  [yellow]{d.kind}[/yellow] at {d.ts}: {d.message}")
    elif result.diagnostics:
        console.print(f"[yellow]{len(result.diagnostics)} diagnostics[/yellow] (use --diagnostics)")


def _select(result: Reconstruction, at: Optional[int], index: int) -> Tuple[Optional[int], str]:
    if at is not None:
        ts = nearest_timestamp(result.snapshots, at)
        return ts, f"no snapshot at or before {at}"
    return snapshot_at_index(result.snapshots, index), f"no snapshot at position {index}"


def show_command(
    page_path: str = PAGE_OPTION,
    commits_path: str = COMMITS_OPTION,
    at: Optional[int] = typer.Option(None, "--at", "-t", help="Timestamp (latest snapshot at or before it)"),
    index: int = typer.Option(-1, "--index", "-i", help="Position in the ascending range (-1 = newest)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Print the page text at one point in time.

    Examples:
        pagehistory show -p page.json -c commits.json
        pagehistory show -p page.json -c commits.json --index 0
        pagehistory show -p page.json -c commits.json --at 1700000000 --json
    """
    result = _load(page_path, commits_path, json_output)
    ts, reason = _select(result, at, index)
    if ts is None:
        raise fail(reason, json_output)

    if json_output:
        print(json.dumps({"ts": ts, "lines": snapshot_to_list(result.snapshots[ts])}, indent=2))
        return

    console.print(f"[bold cyan]{format_ts(ts)}[/bold cyan] [dim]({ts})[/dim]")
    for text in result.get_snapshot_text(ts):
        console.print(text, markup=False, highlight=False)
