# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# snapdiff/src/snapdiff/cli.py

"""Command line interface for snapdiff."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from .config import LOG_FILE, DiffConfig
from .diff import SnapshotDiff
from .errors import ResultDirError, SnapshotDiffError
from .summary import load_events, summarize

app = typer.Typer(help="Extract replay-ordered diffs between storage snapshots")
console = Console()


@app.command()
def diff(
    snap_dir: Path = typer.Argument(..., help="Snapshot diff stream root"),
    snap1: str = typer.Argument(..., help="Source snapshot identifier"),
    snap2: str = typer.Argument(..., help="Target snapshot identifier"),
    result_dir: Path = typer.Argument(..., help="Empty directory for results"),
    no_json: bool = typer.Option(False, "--no-json",
                                 help="Stop after writing serialized_diff"),
    keep_buckets: bool = typer.Option(False, "--keep-buckets",
                                      help="Keep per-level bucket files"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging")
) -> None:
    """Read the diff between SNAP1 and SNAP2 into RESULT_DIR."""
    config = DiffConfig(gen_json=not no_json, keep_buckets=keep_buckets)
    try:
        result = SnapshotDiff(snap_dir, snap1, snap2, result_dir,
                              config).run(debug=debug)
    except SnapshotDiffError as e:
        # Without a log file the reason would be lost.
        if (debug or isinstance(e, ResultDirError)
                or not (result_dir / LOG_FILE).is_file()):
            typer.echo(f"Error: {e}", err=True)
        typer.echo("Snapshot diff operation failed, please check log file "
                   "for details", err=True)
        raise typer.Exit(1)

    if debug:
        console.print(f"[blue]Pages:[/blue] {result.page_count}  "
                      f"[blue]Levels:[/blue] {result.bucket_count}  "
                      f"[blue]JSON files:[/blue] {result.json_count}")
    console.print("Snapshot diff operation completed successfully, "
                  f"result exported to {result_dir}")


@app.command()
def summary(
    result_dir: Path = typer.Argument(..., help="Result directory of a run"),
    output_format: str = typer.Option("summary", "--format", "-f",
                                      help="Output format: summary, table")
) -> None:
    """Summarize the change events of a finished run."""
    try:
        events = list(load_events(result_dir))
    except (SnapshotDiffError, OSError, ValueError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if output_format == "summary":
        _print_summary(events)
    elif output_format == "table":
        _print_table(events)
    else:
        typer.echo(f"Unknown format: {output_format}", err=True)
        raise typer.Exit(1)


def _print_summary(events: list[dict]) -> None:
    counts = summarize(events)
    by_type = counts["by_type"]

    console.print(f"\n[bold]Summary of {len(events)} changes:[/bold]")
    for event_type in ("file", "dir", "symlink", "rename", "delete"):
        console.print(f"  {event_type}: {by_type.get(event_type, 0)}")

    if counts["created"]:
        console.print("\n[bold]Created:[/bold]")
        for object_type, count in counts["created"].most_common():
            console.print(f"  {object_type}: {count}")

    if counts["deleted"]:
        console.print("\n[bold]Deleted:[/bold]")
        for object_type, count in counts["deleted"].most_common():
            console.print(f"  {object_type}: {count}")


def _print_table(events: list[dict]) -> None:
    table = Table(title="Snapshot Changes")
    table.add_column("Type", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Flags", style="yellow")
    table.add_column("Details", style="magenta")

    for event in events[:50]:  # Limit to first 50
        path = event.get("path") or event.get("path_old", "")
        flags = "".join(
            letter for letter, key in (("C", "created"), ("M", "modified"),
                                       ("S", "stat"), ("X", "xattr"))
            if event.get(key)
        )
        details = ""
        if event["type"] == "rename":
            details = f"→ {event['path_new']}"
        elif event.get("target"):
            details = f"→ {event['target']}"
        elif event["type"] == "delete":
            details = event["object_type"]
        elif "size" in event:
            details = f"size: {event['size']}"

        table.add_row(
            event["type"],
            path[:60] + "..." if len(path) > 60 else path,
            flags,
            details
        )

    if len(events) > 50:
        table.add_row("...", f"({len(events) - 50} more)", "", "")

    console.print(table)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
