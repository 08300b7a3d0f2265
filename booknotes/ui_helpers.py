import json
import os
from typing import Any, Dict, List

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

# Environment variable that selects CLI output: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKNOTES_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_list_result(books: List[Any]) -> None:
    """Print notes in the current output mode.
    - plain: 'ID. Title by Author (rating/10, date)' lines, or 'No notes yet.'
    - json: array of note dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not books:
        print("No notes yet.")
        return

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title="Book Notes", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Rating", justify="right")
        table.add_column("Read", no_wrap=True)
        for b in books:
            table.add_row(str(b.id), b.title, b.author, f"{b.rating}/10", b.date_read.isoformat())
        _console.print(table)
    else:
        for b in books:
            print(f"{b.id}. {b.title} by {b.author} ({b.rating}/10, {b.date_read.isoformat()})")


def print_stats_result(stats: Dict[str, Any]) -> None:
    """Print statistics in the current output mode."""
    mode = get_output_mode()

    if not stats:
        print("No statistics available.")
        return

    total = stats.get("total_notes", 0)
    authors = stats.get("unique_authors", 0)
    average = stats.get("average_rating")
    average_text = f"{average:.2f}" if average is not None else "-"

    if mode == "json":
        print(json.dumps({"total_notes": total, "unique_authors": authors, "average_rating": average}))
    elif mode == "rich":
        content = (
            f"[bold]Total Notes:[/] {total}\n"
            f"[bold]Unique Authors:[/] {authors}\n"
            f"[bold]Average Rating:[/] {average_text}"
        )
        _console.print(Panel.fit(content, title="Stats", border_style="blue"))
    else:
        print(f"Total Notes: {total}")
        print(f"Unique Authors: {authors}")
        print(f"Average Rating: {average_text}")
