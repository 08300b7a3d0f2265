import subprocess
import sys
import webbrowser
from typing import Optional

import typer
from rich.console import Console

from booknotes.config import settings
from booknotes.library import Library
from booknotes.sorting import SortMode
from booknotes.ui_helpers import print_list_result, print_stats_result, set_output_mode

console = Console()

app = typer.Typer(help="Book Notes CLI")


def _library(db_file: Optional[str]) -> Library:
    return Library(db_file or settings.database_file)


@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global CLI options (output mode)."""
    if output:
        set_output_mode(output)


@app.command("init-db")
def cli_init_db(db_file: Optional[str] = typer.Option(None, "--db", help="SQLite file (default: LIBRARY_DB_FILE)")):
    """Create the notes table if it does not exist."""
    lib = _library(db_file)
    print(f"Database ready: {lib.db_file}")


@app.command("list")
def cli_list(
    sort: str = typer.Option("date_new", "--sort", "-s", help="date_new | date_old | rating_high | rating_low"),
    db_file: Optional[str] = typer.Option(None, "--db", help="SQLite file (default: LIBRARY_DB_FILE)"),
):
    """List all notes."""
    result = _library(db_file).list_notes(SortMode.parse(sort))
    if not result.ok:
        print(f"Could not read notes: {result.error}")
        raise typer.Exit(code=1)
    print_list_result(result.value)


@app.command("stats")
def cli_stats(db_file: Optional[str] = typer.Option(None, "--db", help="SQLite file (default: LIBRARY_DB_FILE)")):
    """Show totals and the average rating."""
    result = _library(db_file).get_statistics()
    if not result.ok:
        print(f"Could not read statistics: {result.error}")
        raise typer.Exit(code=1)
    print_stats_result(result.value)


@app.command("serve")
def cli_serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (default: API_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", help="Port (default: API_PORT)"),
    open_browser: bool = typer.Option(True, "--open/--no-open", help="Open the list page in a browser"),
):
    """Start the web UI with Uvicorn."""
    host = host or settings.api_host
    port = int(port or settings.api_port)
    url = f"http://{host}:{port}/"
    print(f"Starting web UI on {url}")

    if open_browser:
        try:
            webbrowser.open(url)
        except webbrowser.Error:
            console.print("[yellow]Could not open a web browser automatically.[/]")

    args = [
        sys.executable,
        "-m", "uvicorn",
        "booknotes.api:app",
        "--host", host,
        "--port", str(port),
    ]
    try:
        subprocess.run(args, check=False)
    except KeyboardInterrupt:
        print("Server stopped.")


if __name__ == "__main__":
    app()
