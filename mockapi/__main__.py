"""CLI for the mockapi server.

Usage:
    python -m mockapi serve db.json                  # Serve on :3001
    python -m mockapi serve db.json -p 8080 --watch  # Custom port, reload on edit
    python -m mockapi serve db.json -r -d 300        # Read-only, 300ms latency
    python -m mockapi init                           # Write an example db.json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from mockapi import __version__
from mockapi.config import Settings
from mockapi.core.errors import DataFileError
from mockapi.infrastructure.observability import setup_logging
from mockapi.server import MockApiServer

app = typer.Typer(
    name="mockapi",
    help="Spin up a mock REST API server from a JSON file",
    no_args_is_help=True,
)
console = Console(stderr=True)

DEFAULT_DATA_FILE = Path("db.json")

EXAMPLE_DATA = {
    "users": [
        {"id": 1, "name": "Alice", "email": "alice@example.com"},
        {"id": 2, "name": "Bob", "email": "bob@example.com"},
        {"id": 3, "name": "Charlie", "email": "charlie@example.com"},
    ],
    "posts": [
        {"id": 1, "title": "Hello World", "body": "First post content", "userId": 1},
        {"id": 2, "title": "Second Post", "body": "More content here", "userId": 1},
        {"id": 3, "title": "Bob's Post", "body": "Bob's content", "userId": 2},
    ],
    "comments": [
        {"id": 1, "body": "Great post!", "postId": 1, "userId": 2},
        {"id": 2, "body": "Thanks!", "postId": 1, "userId": 1},
    ],
}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """mockapi: REST routes for every collection in a JSON file."""


@app.command("serve")
def cmd_serve(
    data_file: Optional[Path] = typer.Argument(None, help="JSON data file (default: ./db.json)"),
    port: int = typer.Option(3001, "--port", "-p", help="Port to listen on"),
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    delay: int = typer.Option(0, "--delay", "-d", min=0, help="Delay every response by N ms"),
    watch: bool = typer.Option(False, "--watch", "-w", help="Reload when the file changes"),
    readonly: bool = typer.Option(False, "--readonly", "-r", help="Disable POST/PUT/PATCH/DELETE"),
    cors: bool = typer.Option(True, "--cors/--no-cors", help="Send CORS headers"),
    log_format: str = typer.Option("text", "--log-format", help="text or json"),
) -> None:
    """Start the server for a data file."""
    if data_file is None:
        if not DEFAULT_DATA_FILE.exists():
            console.print("[red]✗[/red] Please specify a JSON data file")
            console.print("[blue]ℹ[/blue] Run [bold]mockapi init[/bold] to create an example db.json")
            raise typer.Exit(1)
        data_file = DEFAULT_DATA_FILE
    if not data_file.exists():
        console.print(f"[red]✗[/red] File not found: {data_file}")
        raise typer.Exit(1)
    if log_format not in ("text", "json"):
        console.print(f"[red]✗[/red] Invalid log format: {log_format}. Choose: text, json")
        raise typer.Exit(1)

    settings = Settings(
        data_file=data_file.resolve(), host=host, port=port, delay=delay,
        watch=watch, readonly=readonly, cors=cors, log_format=log_format,
    )
    setup_logging(settings.log_level, settings.log_format)

    if readonly:
        console.print("[blue]ℹ[/blue] Running in read-only mode")
    if delay > 0:
        console.print(f"[blue]ℹ[/blue] Simulating {delay}ms latency")
    if watch:
        console.print("[blue]ℹ[/blue] Watching for file changes")

    try:
        server = MockApiServer(settings)
    except DataFileError as e:
        console.print(f"[red]✗[/red] {e.message}")
        raise typer.Exit(1)
    server.listen()


@app.command("init")
def cmd_init(
    path: Path = typer.Argument(DEFAULT_DATA_FILE, help="Where to write the example data"),
) -> None:
    """Create an example data file."""
    if path.exists():
        console.print(f"[red]✗[/red] {path} already exists")
        raise typer.Exit(1)
    path.write_text(json.dumps(EXAMPLE_DATA, indent=2), encoding="utf-8")
    console.print(f"[green]✓[/green] Created {path} with example data")
    console.print(f"[blue]ℹ[/blue] Run: mockapi serve {path}")


if __name__ == "__main__":
    app()
