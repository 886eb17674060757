from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from uploader.client.controller import SubmissionController
from uploader.client.selection import FileHandle

app = typer.Typer(help="Single-file media uploader: run the server or push a file to it")
console = Console()


class ConsoleView:
    """Renders controller state to the terminal; the spinner stands in for the progress bar."""

    def __init__(self, console: Console):
        self.console = console
        self._status = None

    def show_status(self, message: str) -> None:
        self.console.print(f"[cyan]Selected:[/] {message}")

    def set_busy(self, busy: bool) -> None:
        if busy:
            self._status = self.console.status("Uploading...")
            self._status.start()
        elif self._status is not None:
            self._status.stop()
            self._status = None

    def show_result(self, url: str) -> None:
        self.console.print(f"[bold green]Uploaded:[/] {url}")

    def show_error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/] {message}")


@app.command()
def serve(
    port: Optional[int] = typer.Option(None, "--port", help="Port to listen on (default: $PORT or 3000)"),
):
    """Run the upload server."""
    from uploader.app import create_app
    from uploader.config import load_settings

    environ = dict(os.environ)
    if port is not None:
        environ["PORT"] = str(port)
    settings = load_settings(environ)
    create_app(settings).run(host="0.0.0.0", port=settings.port)


@app.command()
def push(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="File to upload"),
    server: str = typer.Option("http://localhost:3000", "--server", help="Base URL of the upload server"),
):
    """Validate FILE and upload it, printing the public URL."""
    controller = SubmissionController(server, ConsoleView(console))
    if not controller.select(FileHandle.from_path(str(file))).accepted:
        raise typer.Exit(code=1)

    result = controller.submit()
    if not result or not result.get("success"):
        raise typer.Exit(code=1)


def main():
    app()


if __name__ == "__main__":
    main()
