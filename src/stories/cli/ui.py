"""
stories CLI - UI command.

Serve the web API (and the built web UI, when present) with uvicorn.
"""

import logging
import threading
import time
import webbrowser

import typer
from rich.console import Console

from stories.cli.context import is_debug, load_settings, open_registry

console = Console()
logger = logging.getLogger(__name__)


def ui(
    ctx: typer.Context,
    port: int = typer.Option(3000, "--port", "-p", help="Port to run the server on"),
    open_browser: bool = typer.Option(
        True,
        "--open/--no-open",
        help="Open the UI in the default browser",
    ),
) -> None:
    """
    Launch the web UI for visual story management.

    Examples:
        stories ui                  # Launch on default port 3000
        stories ui --port 8080
        stories ui --no-open        # Don't open browser
    """
    config = load_settings(ctx)
    debug = is_debug(ctx)

    try:
        import uvicorn

        from stories.api.app import create_app
    except ImportError as e:
        console.print(
            f"[red]Error:[/red] Web UI dependencies not installed. Missing module: {e.name}"
        )
        console.print("[dim]Install with: pip install fastapi uvicorn[/dim]")
        raise typer.Exit(1) from None

    fastapi_app = create_app(config.database.path, config=config, registry=open_registry(config))

    url = f"http://localhost:{port}"
    console.print("\n[bold cyan]🚀 Starting Stories UI server...[/bold cyan]")
    console.print(f"[dim]Server: {url}[/dim]")
    console.print(f"[dim]Database: {config.database.path}[/dim]")
    console.print(f"[dim]API docs: {url}/docs[/dim]")

    if open_browser:

        def _open() -> None:
            time.sleep(2.0)  # Wait for server to start
            if not webbrowser.open(url):
                console.print(f"[yellow]Could not auto-open browser. Please visit {url}[/yellow]")

        threading.Thread(target=_open, daemon=True).start()

    console.print("\n[dim]Press Ctrl+C to stop[/dim]\n")

    try:
        uvicorn.run(
            fastapi_app,
            host="127.0.0.1",
            port=port,
            log_level="info" if debug else "warning",
        )
    except KeyboardInterrupt:
        pass
    console.print("\n[yellow]🛑 UI server stopped[/yellow]")
