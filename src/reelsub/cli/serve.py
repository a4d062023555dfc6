"""reelsub serve command — local web player for upload, captions and editing."""

from __future__ import annotations

import webbrowser
from typing import Annotated, Optional

import typer

from reelsub.core.config import load_config
from reelsub.core.session import SessionController
from reelsub.player.server import PlayerApp, create_server
from reelsub.utils.console import console


def serve(
    port: Annotated[
        Optional[int],
        typer.Option("--port", "-p", help="Port to serve on."),
    ] = None,
    host: Annotated[
        Optional[str],
        typer.Option("--host", help="Host to bind to."),
    ] = None,
    no_open: Annotated[
        bool,
        typer.Option("--no-open", help="Don't open browser automatically."),
    ] = False,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="LiteLLM model (e.g. gemini/gemini-3-flash-preview)."),
    ] = None,
) -> None:
    """Serve the ReelSub player: upload a video, review and edit its captions."""
    config = load_config(
        **{
            "server.port": port,
            "server.host": host,
            "transcription.model": model,
        }
    )

    try:
        app = PlayerApp(SessionController(config), config)
        server = create_server(config, app)
    except OSError as e:
        console.print(f"[red]Cannot bind {config.server.host}:{config.server.port}:[/red] {e}")
        raise typer.Exit(1)

    url = f"http://{config.server.host}:{config.server.port}"
    console.print(f"[bold green]Serving:[/bold green] {url}")
    console.print(f"[bold]Model:[/bold] {config.transcription.model}")
    console.print("[dim]Press Ctrl+C to stop[/dim]")

    if config.server.open_browser and not no_open:
        webbrowser.open(url)

    try:
        server.serve_forever()
    except KeyboardInterrupt:
        console.print("\n[bold]Stopped.[/bold]")
    finally:
        server.server_close()
        app.close()
