"""ReelSub CLI entry point."""

from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from reelsub import __version__
from reelsub.cli.serve import serve
from reelsub.cli.transcribe import transcribe

app = typer.Typer(
    name="reelsub",
    help="ReelSub — bilingual (RU/FR) one-line captions for short videos.",
    no_args_is_help=True,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"reelsub {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """ReelSub — bilingual (RU/FR) one-line captions for short videos."""
    # Load .env file for API keys (GEMINI_API_KEY, etc.)
    # Does not override existing env vars — shell exports take precedence
    load_dotenv(override=False)


app.command("serve")(serve)
app.command("transcribe")(transcribe)
