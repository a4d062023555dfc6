"""reelsub transcribe command — headless captioning of video files."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.table import Table

from reelsub.cli.utils import expand_inputs
from reelsub.core.config import ReelsubConfig, load_config
from reelsub.core.media import local_file
from reelsub.core.models import Phase
from reelsub.core.session import SessionController
from reelsub.subtitles.converter import FORMATS, save_captions
from reelsub.utils.console import console


def transcribe(
    inputs: Annotated[
        list[str],
        typer.Argument(help="File paths or glob patterns. Accepts multiple inputs."),
    ],
    fmt: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: vtt, srt, ass, txt."),
    ] = "vtt",
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file path. Default: <input>.<fmt>"),
    ] = None,
    model: Annotated[
        Optional[str],
        typer.Option("--model", "-m", help="LiteLLM model (e.g. gemini/gemini-3-flash-preview)."),
    ] = None,
    language: Annotated[
        Optional[list[str]],
        typer.Option("--language", "-l", help="Spoken language code; repeat for several."),
    ] = None,
) -> None:
    """Caption video files without the web player.

    Accepts multiple inputs — files, glob patterns (*.mp4), or .txt files
    containing one path per line.
    """
    from reelsub.core.languages import validate_language

    if fmt not in FORMATS:
        console.print(f"[red]Unsupported format:[/red] {fmt}")
        raise typer.Exit(1)

    if language:
        try:
            for code in language:
                validate_language(code)
        except ValueError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    config = load_config(**{"transcription.model": model, "transcription.languages": language})

    expanded = expand_inputs(inputs)
    if not expanded:
        console.print("[red]No inputs resolved. Check your paths or patterns.[/red]")
        raise typer.Exit(1)

    if len(expanded) == 1:
        try:
            _transcribe_single(expanded[0], config, fmt, output)
        except RuntimeError as e:
            console.print(f"[red]Failed:[/red] {e}")
            raise typer.Exit(1)
        return

    if output is not None:
        console.print("[yellow]--output ignored in batch mode (auto-naming per file).[/yellow]")

    results: list[tuple[str, str, str]] = []
    console.print(f"[bold]Batch transcribing {len(expanded)} inputs...[/bold]\n")

    for i, input_path in enumerate(expanded, 1):
        console.rule(f"[bold][{i}/{len(expanded)}] {input_path}[/bold]")
        try:
            _transcribe_single(input_path, config, fmt, None)
            results.append((input_path, "success", ""))
        except RuntimeError as e:
            console.print(f"[red]Failed:[/red] {e}")
            results.append((input_path, "failed", str(e)))

    console.print()
    table = Table(title=f"Batch Results ({len(expanded)} files)")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Input", max_width=50, no_wrap=True)
    table.add_column("Status")

    succeeded = 0
    for i, (inp, status, _) in enumerate(results, 1):
        style = "green" if status == "success" else "red"
        table.add_row(str(i), inp, f"[{style}]{status}[/{style}]")
        if status == "success":
            succeeded += 1

    console.print(table)
    console.print(f"\n[bold]{succeeded}/{len(expanded)} succeeded[/bold]")


def _transcribe_single(
    input_path: str,
    config: ReelsubConfig,
    fmt: str,
    output: Path | None,
) -> Path:
    """Run one file through the session flow and save its captions.

    Raises:
        RuntimeError: With the session's error message if the run ends in ERROR.
    """
    video_path = Path(input_path)
    controller = SessionController(config)

    console.print(f"[bold]Processing:[/bold] {video_path}")
    session = controller.process(local_file(video_path))
    if session.phase is not Phase.READY:
        message = session.error or "Transcription did not complete"
        controller.reset()
        raise RuntimeError(message)

    sub_path = output if output is not None else video_path.with_suffix(f".{fmt}")
    save_captions(session.captions, sub_path, fmt=fmt)
    console.print(f"[green]Saved:[/green] {sub_path} ({len(session.captions)} captions)")

    controller.reset()
    return sub_path
