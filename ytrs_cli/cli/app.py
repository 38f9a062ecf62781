"""
Defines the command-line interface for the application using Typer.
"""

import asyncio
import logging
from pathlib import Path

import click
import typer
from rich.console import Console
from rich.logging import RichHandler

from ytrs_cli import __version__
from ytrs_cli.core.dispatcher import Dispatcher
from ytrs_cli.core.routing import build_request
from ytrs_cli.exceptions import InvalidRequestError
from ytrs_cli.storage.config_manager import ConfigManager
from ytrs_cli.storage.paths import PathResolver

console = Console()
err_console = Console(stderr=True)

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=err_console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("ytrs_cli")

app = typer.Typer(
    name="ytrs",
    help=(
        "Download, stream and summarize YouTube media. SOURCE is a URL, a local"
        " media file or search terms."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool):
    if value:
        console.print(f"[bold]ytrs[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()


@app.command()
def main(
    source: list[str] | None = typer.Argument(  # noqa: B008
        None,
        metavar="SOURCE",
        help="A video URL, a local media file, or search terms.",
        show_default=False,
    ),
    libs_path: Path | None = typer.Option(
        None,
        "-l",
        "--libs-path",
        help="Install the libraries under <PATH>/libs instead of the default.",
        rich_help_panel="Paths",
    ),
    output_path: Path | None = typer.Option(
        None,
        "-o",
        "--output-path",
        help="Write files to <PATH>/output instead of the default.",
        rich_help_panel="Paths",
    ),
    install: bool = typer.Option(
        False,
        "--install",
        help="Install yt-dlp and ffmpeg into the libraries directory and exit.",
        rich_help_panel="Paths",
    ),
    audio: bool = typer.Option(
        False,
        "-a",
        "--audio",
        help="Download or play audio only.",
        rich_help_panel="Media",
    ),
    video: bool = typer.Option(
        False,
        "-V",
        "--video",
        help="Download or play video.",
        rich_help_panel="Media",
    ),
    media_format: str | None = typer.Option(
        None,
        "-f",
        "--format",
        help="Container format: mp3, wav (audio) or mp4, avi, mov (video).",
        rich_help_panel="Media",
    ),
    play: bool = typer.Option(
        False,
        "-p",
        "--play",
        help="Play the file after downloading it.",
        rich_help_panel="Media",
    ),
    stream: bool = typer.Option(
        False,
        "-s",
        "--stream",
        help="Stream with mpv without downloading.",
        rich_help_panel="Media",
    ),
    transcript: bool = typer.Option(
        False,
        "-t",
        "--transcript",
        help="Download subtitles or captions.",
        rich_help_panel="Transcripts",
    ),
    language: str | None = typer.Option(
        None,
        "--lang",
        help="Subtitle language code, e.g. 'en'.",
        rich_help_panel="Transcripts",
    ),
    summarize: bool | None = typer.Option(
        None,
        "--summarize/--no-summarize",
        help="Summarize the transcript with Ollama. Asks when omitted.",
        show_default=False,
        rich_help_panel="Transcripts",
    ),
    model: str | None = typer.Option(
        None,
        "-m",
        "--model",
        help="Ollama model used for the summary.",
        rich_help_panel="Transcripts",
    ),
    init_config: bool = typer.Option(
        False,
        "--init-config",
        help="Write a config.ini holding the default settings and exit.",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        is_eager=True,
        callback=_version_callback,
    ),
):
    """ytrs: a YouTube downloader, player and transcript summarizer."""
    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("ytrs_cli").setLevel(log_level)

    if init_config:
        paths = PathResolver().resolve(libs_path, output_path)
        config_manager = ConfigManager(paths.config_file)
        if (
            paths.config_file is not None
            and paths.config_file.exists()
            and not typer.confirm("Configuration file already exists. Overwrite it?")
        ):
            raise typer.Abort()
        saved = config_manager.save_new_config()
        console.print(f"[bold green]✓ Configuration saved to '{saved}'[/bold green]")
        raise typer.Exit()

    try:
        request = build_request(
            source=" ".join(source) if source else None,
            libs_path=libs_path,
            output_path=output_path,
            audio=audio,
            video=video,
            media_format=media_format,
            transcript=transcript,
            stream=stream,
            play=play,
            language=language,
            summarize=summarize,
            model=model,
            install=install,
        )
    except InvalidRequestError as e:
        raise click.UsageError(str(e)) from e

    paths = PathResolver().resolve(request.libs_override, request.output_override)
    config = ConfigManager(paths.config_file).load_config()
    log.debug(f"Libraries: '{paths.libs_dir}', output: '{paths.output_dir}'.")

    try:
        asyncio.run(Dispatcher(paths, config, console).dispatch(request))
    except KeyboardInterrupt:
        err_console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        raise typer.Exit(0)
