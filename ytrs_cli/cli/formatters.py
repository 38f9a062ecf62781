"""
Functions for formatting and displaying data in the console using Rich.
"""

from pathlib import Path

from rich import box
from rich.console import Group
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ytrs_cli.exceptions import ExternalProcessError
from ytrs_cli.models.config import AppPaths
from ytrs_cli.models.media import MediaInfo, SearchResult
from ytrs_cli.utils.formatting import format_count, format_size, format_time


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check that HOME (or USERPROFILE on Windows) is set.",
            "• Pass explicit directories with -l and -o.",
            "• Fix or remove ~/.config/ytrs/config.ini.",
        ],
        "DependencyFetchError": [
            "• Check your internet connection.",
            "• Make sure the libraries directory is writable.",
            "• Retry with `ytrs --install`, or raise `fetch_attempts` in config.ini.",
        ],
        "PlayerNotFoundError": [
            "• Install mpv with your package manager (e.g. `apt install mpv`).",
            "• Make sure the `mpv` executable is on your PATH.",
        ],
        "SummarizerError": [
            "• Start the Ollama server with `ollama serve`.",
            "• Check `ollama_host` in config.ini.",
            "• Pull a model first, e.g. `ollama pull llama3`.",
        ],
        "ExternalProcessError": [
            "• The downloader may be outdated. Delete it from the libraries "
            "directory and run `ytrs --install`.",
            "• Check that the URL is reachable in a browser.",
        ],
        "DownloadError": [
            "• A network connection issue occurred.",
            "• Please try again in a few minutes.",
        ],
        "MediaNotFoundError": [
            "• Try different search terms or pass a full URL.",
            "• Omit --lang to choose from the available languages.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    if isinstance(error, ExternalProcessError) and error.argv:
        content.add_row(Text(f"Command: {' '.join(error.argv)}", style="dim"))
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def build_paths_table(
    paths: AppPaths, libraries: list[tuple[str, Path | str, bool]]
) -> Panel:
    """Shows the directories in use and the state of each library."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Libraries:", str(paths.libs_dir))
    table.add_row("Output:", str(paths.output_dir))
    if paths.config_file is not None:
        table.add_row("Config file:", f"[dim]{paths.config_file}[/dim]")
    table.add_row("", "")
    for name, path, present in libraries:
        status = "[green]✓ installed[/green]" if present else "[red]✗ missing[/red]"
        if present and isinstance(path, Path) and path.is_file():
            status += f" ({format_size(path.stat().st_size)})"
        table.add_row(f"{name}:", f"{status} [dim]{path}[/dim]")

    return Panel(table, title="[bold]ytrs[/bold]", border_style="cyan", expand=False)


def describe_search_result(result: SearchResult) -> str:
    """One line per search hit: title, channel, length and views."""
    parts = [escape(result.title)]
    if result.channel:
        parts.append(f"[dim]{escape(result.channel)}[/dim]")
    if result.duration is not None:
        parts.append(format_time(result.duration))
    if result.view_count is not None:
        parts.append(f"{format_count(result.view_count)} views")
    return "  ".join(parts)


def build_description_panel(info: MediaInfo) -> Panel:
    """Shows the video description, used when there is no transcript."""
    header = Text(info.title, style="bold")
    if info.channel:
        header.append(f"  {info.channel}", style="dim")
    body = Text(info.description.strip() or "(no description)")
    return Panel(
        Group(header, Text(), body),
        title="[bold]Description[/bold]",
        border_style="yellow",
        box=box.ROUNDED,
    )
