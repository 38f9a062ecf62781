"""
Routes one InvocationRequest to its handler and drives the external tools.
"""

import asyncio
import logging

import aiofiles
from rich.console import Console
from rich.markup import escape

from ytrs_cli.cli.formatters import (
    build_description_panel,
    build_paths_table,
    describe_search_result,
)
from ytrs_cli.cli.progress_manager import TransferProgress
from ytrs_cli.cli.prompts import ConsolePrompter, Prompter
from ytrs_cli.deps import YT_DLP, DependencyInstaller
from ytrs_cli.exceptions import (
    ConfigurationError,
    DownloadError,
    MediaNotFoundError,
    PlayerNotFoundError,
    SummarizerError,
)
from ytrs_cli.media import Downloader, Tagger
from ytrs_cli.models.config import AppConfig, AppPaths, MediaKind
from ytrs_cli.models.media import MediaInfo, pick_track
from ytrs_cli.models.request import Action, InvocationRequest
from ytrs_cli.process import AsyncioProcessRunner, Player, ProcessRunner, YtDlp
from ytrs_cli.summarize import OllamaClient, Summarizer
from ytrs_cli.utils.path import (
    create_dir,
    is_music_url,
    is_url,
    kind_for_file,
    local_media_file,
)
from ytrs_cli.utils.transcript import subtitle_to_text

log = logging.getLogger(__name__)


class Dispatcher:
    """Executes exactly one request per run with explicitly passed paths and config."""

    def __init__(
        self,
        paths: AppPaths,
        config: AppConfig,
        console: Console,
        runner: ProcessRunner | None = None,
        fetcher: Downloader | None = None,
        installer: DependencyInstaller | None = None,
        prompter: Prompter | None = None,
        player: Player | None = None,
        ollama: OllamaClient | None = None,
        tagger: Tagger | None = None,
    ):
        self.paths = paths
        self.config = config
        self.console = console
        self.runner = runner or AsyncioProcessRunner()
        self.fetcher = fetcher or Downloader(max_attempts=config.fetch_attempts)
        self.progress = TransferProgress(console, enabled=console.is_terminal)
        self.installer = installer or DependencyInstaller(
            paths.libs_dir, self.fetcher, progress=self.progress
        )
        self.prompter = prompter or ConsolePrompter(console)
        self.player = player or Player(
            self.runner, ytdl_path=self.installer.executable_path(YT_DLP)
        )
        self.tagger = tagger or Tagger(config.embed_metadata)
        self._ollama = ollama
        self._ytdlp: YtDlp | None = None

    async def dispatch(self, request: InvocationRequest) -> None:
        handlers = {
            Action.INSTALL_LIBS: self.install_libs,
            Action.SET_OUTPUT: self.set_output,
            Action.DOWNLOAD: self.download,
            Action.TRANSCRIPT: self.transcript,
            Action.STREAM: self.stream,
        }
        log.debug(f"Dispatching {request.action.value} for {request.source!r}.")
        try:
            await handlers[request.action](request)
        finally:
            await self.fetcher.close()
            if self._ollama is not None:
                await self._ollama.close()

    # --- Handlers ---

    async def install_libs(self, request: InvocationRequest) -> None:
        installed = await self._ensure_libs()
        if not installed:
            log.info("[green]✓ All libraries are already installed.[/green]")
        statuses = [
            (
                dep.name,
                self.installer.executable_path(dep),
                self.installer.is_installed(dep),
            )
            for dep in self.installer.dependencies
        ]
        statuses.append(await self._player_status())
        self.console.print(build_paths_table(self.paths, statuses))

    async def set_output(self, request: InvocationRequest) -> None:
        self._create_output_dir()
        log.info(f"[green]✓ Output directory:[/green] {self.paths.output_dir}")

    async def download(self, request: InvocationRequest) -> None:
        await self._ensure_libs()
        url = await self._resolve_source(request.source)
        kind = self._media_kind(request, url)
        media_format = request.media_format or self.config.default_format(kind)
        if request.play_after:
            self.player.locate()

        ytdlp = self._get_ytdlp()
        info = await ytdlp.fetch_info(url)
        self._create_output_dir()
        log.info(
            f"Downloading [bold]{escape(info.title)}[/bold] as {kind.value} "
            f"([cyan]{media_format}[/cyan])"
        )
        if kind is MediaKind.AUDIO:
            path = await ytdlp.download_audio(info, media_format)
            if self.config.embed_metadata:
                await self._tag(path, info)
        else:
            path = await ytdlp.download_video(info, media_format)
        log.info(f"[green]✓ Saved to[/green] {escape(str(path))}")

        if request.play_after:
            await self.player.play(
                str(path), audio_only=kind is MediaKind.AUDIO, title=info.title
            )

    async def transcript(self, request: InvocationRequest) -> None:
        await self._ensure_libs()
        url = await self._resolve_source(request.source)
        info = await self._get_ytdlp().fetch_info(url)

        tracks = info.subtitles
        if not tracks:
            log.info("No subtitles found. Finding generated captions...")
            tracks = info.automatic_captions
        if not tracks:
            log.warning(
                "[yellow]No subtitles or captions available. "
                "Showing the description instead.[/yellow]"
            )
            self.console.print(build_description_panel(info))
            return

        language = self._pick_language(tracks, request.language)
        track = pick_track(tracks[language], self.config.subtitle_format)
        ext = track["ext"]
        self._create_output_dir()
        destination = self.paths.output_dir / f"subtitle_{language}.{ext}"
        with self.progress:
            await self.fetcher.download_file(
                track["url"],
                destination,
                progress=self.progress,
                description=f"Subtitles ({language})",
            )
        log.info(f"[green]✓ Saved to[/green] {escape(str(destination))}")

        if not self._should_summarize(request):
            return
        async with aiofiles.open(destination, encoding="utf-8", errors="replace") as f:
            raw = await f.read()
        await self._summarize(subtitle_to_text(raw, ext), language, request.model)

    async def stream(self, request: InvocationRequest) -> None:
        local_file = local_media_file(request.source)
        if local_file is not None:
            kind = request.kind or kind_for_file(local_file)
            await self.player.play(
                str(local_file),
                audio_only=kind is MediaKind.AUDIO,
                title=local_file.name,
            )
            return

        self.player.locate()
        await self._ensure_libs()
        url = await self._resolve_source(request.source)
        kind = self._media_kind(request, url)
        await self.player.play(url, audio_only=kind is MediaKind.AUDIO)

    # --- Helpers ---

    async def _player_status(self) -> tuple[str, str, bool]:
        try:
            version = await self.player.check()
        except PlayerNotFoundError as e:
            log.debug(f"Player check failed: {e}")
            return (self.player.executable, "not usable from PATH", False)
        log.debug(f"Found {version}")
        return (self.player.executable, self.player.locate(), True)

    async def _ensure_libs(self):
        with self.progress:
            return await self.installer.ensure_installed()

    def _get_ytdlp(self) -> YtDlp:
        if self._ytdlp is None:
            self._ytdlp = YtDlp(
                self.runner,
                executable=self.installer.executable_path(YT_DLP),
                ffmpeg_location=self.paths.libs_dir,
                output_dir=self.paths.output_dir,
                sink=self._echo,
            )
        return self._ytdlp

    def _echo(self, line: str) -> None:
        self.console.print(line, markup=False, highlight=False)

    def _write(self, text: str) -> None:
        self.console.print(text, end="", markup=False, highlight=False)

    def _create_output_dir(self) -> None:
        try:
            create_dir(self.paths.output_dir)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create output directory '{self.paths.output_dir}': {e}"
            ) from e

    async def _resolve_source(self, source: str) -> str:
        """Returns a URL, searching YouTube when the source is not one."""
        if is_url(source):
            return source
        log.info(f"Searching for [bold]{escape(source)}[/bold]...")
        results = await self._get_ytdlp().search(source, self.config.search_results)
        if not results:
            raise MediaNotFoundError(f"No results found for '{source}'.")
        index = self.prompter.choose(
            f"Results for '{source}'", [describe_search_result(r) for r in results]
        )
        return results[index].url

    def _media_kind(self, request: InvocationRequest, url: str) -> MediaKind:
        if request.kind is not None:
            return request.kind
        if is_music_url(url):
            return MediaKind.AUDIO
        if request.action is Action.STREAM:
            return MediaKind.VIDEO
        return self.config.default_kind

    def _pick_language(self, tracks: dict, requested: str | None) -> str:
        # Original-language captions first, then alphabetical.
        languages = sorted(tracks, key=lambda lang: (not lang.endswith("-orig"), lang))
        if requested:
            if requested in tracks:
                return requested
            matches = [
                lang for lang in languages if lang.lower().startswith(requested.lower())
            ]
            if not matches:
                raise MediaNotFoundError(
                    f"No subtitles in '{requested}'. "
                    f"Available: {', '.join(sorted(tracks))}."
                )
            languages = matches
        return languages[self.prompter.choose("Subtitle languages", languages)]

    def _should_summarize(self, request: InvocationRequest) -> bool:
        if request.summarize is not None:
            return request.summarize
        if request.model:
            return True
        return self.prompter.interactive and self.prompter.confirm(
            "Summarize the transcript with Ollama?", default=False
        )

    async def _summarize(self, content: str, language: str, model: str | None):
        client = self._get_ollama()
        model = model or self.config.ollama_model or await self._choose_model(client)
        self.console.rule(f"[bold]Summary[/bold] [dim]({escape(model)})[/dim]")
        summarizer = Summarizer(client, self._write)
        await summarizer.summarize(content, language, model)
        self.console.print()

    async def _choose_model(self, client: OllamaClient) -> str:
        models = await client.list_models()
        if not models:
            raise SummarizerError(
                f"No models available on the Ollama server at {client.host}. "
                "Pull one with `ollama pull <model>`."
            )
        return models[self.prompter.choose("Ollama models", models)]

    def _get_ollama(self) -> OllamaClient:
        if self._ollama is None:
            self._ollama = OllamaClient(self.config.ollama_host)
        return self._ollama

    async def _tag(self, path, info: MediaInfo) -> None:
        cover = None
        if info.thumbnail:
            try:
                cover = await self.fetcher.fetch_bytes(info.thumbnail)
            except DownloadError as e:
                log.warning(f"[yellow]Could not fetch thumbnail:[/yellow] {e}")
        await asyncio.to_thread(self.tagger.tag_file, path, info, cover)
