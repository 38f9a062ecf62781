"""
Builds yt-dlp command lines and runs them through a ProcessRunner.
"""

import json
import logging
from pathlib import Path

from ytrs_cli.exceptions import ExternalProcessError
from ytrs_cli.models.config import VideoFormat
from ytrs_cli.models.media import MediaInfo, SearchResult
from ytrs_cli.utils.path import safe_media_name

from .runner import OutputSink, ProcessRunner, capture_output, run_process

log = logging.getLogger(__name__)

# Containers yt-dlp can merge into directly; anything else is re-encoded.
_MERGE_FORMATS = {VideoFormat.MP4.value, VideoFormat.MOV.value}


class YtDlp:
    """The media downloader. Transcoding is delegated to ffmpeg via yt-dlp."""

    def __init__(
        self,
        runner: ProcessRunner,
        executable: Path,
        ffmpeg_location: Path,
        output_dir: Path,
        sink: OutputSink | None = None,
    ):
        self.runner = runner
        self.executable = executable
        self.ffmpeg_location = ffmpeg_location
        self.output_dir = output_dir
        self.sink = sink

    def _base_args(self) -> list[str]:
        return [str(self.executable), "--no-warnings"]

    def _download_args(self, stem: str) -> list[str]:
        return [
            *self._base_args(),
            "--newline",
            "--no-playlist",
            "--ffmpeg-location",
            str(self.ffmpeg_location),
            "-P",
            str(self.output_dir),
            "-o",
            f"{stem}.%(ext)s",
        ]

    def info_args(self, url: str) -> list[str]:
        return [*self._base_args(), "--no-playlist", "-J", url]

    def search_args(self, query: str, limit: int) -> list[str]:
        return [*self._base_args(), "--flat-playlist", "-J", f"ytsearch{limit}:{query}"]

    def audio_args(self, url: str, title: str, audio_format: str) -> list[str]:
        return [
            *self._download_args(safe_media_name(title)),
            "-x",
            "--audio-format",
            audio_format,
            "--audio-quality",
            "0",
            url,
        ]

    def video_args(self, url: str, title: str, video_format: str) -> list[str]:
        if video_format in _MERGE_FORMATS:
            container = ["--merge-output-format", video_format]
        else:
            container = ["--recode-video", video_format]
        return [
            *self._download_args(safe_media_name(title)),
            "-f",
            "bv*+ba/b",
            *container,
            url,
        ]

    async def fetch_info(self, url: str) -> MediaInfo:
        """Queries metadata, subtitle tracks and captions for one video."""
        data = await self._capture_json(self.info_args(url))
        return MediaInfo.from_ytdlp(data)

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Lists the first `limit` YouTube search results for a query."""
        data = await self._capture_json(self.search_args(query, limit))
        entries = data.get("entries") or []
        return [SearchResult.from_ytdlp_entry(e) for e in entries if e and e.get("id")]

    async def download_audio(self, info: MediaInfo, audio_format: str) -> Path:
        args = self.audio_args(info.webpage_url, info.title, audio_format)
        await run_process(self.runner, args, self.sink)
        return self._artifact(info.title, audio_format)

    async def download_video(self, info: MediaInfo, video_format: str) -> Path:
        args = self.video_args(info.webpage_url, info.title, video_format)
        await run_process(self.runner, args, self.sink)
        return self._artifact(info.title, video_format)

    def _artifact(self, title: str, ext: str) -> Path:
        """Locates the file yt-dlp produced for a title."""
        stem = safe_media_name(title)
        expected = self.output_dir / f"{stem}.{ext}"
        if expected.is_file():
            return expected
        produced = self.output_dir.glob(f"{stem}.*")
        candidates = sorted(
            (p for p in produced if not p.name.endswith(".part")),
            key=lambda p: p.stat().st_mtime,
            reverse=True,
        )
        if candidates:
            log.debug(f"Expected '{expected.name}', found '{candidates[0].name}'.")
            return candidates[0]
        return expected

    async def _capture_json(self, args: list[str]) -> dict:
        output = await capture_output(self.runner, args)
        try:
            return json.loads(output)
        except json.JSONDecodeError as e:
            raise ExternalProcessError(
                f"yt-dlp returned invalid JSON: {e}", argv=args
            ) from e
