"""
Descriptors for the external binaries installed into the libraries directory.
"""

import sys
from dataclasses import dataclass, field
from pathlib import Path

from ytrs_cli.exceptions import DependencyFetchError

WINDOWS, MACOS, LINUX = "windows", "macos", "linux"

_YTDLP_RELEASE = "https://github.com/yt-dlp/yt-dlp/releases/latest/download/"
_BTBN_RELEASE = "https://github.com/BtbN/FFmpeg-Builds/releases/download/latest/"
_EVERMEET = "https://evermeet.cx/ffmpeg/getrelease/"


def current_platform() -> str:
    if sys.platform.startswith("win"):
        return WINDOWS
    if sys.platform == "darwin":
        return MACOS
    return LINUX


def executable_name(name: str, platform_key: str) -> str:
    return f"{name}.exe" if platform_key == WINDOWS else name


@dataclass(frozen=True)
class FetchSource:
    """
    Where one or more executables come from.

    `archive` is None for a bare executable, otherwise "zip" or "tar.xz"; the
    `members` are located inside the archive by file name.
    """

    url: str
    members: tuple[str, ...]
    archive: str | None = None


@dataclass(frozen=True)
class Dependency:
    """An external binary: its name and per-platform distribution sources."""

    name: str
    sources: dict[str, tuple[FetchSource, ...]] = field(hash=False)

    def sources_for(self, platform_key: str) -> tuple[FetchSource, ...]:
        try:
            return self.sources[platform_key]
        except KeyError:
            raise DependencyFetchError(
                f"No download source for '{self.name}' on platform '{platform_key}'."
            ) from None

    def executables(self, platform_key: str) -> list[str]:
        """File names this dependency places in the libraries directory."""
        names = [m for s in self.sources_for(platform_key) for m in s.members]
        return [executable_name(n, platform_key) for n in names]

    def path_in(self, libs_dir: Path, platform_key: str) -> Path:
        """The main executable's expected location."""
        return libs_dir / executable_name(self.name, platform_key)


YT_DLP = Dependency(
    name="yt-dlp",
    sources={
        LINUX: (FetchSource(_YTDLP_RELEASE + "yt-dlp_linux", ("yt-dlp",)),),
        MACOS: (FetchSource(_YTDLP_RELEASE + "yt-dlp_macos", ("yt-dlp",)),),
        WINDOWS: (FetchSource(_YTDLP_RELEASE + "yt-dlp.exe", ("yt-dlp",)),),
    },
)

# ffprobe ships alongside ffmpeg; yt-dlp needs both for audio extraction.
FFMPEG = Dependency(
    name="ffmpeg",
    sources={
        LINUX: (
            FetchSource(
                _BTBN_RELEASE + "ffmpeg-master-latest-linux64-gpl.tar.xz",
                ("ffmpeg", "ffprobe"),
                archive="tar.xz",
            ),
        ),
        WINDOWS: (
            FetchSource(
                _BTBN_RELEASE + "ffmpeg-master-latest-win64-gpl.zip",
                ("ffmpeg", "ffprobe"),
                archive="zip",
            ),
        ),
        MACOS: (
            FetchSource(_EVERMEET + "zip", ("ffmpeg",), archive="zip"),
            FetchSource(_EVERMEET + "ffprobe/zip", ("ffprobe",), archive="zip"),
        ),
    },
)

REQUIRED_DEPENDENCIES = (YT_DLP, FFMPEG)
