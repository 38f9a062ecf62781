"""
Utilities for handling file paths, media sources and URL parsing.
"""

import re
from pathlib import Path
from urllib.parse import urlparse

from pathvalidate import sanitize_filename

from ytrs_cli.models.config import MediaKind, kind_for_format

MUSIC_URL_PREFIX = "https://music.youtube.com"

_UNSAFE_CHARS = re.compile(r"[^\w \-]")


def is_url(source: str) -> bool:
    parsed = urlparse(source.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_music_url(source: str) -> bool:
    return source.strip().lower().startswith(MUSIC_URL_PREFIX)


def local_media_file(source: str) -> Path | None:
    """Returns the source as a Path if it names an existing file."""
    if is_url(source):
        return None
    path = Path(source).expanduser()
    return path if path.is_file() else None


def kind_for_file(path: Path) -> MediaKind | None:
    """Guesses audio or video from a file's extension."""
    return kind_for_format(path.suffix) if path.suffix else None


def safe_media_name(title: str) -> str:
    """
    Turns a media title into a file name stem.

    Everything but letters, digits, spaces and dashes becomes '_', which also
    keeps '%' out of the downloader's output template.
    """
    name = sanitize_filename(_UNSAFE_CHARS.sub("_", title), platform="auto").strip()
    return name or "media"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)
