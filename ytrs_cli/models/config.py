"""
Pydantic models for application configuration and resolved paths.
Provides robust validation for all settings.
"""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class MediaKind(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"


class AudioFormat(str, Enum):
    MP3 = "mp3"
    WAV = "wav"


class VideoFormat(str, Enum):
    MP4 = "mp4"
    AVI = "avi"
    MOV = "mov"


FORMATS_BY_KIND = {
    MediaKind.AUDIO: [f.value for f in AudioFormat],
    MediaKind.VIDEO: [f.value for f in VideoFormat],
}

SUBTITLE_FORMATS = ("vtt", "srt", "ttml", "json3")


def kind_for_format(media_format: str) -> MediaKind | None:
    """Returns the media kind a container extension belongs to, if any."""
    ext = media_format.lower().lstrip(".")
    for kind, formats in FORMATS_BY_KIND.items():
        if ext in formats:
            return kind
    return None


class AppPaths(BaseModel):
    """Directories used by a single invocation. Never persisted."""

    config_root: Path | None = None
    libs_dir: Path
    output_dir: Path

    class Config:
        """Pydantic model configuration."""

        frozen = True

    @property
    def config_file(self) -> Path | None:
        if self.config_root is None:
            return None
        return self.config_root / "config.ini"


class AppConfig(BaseModel):
    """A validated configuration model for the application."""

    # Summarization
    ollama_host: str = "http://localhost:11434"
    ollama_model: str = ""

    # Download Settings
    default_kind: MediaKind = MediaKind.AUDIO
    audio_format: AudioFormat = AudioFormat.MP3
    video_format: VideoFormat = VideoFormat.MP4
    subtitle_format: str = "vtt"
    search_results: int = 10
    embed_metadata: bool = True

    # Dependency fetching
    fetch_attempts: int = 1

    # Internal fields not loaded from INI file
    config_path: str = Field("", repr=False)

    class Config:
        """Pydantic model configuration."""

        validate_assignment = True
        str_strip_whitespace = True

    @field_validator("ollama_host")
    @classmethod
    def validate_host(cls, v: str) -> str:
        """Ensures the Ollama host is an HTTP(S) base URL without a trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("ollama_host must start with http:// or https://.")
        return v.rstrip("/")

    @field_validator("subtitle_format")
    @classmethod
    def validate_subtitle_format(cls, v: str) -> str:
        v = v.lower()
        if v not in SUBTITLE_FORMATS:
            raise ValueError(
                f"subtitle_format must be one of: {', '.join(SUBTITLE_FORMATS)}."
            )
        return v

    @field_validator("search_results")
    @classmethod
    def validate_search_results(cls, v: int) -> int:
        if v < 1 or v > 50:
            raise ValueError("search_results must be between 1 and 50.")
        return v

    @field_validator("fetch_attempts")
    @classmethod
    def validate_fetch_attempts(cls, v: int) -> int:
        if v < 1 or v > 5:
            raise ValueError("fetch_attempts must be between 1 and 5.")
        return v

    def default_format(self, kind: MediaKind) -> str:
        """Returns the configured container extension for a media kind."""
        if kind is MediaKind.AUDIO:
            return self.audio_format.value
        return self.video_format.value

    @classmethod
    def get_ini_keys(cls) -> set[str]:
        """Returns a set of all keys that are expected in the INI file."""
        internal_fields = {"config_path"}
        return {key for key in cls.model_fields if key not in internal_fields}
