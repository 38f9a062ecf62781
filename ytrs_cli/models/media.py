"""
Models for media metadata reported by the downloader.
"""

from typing import Any

from pydantic import BaseModel, Field

WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class MediaInfo(BaseModel):
    """Metadata for a single video, parsed from the downloader's JSON dump."""

    id: str
    title: str
    webpage_url: str
    channel: str | None = None
    duration: int | None = None
    tags: list[str] = Field(default_factory=list)
    thumbnail: str | None = None
    description: str = ""
    subtitles: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)
    automatic_captions: dict[str, list[dict[str, Any]]] = Field(default_factory=dict)

    @classmethod
    def from_ytdlp(cls, data: dict[str, Any]) -> "MediaInfo":
        video_id = str(data.get("id", ""))
        duration = data.get("duration")
        return cls(
            id=video_id,
            title=data.get("title") or video_id or "Unknown Title",
            webpage_url=data.get("webpage_url") or WATCH_URL.format(video_id=video_id),
            channel=data.get("channel") or data.get("uploader"),
            duration=int(duration) if duration is not None else None,
            tags=[str(t) for t in data.get("tags") or []],
            thumbnail=data.get("thumbnail"),
            description=data.get("description") or "",
            subtitles=_language_tracks(data.get("subtitles")),
            automatic_captions=_language_tracks(data.get("automatic_captions")),
        )


class SearchResult(BaseModel):
    """A single entry of a flat search listing."""

    id: str
    title: str
    url: str
    channel: str | None = None
    duration: int | None = None
    view_count: int | None = None

    @classmethod
    def from_ytdlp_entry(cls, entry: dict[str, Any]) -> "SearchResult":
        video_id = str(entry.get("id", ""))
        url = entry.get("url") or ""
        if not url.startswith(("http://", "https://")):
            url = WATCH_URL.format(video_id=video_id)
        duration = entry.get("duration")
        return cls(
            id=video_id,
            title=entry.get("title") or video_id,
            url=url,
            channel=entry.get("channel") or entry.get("uploader"),
            duration=int(duration) if duration is not None else None,
            view_count=entry.get("view_count"),
        )


def pick_track(formats: list[dict[str, Any]], preferred_ext: str) -> dict[str, Any]:
    """Picks the subtitle track in the preferred format, else the first one."""
    for track in formats:
        if track.get("ext") == preferred_ext:
            return track
    return formats[0]


def _language_tracks(raw: Any) -> dict[str, list[dict[str, Any]]]:
    """Drops languages without downloadable tracks (e.g. 'live_chat')."""
    if not isinstance(raw, dict):
        return {}
    tracks = {}
    for lang, formats in raw.items():
        usable = [
            f
            for f in formats or []
            if isinstance(f, dict) and f.get("url") and f.get("ext")
        ]
        if usable and lang != "live_chat":
            tracks[lang] = usable
    return tracks
