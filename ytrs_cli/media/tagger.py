"""
Writes media metadata as tags to downloaded audio files.
"""

import logging
from pathlib import Path

import mutagen.id3 as id3
from mutagen import MutagenError
from mutagen.id3 import ID3NoHeaderError
from mutagen.wave import WAVE

from ytrs_cli.models.media import MediaInfo

log = logging.getLogger(__name__)


def guess_image_mime(data: bytes) -> str:
    if data.startswith(b"\x89PNG"):
        return "image/png"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


class Tagger:
    """Writes ID3 tags to MP3 and WAV files."""

    def __init__(self, embed_art: bool = True):
        self.embed_art = embed_art

    def tag_file(
        self, file_path: Path, info: MediaInfo, cover: bytes | None = None
    ) -> bool:
        """
        Tags a file with the video's title, channel, keywords and thumbnail.

        Returns:
            True on success. Failures are logged, never raised.
        """
        suffix = file_path.suffix.lower()
        try:
            if suffix == ".mp3":
                self._tag_mp3(file_path, info, cover)
            elif suffix == ".wav":
                self._tag_wav(file_path, info, cover)
            else:
                log.debug(f"No tagging support for '{file_path.name}'.")
                return False
            return True
        except (MutagenError, OSError) as e:
            log.warning(
                f"Failed to tag file '{file_path.name}': {e}",
                exc_info=log.getEffectiveLevel() == logging.DEBUG,
            )
            return False

    def _tag_mp3(self, path: Path, info: MediaInfo, cover: bytes | None):
        try:
            audio = id3.ID3(path)
        except ID3NoHeaderError:
            audio = id3.ID3()
        self._apply_frames(audio, info, cover)
        audio.save(path, v2_version=3)

    def _tag_wav(self, path: Path, info: MediaInfo, cover: bytes | None):
        audio = WAVE(path)
        if audio.tags is None:
            audio.add_tags()
        self._apply_frames(audio.tags, info, cover)
        audio.save(v2_version=3)

    def _apply_frames(self, tags: id3.ID3, info: MediaInfo, cover: bytes | None):
        tags.add(id3.TIT2(encoding=3, text=info.title))
        if info.channel:
            tags.add(id3.TPE1(encoding=3, text=info.channel))
        if info.tags:
            tags.add(id3.TCON(encoding=3, text=info.tags))
        tags.add(id3.WOAS(url=info.webpage_url))

        if cover and self.embed_art:
            tags.delall("APIC")
            tags.add(
                id3.APIC(
                    encoding=3,
                    mime=guess_image_mime(cover),
                    type=3,
                    desc="Cover",
                    data=cover,
                )
            )
