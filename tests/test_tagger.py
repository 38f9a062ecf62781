"""
Tests for writing metadata tags into downloaded audio files.
"""

import wave

import mutagen.id3 as id3
from mutagen.wave import WAVE

from ytrs_cli.media.tagger import Tagger, guess_image_mime
from ytrs_cli.models.media import MediaInfo

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def _info():
    return MediaInfo(
        id="abc",
        title="A Talk",
        webpage_url="https://www.youtube.com/watch?v=abc",
        channel="Some Channel",
        tags=["science", "talk"],
    )


def test_mp3_without_header_gets_tags(tmp_path):
    path = tmp_path / "A Talk.mp3"
    path.write_bytes(b"")

    assert Tagger().tag_file(path, _info(), cover=PNG) is True

    tags = id3.ID3(path)
    assert tags["TIT2"].text == ["A Talk"]
    assert tags["TPE1"].text == ["Some Channel"]
    assert "/".join(tags["TCON"].text) == "science/talk"
    assert tags["WOAS"].url == "https://www.youtube.com/watch?v=abc"
    apic = tags.getall("APIC")[0]
    assert apic.mime == "image/png"
    assert apic.data == PNG


def test_cover_is_skipped_when_disabled(tmp_path):
    path = tmp_path / "A Talk.mp3"
    path.write_bytes(b"")

    Tagger(embed_art=False).tag_file(path, _info(), cover=PNG)

    assert id3.ID3(path).getall("APIC") == []


def test_wav_gets_id3_chunk(tmp_path):
    path = tmp_path / "A Talk.wav"
    with wave.open(str(path), "wb") as wav:
        wav.setnchannels(1)
        wav.setsampwidth(2)
        wav.setframerate(8000)
        wav.writeframes(b"\x00\x00" * 800)

    assert Tagger().tag_file(path, _info()) is True

    audio = WAVE(path)
    assert audio.tags["TIT2"].text == ["A Talk"]


def test_unsupported_and_broken_files_return_false(tmp_path):
    video = tmp_path / "clip.mp4"
    video.write_bytes(b"")
    broken = tmp_path / "broken.wav"
    broken.write_bytes(b"not a riff file")

    assert Tagger().tag_file(video, _info()) is False
    assert Tagger().tag_file(broken, _info()) is False


def test_image_mime_sniffing():
    assert guess_image_mime(PNG) == "image/png"
    assert guess_image_mime(b"RIFF\x00\x00\x00\x00WEBPVP8 ") == "image/webp"
    assert guess_image_mime(b"\xff\xd8\xff\xe0") == "image/jpeg"
