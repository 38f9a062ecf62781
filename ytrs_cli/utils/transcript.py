"""
Reduces subtitle files to plain text for summarization.
"""

import html
import json
import re
import xml.etree.ElementTree as ET

_TAG = re.compile(r"<[^>]+>")
_CUE_TIMING = re.compile(r"-->")
_CUE_NUMBER = re.compile(r"^\d+$")
_HEADER_PREFIXES = ("WEBVTT", "Kind:", "Language:", "NOTE", "STYLE", "REGION")


def subtitle_to_text(raw: str, ext: str) -> str:
    """
    Extracts the spoken text from a subtitle document.

    Timings, cue numbers, markup and headers are removed. Auto-generated
    captions repeat each line across overlapping cues, so consecutive
    duplicates are collapsed.
    """
    ext = ext.lower().lstrip(".")
    if ext == "json3":
        lines = _json3_lines(raw)
    elif ext in ("ttml", "xml", "srv1", "srv2", "srv3"):
        lines = _markup_lines(raw)
    else:
        lines = _cue_lines(raw)

    text_lines: list[str] = []
    for line in lines:
        line = " ".join(html.unescape(_TAG.sub("", line)).split())
        if line and (not text_lines or text_lines[-1] != line):
            text_lines.append(line)
    return "\n".join(text_lines)


def _cue_lines(raw: str) -> list[str]:
    lines = []
    in_header_block = False
    for line in raw.splitlines():
        stripped = line.strip()
        if not stripped:
            in_header_block = False
            continue
        if stripped.startswith(_HEADER_PREFIXES):
            in_header_block = not stripped.startswith(("Kind:", "Language:"))
            continue
        if in_header_block or _CUE_TIMING.search(stripped):
            continue
        if _CUE_NUMBER.match(stripped):
            continue
        lines.append(stripped)
    return lines


def _local_name(tag) -> str:
    return tag.rsplit("}", 1)[-1] if isinstance(tag, str) else ""


def _markup_lines(raw: str) -> list[str]:
    """Paragraphs of TTML and YouTube timedtext, with or without namespace prefixes."""
    try:
        root = ET.fromstring(raw)
    except ET.ParseError:
        return []
    lines = []
    for element in root.iter():
        if _local_name(element.tag) not in ("p", "text"):
            continue
        parts = [element.text or ""]
        for child in element:
            if _local_name(child.tag) == "br":
                parts.append(" ")
            else:
                parts.append("".join(child.itertext()))
            parts.append(child.tail or "")
        lines.append("".join(parts))
    return lines


def _json3_lines(raw: str) -> list[str]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return []
    lines = []
    for event in data.get("events") or []:
        text = "".join(seg.get("utf8", "") for seg in event.get("segs") or [])
        lines.extend(part for part in text.split("\n") if part.strip())
    return lines
