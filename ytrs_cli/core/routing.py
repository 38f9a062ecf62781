"""
Turns parsed command-line options into exactly one InvocationRequest.
"""

from pathlib import Path

from ytrs_cli.exceptions import InvalidRequestError
from ytrs_cli.models.config import FORMATS_BY_KIND, MediaKind, kind_for_format
from ytrs_cli.models.request import Action, InvocationRequest
from ytrs_cli.utils.path import local_media_file

MISSING_SOURCE = "Missing SOURCE: give a URL, a media file or search terms."


def build_request(
    source: str | None = None,
    libs_path: Path | None = None,
    output_path: Path | None = None,
    audio: bool = False,
    video: bool = False,
    media_format: str | None = None,
    transcript: bool = False,
    stream: bool = False,
    play: bool = False,
    language: str | None = None,
    summarize: bool | None = None,
    model: str | None = None,
    install: bool = False,
) -> InvocationRequest:
    """
    Validates option combinations and picks the action for this run.

    Raises:
        InvalidRequestError: For conflicting options or a missing source.
    """
    if audio and video:
        raise InvalidRequestError("--audio and --video cannot be used together.")
    modes = [
        name
        for name, enabled in (
            ("--transcript", transcript),
            ("--stream", stream),
            ("--play", play),
        )
        if enabled
    ]
    if len(modes) > 1:
        raise InvalidRequestError(f"{' and '.join(modes)} cannot be used together.")

    kind = MediaKind.AUDIO if audio else MediaKind.VIDEO if video else None
    if media_format:
        media_format = media_format.lower().lstrip(".")
        format_kind = kind_for_format(media_format)
        if format_kind is None:
            known = ", ".join(
                f for formats in FORMATS_BY_KIND.values() for f in formats
            )
            raise InvalidRequestError(
                f"Unknown format '{media_format}'. Choose one of: {known}."
            )
        if kind is not None and format_kind is not kind:
            raise InvalidRequestError(
                f"Format '{media_format}' does not match --{kind.value}."
            )
        kind = format_kind

    if source is not None:
        source = source.strip()
        if not source:
            raise InvalidRequestError(MISSING_SOURCE)
        if install:
            raise InvalidRequestError("--install does not take a SOURCE.")
        if transcript:
            if local_media_file(source) is not None:
                raise InvalidRequestError(
                    "--transcript needs a URL or search terms, not a local file."
                )
            action = Action.TRANSCRIPT
        elif stream or local_media_file(source) is not None:
            action = Action.STREAM
        else:
            action = Action.DOWNLOAD
    else:
        if modes or kind is not None or language or summarize or model:
            raise InvalidRequestError(MISSING_SOURCE)
        if install or libs_path is not None:
            action = Action.INSTALL_LIBS
        elif output_path is not None:
            action = Action.SET_OUTPUT
        else:
            raise InvalidRequestError(MISSING_SOURCE)

    return InvocationRequest(
        action=action,
        source=source,
        kind=kind,
        media_format=media_format,
        play_after=play,
        language=language,
        summarize=summarize,
        model=model,
        libs_override=libs_path,
        output_override=output_path,
    )
