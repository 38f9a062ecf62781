"""
Process Layer.

This package launches the external downloader and player and forwards their
output to the user.
"""

from .player import Player
from .runner import (
    AsyncioProcessRunner,
    ProcessRunner,
    RunningProcess,
    capture_output,
    run_process,
)
from .ytdlp import YtDlp

__all__ = [
    "AsyncioProcessRunner",
    "Player",
    "ProcessRunner",
    "RunningProcess",
    "YtDlp",
    "capture_output",
    "run_process",
]
