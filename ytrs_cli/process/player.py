"""
Launches the mpv media player.
"""

import logging
import shutil
from collections.abc import Callable
from pathlib import Path

from ytrs_cli.exceptions import ExternalProcessError, PlayerNotFoundError

from .runner import ProcessRunner, capture_output, run_process

log = logging.getLogger(__name__)


class Player:
    """mpv, looked up on PATH. It is not installed by the application."""

    def __init__(
        self,
        runner: ProcessRunner,
        executable: str = "mpv",
        ytdl_path: Path | None = None,
        which: Callable[[str], str | None] = shutil.which,
    ):
        self.runner = runner
        self.executable = executable
        self.ytdl_path = ytdl_path
        self._which = which

    def locate(self) -> str:
        path = self._which(self.executable)
        if not path:
            raise PlayerNotFoundError(
                f"{self.executable} not installed or not found in PATH",
                argv=[self.executable],
            )
        return path

    async def check(self) -> str:
        """Runs `mpv --version` and returns its first line."""
        argv = [self.locate(), "--version"]
        try:
            output = await capture_output(self.runner, argv)
        except ExternalProcessError as e:
            raise PlayerNotFoundError(
                f"{self.executable} is installed but not working: {e}", argv=argv
            ) from e
        return output.splitlines()[0] if output else ""

    def build_args(
        self, target: str, audio_only: bool = False, title: str | None = None
    ) -> list[str]:
        args = [self.locate()]
        if audio_only:
            args.append("--no-video")
        if title:
            args.append(f"--force-media-title={title}")
        if self.ytdl_path is not None and self.ytdl_path.is_file():
            args.append(f"--script-opts=ytdl_hook-ytdl_path={self.ytdl_path}")
        args.append(target)
        return args

    async def play(
        self, target: str, audio_only: bool = False, title: str | None = None
    ) -> None:
        """
        Plays a URL or file, blocking until the player exits.

        The player keeps the terminal so its own controls work.
        """
        args = self.build_args(target, audio_only, title)
        log.info(f"[cyan]Playing {title or target}[/cyan]")
        await run_process(self.runner, args, inherit_output=True)
