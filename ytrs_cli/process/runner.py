"""
Launches external programs and forwards their output.

Everything that shells out goes through the ProcessRunner protocol, so tests
can swap in a fake runner instead of starting real binaries.
"""

import asyncio
import logging
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from ytrs_cli.exceptions import ExternalProcessError

log = logging.getLogger(__name__)

OutputSink = Callable[[str], None]

# yt-dlp prints its whole JSON dump on a single line.
_STREAM_LIMIT = 64 * 1024 * 1024


class RunningProcess(Protocol):
    async def stream_output(
        self, on_stdout: OutputSink, on_stderr: OutputSink | None = None
    ) -> None: ...

    async def wait(self) -> int: ...

    def terminate(self) -> None: ...


class ProcessRunner(Protocol):
    async def spawn(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        inherit_output: bool = False,
    ) -> RunningProcess: ...


class AsyncioProcess:
    """A child process started with asyncio; output is read line by line."""

    def __init__(self, process: asyncio.subprocess.Process, argv: Sequence[str]):
        self._process = process
        self.argv = list(argv)

    async def stream_output(
        self, on_stdout: OutputSink, on_stderr: OutputSink | None = None
    ) -> None:
        """Forwards stdout and stderr concurrently until both are closed."""
        await asyncio.gather(
            self._pump(self._process.stdout, on_stdout),
            self._pump(self._process.stderr, on_stderr or on_stdout),
        )

    @staticmethod
    async def _pump(stream: asyncio.StreamReader | None, sink: OutputSink) -> None:
        if stream is None:
            return
        while True:
            line = await stream.readline()
            if not line:
                break
            sink(line.decode("utf-8", errors="replace").rstrip("\r\n"))

    async def wait(self) -> int:
        return await self._process.wait()

    def terminate(self) -> None:
        if self._process.returncode is None:
            try:
                self._process.terminate()
            except ProcessLookupError:
                pass


class AsyncioProcessRunner:
    """Spawns real child processes with asyncio.create_subprocess_exec."""

    async def spawn(
        self,
        argv: Sequence[str],
        cwd: Path | None = None,
        inherit_output: bool = False,
    ) -> AsyncioProcess:
        pipe = None if inherit_output else asyncio.subprocess.PIPE
        log.debug(f"Spawning: {' '.join(map(str, argv))}")
        try:
            process = await asyncio.create_subprocess_exec(
                *map(str, argv),
                cwd=str(cwd) if cwd else None,
                stdout=pipe,
                stderr=pipe,
                limit=_STREAM_LIMIT,
            )
        except FileNotFoundError as e:
            raise ExternalProcessError(
                f"Executable not found: '{argv[0]}'", argv=list(argv)
            ) from e
        except PermissionError as e:
            raise ExternalProcessError(
                f"Permission denied while launching '{argv[0]}'", argv=list(argv)
            ) from e
        except OSError as e:
            raise ExternalProcessError(
                f"Could not launch '{argv[0]}': {e}", argv=list(argv)
            ) from e
        return AsyncioProcess(process, argv)


async def run_process(
    runner: ProcessRunner,
    argv: Sequence[str],
    sink: OutputSink | None = None,
    cwd: Path | None = None,
    inherit_output: bool = False,
) -> None:
    """
    Runs a program to completion, forwarding its output to `sink` as it arrives.

    Raises:
        ExternalProcessError: If the program cannot be launched or exits non-zero.
    """
    process = await runner.spawn(argv, cwd=cwd, inherit_output=inherit_output)
    tail: list[str] = []

    def forward(line: str) -> None:
        tail.append(line)
        del tail[:-5]
        if sink:
            sink(line)

    try:
        if not inherit_output:
            await process.stream_output(forward)
        returncode = await process.wait()
    except asyncio.CancelledError:
        process.terminate()
        raise

    if returncode != 0:
        details = f": {tail[-1]}" if tail else ""
        raise ExternalProcessError(
            f"'{Path(str(argv[0])).name}' exited with status {returncode}{details}",
            argv=[str(a) for a in argv],
            returncode=returncode,
        )


async def capture_output(
    runner: ProcessRunner, argv: Sequence[str], cwd: Path | None = None
) -> str:
    """
    Runs a program and returns its standard output. Stderr goes to the debug log.

    Raises:
        ExternalProcessError: If the program cannot be launched or exits non-zero.
    """
    process = await runner.spawn(argv, cwd=cwd)
    stdout: list[str] = []
    stderr: list[str] = []

    def on_stderr(line: str) -> None:
        stderr.append(line)
        log.debug(line)

    try:
        await process.stream_output(stdout.append, on_stderr)
        returncode = await process.wait()
    except asyncio.CancelledError:
        process.terminate()
        raise

    if returncode != 0:
        details = f": {stderr[-1]}" if stderr else ""
        raise ExternalProcessError(
            f"'{Path(str(argv[0])).name}' exited with status {returncode}{details}",
            argv=[str(a) for a in argv],
            returncode=returncode,
        )
    return "\n".join(stdout)
