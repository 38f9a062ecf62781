"""
Shared fakes and fixtures for the ytrs test suite.
"""

import json
from pathlib import Path

import pytest
from rich.console import Console

from ytrs_cli.exceptions import DownloadError
from ytrs_cli.models.config import AppConfig, AppPaths


class FakeProcess:
    """A finished child process with scripted output."""

    def __init__(self, stdout=(), stderr=(), returncode=0):
        self.stdout = list(stdout)
        self.stderr = list(stderr)
        self.returncode = returncode
        self.terminated = False

    async def stream_output(self, on_stdout, on_stderr=None):
        for line in self.stdout:
            on_stdout(line)
        for line in self.stderr:
            (on_stderr or on_stdout)(line)

    async def wait(self):
        return self.returncode

    def terminate(self):
        self.terminated = True


class FakeRunner:
    """Records every spawn; answers with queued or rule-based processes."""

    def __init__(self):
        self.calls: list[list[str]] = []
        self.rules: list[tuple[str, FakeProcess]] = []
        self.on_spawn = None

    def respond(self, needle: str, process: FakeProcess):
        """Returns `process` for any argv containing `needle`."""
        self.rules.append((needle, process))

    def respond_json(self, needle: str, data: dict):
        self.respond(needle, FakeProcess(stdout=[json.dumps(data)]))

    async def spawn(self, argv, cwd=None, inherit_output=False):
        argv = [str(a) for a in argv]
        self.calls.append(argv)
        if self.on_spawn:
            self.on_spawn(argv)
        for needle, process in self.rules:
            if needle in argv:
                return process
        return FakeProcess()


class FakeFetcher:
    """Stands in for the HTTP Downloader; serves bytes from a dict of URLs."""

    def __init__(self, files: dict[str, bytes] | None = None, fail: bool = False):
        self.files = files or {}
        self.fail = fail
        self.requests: list[str] = []
        self.closed = False

    async def download_file(
        self, url, destination_path, progress=None, description=None
    ):
        self.requests.append(url)
        if self.fail or url not in self.files:
            raise DownloadError(f"Failed to download '{url}'")
        Path(destination_path).write_bytes(self.files[url])
        return Path(destination_path)

    async def fetch_bytes(self, url):
        self.requests.append(url)
        if self.fail or url not in self.files:
            raise DownloadError(f"Failed to fetch '{url}'")
        return self.files[url]

    async def close(self):
        self.closed = True


class FakePrompter:
    """Answers prompts from scripted replies and records the questions."""

    def __init__(self, choices=(), confirm=False, interactive=True):
        self.choices = list(choices)
        self.confirm_answer = confirm
        self.interactive = interactive
        self.asked: list[tuple[str, list[str]]] = []
        self.confirmed: list[str] = []

    def choose(self, title, options):
        self.asked.append((title, list(options)))
        return self.choices.pop(0) if self.choices else 0

    def confirm(self, question, default=False):
        self.confirmed.append(question)
        return self.confirm_answer


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def prompter():
    return FakePrompter()


@pytest.fixture
def console():
    """A console that records instead of writing to the terminal."""
    return Console(record=True, width=120, force_terminal=False)


@pytest.fixture
def app_paths(tmp_path):
    root = tmp_path / ".config" / "ytrs"
    return AppPaths(
        config_root=root, libs_dir=root / "libs", output_dir=root / "output"
    )


@pytest.fixture
def app_config():
    return AppConfig()


@pytest.fixture
def installed_libs(app_paths):
    """Creates placeholder yt-dlp and ffmpeg executables in the libs dir."""
    app_paths.libs_dir.mkdir(parents=True)
    for name in ("yt-dlp", "ffmpeg", "ffprobe"):
        path = app_paths.libs_dir / name
        path.write_text("#!/bin/sh\n")
        path.chmod(0o755)
    return app_paths.libs_dir
