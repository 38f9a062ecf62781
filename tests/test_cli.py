"""
Tests for the command-line entry points.
"""

import pytest
from typer.testing import CliRunner

from ytrs_cli import __version__
from ytrs_cli.__main__ import main, wants_help
from ytrs_cli.cli import app as app_module
from ytrs_cli.models.request import Action

cli_runner = CliRunner()


@pytest.fixture
def dispatched(monkeypatch):
    """Replaces the dispatcher so no external process can be started."""
    requests = []

    class RecordingDispatcher:
        def __init__(self, paths, config, console):
            self.paths = paths
            self.config = config

        async def dispatch(self, request):
            requests.append((request, self.paths, self.config))

    monkeypatch.setattr(app_module, "Dispatcher", RecordingDispatcher)
    return requests


def _exit_code(argv):
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


def test_help_exits_zero():
    result = cli_runner.invoke(app_module.app, ["-h"])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize(
    "argv",
    [
        ["-h"],
        ["--help"],
        ["-h", "--bogus"],
        ["--bogus", "-h"],
        ["-t", "-s", "-h"],
        ["https://youtu.be/abc", "-o", "/tmp/x", "--help"],
    ],
)
def test_help_wins_over_other_flags(argv, capsys, dispatched):
    assert _exit_code(argv) == 0
    assert "Usage" in capsys.readouterr().out
    assert dispatched == []


def test_help_flag_after_separator_is_a_source():
    assert wants_help(["--", "-h"]) is False
    assert wants_help(["x", "-h", "--"]) is True


def test_unknown_flag_is_a_usage_error(dispatched):
    result = cli_runner.invoke(app_module.app, ["--bogus"])
    assert result.exit_code == 2
    assert dispatched == []


def test_unknown_flag_through_main(capsys, dispatched):
    assert _exit_code(["--bogus"]) == 2
    assert "--bogus" in capsys.readouterr().err
    assert dispatched == []


def test_missing_source_is_a_usage_error(dispatched):
    assert _exit_code([]) == 2
    assert dispatched == []


def test_conflicting_modes_are_a_usage_error(dispatched):
    assert _exit_code(["https://youtu.be/abc", "-t", "-s"]) == 2
    assert dispatched == []


def test_version(capsys):
    assert _exit_code(["--version"]) == 0
    assert __version__ in capsys.readouterr().out


def test_output_override_is_dispatched(tmp_path, monkeypatch, dispatched):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert _exit_code(["-o", str(tmp_path / "media")]) == 0

    [(request, paths, config)] = dispatched
    assert request.action is Action.SET_OUTPUT
    assert paths.output_dir == tmp_path / "media" / "output"
    assert paths.libs_dir == tmp_path / ".config" / "ytrs" / "libs"
    assert config.fetch_attempts == 1


def test_search_words_are_joined(tmp_path, monkeypatch, dispatched):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert _exit_code(["-a", "never", "gonna", "give"]) == 0

    [(request, _, _)] = dispatched
    assert request.action is Action.DOWNLOAD
    assert request.source == "never gonna give"


def test_configuration_error_exits_one(monkeypatch, tmp_path, capsys):
    monkeypatch.delenv("HOME", raising=False)
    monkeypatch.delenv("USERPROFILE", raising=False)

    assert _exit_code(["-o", str(tmp_path)]) == 1
    assert "ConfigurationError" in capsys.readouterr().err


def test_invalid_config_file_exits_one(tmp_path, monkeypatch, dispatched):
    monkeypatch.setenv("HOME", str(tmp_path))
    config_dir = tmp_path / ".config" / "ytrs"
    config_dir.mkdir(parents=True)
    (config_dir / "config.ini").write_text("[DEFAULT]\nfetch_attempts = 99\n")

    assert _exit_code(["--install"]) == 1
    assert dispatched == []


def test_set_output_end_to_end(tmp_path, monkeypatch):
    """Runs the real dispatcher; setting the output spawns nothing."""
    monkeypatch.setenv("HOME", str(tmp_path))

    assert _exit_code(["-o", str(tmp_path / "media")]) == 0
    assert (tmp_path / "media" / "output").is_dir()


def test_init_config_writes_defaults(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))

    assert _exit_code(["--init-config"]) == 0

    text = (tmp_path / ".config" / "ytrs" / "config.ini").read_text()
    assert "ollama_host = http://localhost:11434" in text


def test_ctrl_c_during_dispatch_exits_zero(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))

    class InterruptedDispatcher:
        def __init__(self, paths, config, console):
            pass

        async def dispatch(self, request):
            raise KeyboardInterrupt

    monkeypatch.setattr(app_module, "Dispatcher", InterruptedDispatcher)

    assert _exit_code(["--install"]) == 0
    assert "Operation cancelled by user" in capsys.readouterr().err
