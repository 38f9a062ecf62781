"""
Tests for loading and writing the optional config.ini.
"""

import pytest

from ytrs_cli.exceptions import ConfigurationError
from ytrs_cli.models.config import AudioFormat, MediaKind
from ytrs_cli.storage.config_manager import ConfigManager


def test_missing_file_gives_defaults(tmp_path):
    config = ConfigManager(tmp_path / "config.ini").load_config()

    assert config.ollama_host == "http://localhost:11434"
    assert config.default_kind is MediaKind.AUDIO
    assert config.audio_format is AudioFormat.MP3
    assert config.fetch_attempts == 1
    assert config.config_path == str(tmp_path)


def test_no_config_file_path_gives_defaults():
    config = ConfigManager(None).load_config()
    assert config.search_results == 10
    assert config.config_path == ""


def test_values_are_read_from_file(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text(
        "[DEFAULT]\n"
        "ollama_host = http://gpu-box:11434/\n"
        "ollama_model = llama3\n"
        "default_kind = VIDEO\n"
        "video_format = mov\n"
        "search_results = 5\n"
        "embed_metadata = no\n"
        "fetch_attempts = 3\n"
    )
    config = ConfigManager(config_file).load_config()

    assert config.ollama_host == "http://gpu-box:11434"
    assert config.ollama_model == "llama3"
    assert config.default_kind is MediaKind.VIDEO
    assert config.default_format(MediaKind.VIDEO) == "mov"
    assert config.search_results == 5
    assert config.embed_metadata is False
    assert config.fetch_attempts == 3


def test_cli_options_override_file_and_none_is_ignored(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\nollama_model = llama3\naudio_format = wav\n")
    config = ConfigManager(config_file).load_config(
        {"ollama_model": "mistral", "audio_format": None}
    )
    assert config.ollama_model == "mistral"
    assert config.audio_format is AudioFormat.WAV


@pytest.mark.parametrize(
    "line",
    [
        "ollama_host = localhost:11434",
        "audio_format = flac",
        "search_results = 0",
        "fetch_attempts = 9",
        "subtitle_format = docx",
        "search_results = many",
    ],
)
def test_invalid_values_raise_configuration_error(tmp_path, line):
    config_file = tmp_path / "config.ini"
    config_file.write_text(f"[DEFAULT]\n{line}\n")
    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_malformed_file_raises_configuration_error(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("this is not an ini file\n")
    with pytest.raises(ConfigurationError):
        ConfigManager(config_file).load_config()


def test_unknown_keys_are_ignored_with_warning(tmp_path, caplog):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\ntoken = abc\n")
    config = ConfigManager(config_file).load_config()

    assert config.ollama_model == ""
    assert "Ignoring unknown configuration key 'token'" in caplog.text


def test_save_new_config_round_trips(tmp_path):
    config_file = tmp_path / "ytrs" / "config.ini"
    manager = ConfigManager(config_file)

    saved = manager.save_new_config({"ollama_model": "llama3", "embed_metadata": False})

    assert saved == config_file
    text = config_file.read_text()
    assert "ollama_model = llama3" in text
    assert "embed_metadata = false" in text
    assert "config_path" not in text
    reloaded = ConfigManager(config_file).load_config()
    assert reloaded.ollama_model == "llama3"
    assert reloaded.embed_metadata is False


def test_save_without_home_fails():
    with pytest.raises(ConfigurationError):
        ConfigManager(None).save_new_config()


def test_percent_signs_are_read_literally(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text("[DEFAULT]\nollama_model = qwen%2\n")

    assert ConfigManager(config_file).load_config().ollama_model == "qwen%2"


def test_saved_percent_signs_read_back(tmp_path):
    manager = ConfigManager(tmp_path / "config.ini")
    manager.save_new_config({"ollama_model": "qwen%2"})

    assert ConfigManager(tmp_path / "config.ini").load_config().ollama_model == (
        "qwen%2"
    )
