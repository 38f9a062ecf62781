"""
Manages loading, validation and creation of the optional INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ytrs_cli.exceptions import ConfigurationError
from ytrs_cli.models.config import AppConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path | None):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> AppConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        A missing file is not an error: every setting has a default.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated AppConfig object.

        Raises:
            ConfigurationError: If the config file is unreadable or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path is not None and self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
            except configparser.Error as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
            config_from_file = self._get_config_as_dict()
            log.debug(f"Loaded configuration from '{self.config_file_path}'.")

        if cli_options:
            config_from_file.update(
                {k: v for k, v in cli_options.items() if v is not None}
            )

        config_dir = (
            str(self.config_file_path.parent) if self.config_file_path else ""
        )
        try:
            return AppConfig(**config_from_file, config_path=config_dir)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any] | None = None) -> Path:
        """
        Creates and saves a configuration file holding every known key.

        Args:
            settings: Values to use instead of the defaults.

        Returns:
            The path of the written file.
        """
        if self.config_file_path is None:
            raise ConfigurationError(
                "No configuration directory is available (home directory unknown)."
            )

        settings = settings or {}
        try:
            config = AppConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        parser = configparser.ConfigParser(interpolation=None)
        parser["DEFAULT"] = {}
        for key in sorted(AppConfig.get_ini_keys()):
            value = getattr(config, key)
            if isinstance(value, bool):
                parser["DEFAULT"][key] = "true" if value else "false"
            elif hasattr(value, "value"):
                parser["DEFAULT"][key] = str(value.value)
            else:
                parser["DEFAULT"][key] = str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e
        return self.config_file_path

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the known keys of the 'DEFAULT' section into a dictionary."""
        section = self._parser["DEFAULT"]
        known = AppConfig.get_ini_keys()
        for key in section:
            if key not in known:
                log.warning(f"Ignoring unknown configuration key '{key}'.")

        values: dict[str, Any] = {}
        try:
            for key in ("ollama_host", "ollama_model", "subtitle_format"):
                if key in section:
                    values[key] = section.get(key)
            for key in ("default_kind", "audio_format", "video_format"):
                if key in section:
                    values[key] = section.get(key).lower()
            for key in ("search_results", "fetch_attempts"):
                if key in section:
                    values[key] = section.getint(key)
            if "embed_metadata" in section:
                values["embed_metadata"] = section.getboolean("embed_metadata")
        except ValueError as e:
            raise ConfigurationError(f"Invalid value in configuration file: {e}") from e
        return values
