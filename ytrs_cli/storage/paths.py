"""
Computes the configuration, libraries and output directories for an invocation.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from ytrs_cli.exceptions import ConfigurationError
from ytrs_cli.models.config import AppPaths

log = logging.getLogger(__name__)

APP_DIR_NAME = "ytrs"
LIBS_DIR_NAME = "libs"
OUTPUT_DIR_NAME = "output"


def get_home_dir(
    env: Mapping[str, str] | None = None, os_name: str | None = None
) -> Path:
    """
    Returns the user's home (profile) directory.

    Windows uses %USERPROFILE%, every other platform uses $HOME.

    Raises:
        ConfigurationError: If the variable is unset or empty.
    """
    env = os.environ if env is None else env
    var = "USERPROFILE" if (os_name or os.name) == "nt" else "HOME"
    value = env.get(var, "").strip()
    if not value:
        raise ConfigurationError(
            f"Could not determine the home directory: ${var} is not set."
        )
    return Path(value)


class PathResolver:
    """
    Produces an AppPaths value from environment defaults and CLI overrides.

    The resolver only computes paths; it never creates directories.
    """

    def __init__(
        self,
        home: Path | None = None,
        env: Mapping[str, str] | None = None,
        os_name: str | None = None,
    ):
        self._home = home
        self._env = env
        self._os_name = os_name

    @property
    def home(self) -> Path:
        if self._home is None:
            self._home = get_home_dir(self._env, self._os_name)
        return self._home

    @property
    def config_root(self) -> Path:
        """`<home>/.config/ytrs`, on every platform."""
        return self.home / ".config" / APP_DIR_NAME

    def resolve(
        self,
        libs_override: Path | None = None,
        output_override: Path | None = None,
    ) -> AppPaths:
        """
        Resolves the directories for this invocation.

        Both overrides get their own segment appended: `-l /x` gives `/x/libs`
        and `-o /x` gives `/x/output`, even if `/x` already ends in that name.

        Raises:
            ConfigurationError: If a default is needed and the home directory
            cannot be determined.
        """
        if libs_override is not None:
            libs_dir = Path(libs_override).expanduser() / LIBS_DIR_NAME
        else:
            libs_dir = self.config_root / LIBS_DIR_NAME

        if output_override is not None:
            output_dir = Path(output_override).expanduser() / OUTPUT_DIR_NAME
        else:
            output_dir = self.config_root / OUTPUT_DIR_NAME

        try:
            config_root = self.config_root
        except ConfigurationError:
            # Both directories were overridden; run without a config file.
            log.debug("No home directory available, skipping config.ini.")
            config_root = None

        return AppPaths(
            config_root=config_root, libs_dir=libs_dir, output_dir=output_dir
        )
