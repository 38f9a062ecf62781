"""
Ensures the external binaries exist in the libraries directory, fetching them if not.
"""

import asyncio
import logging
import os
import shutil
import stat
from pathlib import Path

from ytrs_cli.cli.progress_manager import TransferProgress
from ytrs_cli.exceptions import DependencyFetchError, DownloadError
from ytrs_cli.media.downloader import Downloader

from .archive import extract_members
from .registry import (
    REQUIRED_DEPENDENCIES,
    WINDOWS,
    Dependency,
    current_platform,
    executable_name,
)

log = logging.getLogger(__name__)


class DependencyInstaller:
    """
    Installs missing dependencies into a libraries directory.

    Installation is idempotent: when every executable is already present no
    directory is created and no network request is made.
    """

    def __init__(
        self,
        libs_dir: Path,
        fetcher: Downloader,
        dependencies: tuple[Dependency, ...] = REQUIRED_DEPENDENCIES,
        platform_key: str | None = None,
        progress: TransferProgress | None = None,
    ):
        self.libs_dir = libs_dir
        self.dependencies = dependencies
        self.platform_key = platform_key or current_platform()
        self._fetcher = fetcher
        self._progress = progress

    def executable_path(self, dependency: Dependency) -> Path:
        return dependency.path_in(self.libs_dir, self.platform_key)

    def is_installed(self, dependency: Dependency) -> bool:
        return all(
            (self.libs_dir / name).is_file()
            for name in dependency.executables(self.platform_key)
        )

    def missing(self) -> list[Dependency]:
        return [dep for dep in self.dependencies if not self.is_installed(dep)]

    async def ensure_installed(self) -> list[Dependency]:
        """
        Installs every missing dependency.

        Returns:
            The dependencies that were installed by this call (empty if none).

        Raises:
            DependencyFetchError: On network or write failure.
        """
        missing = self.missing()
        if not missing:
            log.debug(f"All dependencies present in '{self.libs_dir}'.")
            return []

        for dependency in missing:
            log.info(
                f"[yellow]{dependency.name} not found at "
                f"'{self.executable_path(dependency)}'[/yellow]"
            )
        log.info("Installing libraries...")
        for dependency in missing:
            await self.install(dependency)
            log.info(
                f"[green]✓ Installed {dependency.name} to "
                f"'{self.executable_path(dependency)}'[/green]"
            )
        return missing

    async def install(self, dependency: Dependency) -> None:
        """Fetches one dependency and places its executables in the libraries dir."""
        try:
            self.libs_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DependencyFetchError(
                f"Cannot create libraries directory '{self.libs_dir}': {e}"
            ) from e

        staging_dir = self.libs_dir / f".{dependency.name}.staging"
        try:
            for source in dependency.sources_for(self.platform_key):
                targets = {
                    executable_name(member, self.platform_key): self.libs_dir
                    / executable_name(member, self.platform_key)
                    for member in source.members
                }
                if all(path.is_file() for path in targets.values()):
                    continue

                staging_dir.mkdir(exist_ok=True)
                if source.archive is None:
                    (name,) = targets
                    staged = {
                        name: await self._fetch(
                            source.url, staging_dir / name, dependency.name
                        )
                    }
                else:
                    archive_path = await self._fetch(
                        source.url,
                        staging_dir / f"{dependency.name}.{source.archive}",
                        dependency.name,
                    )
                    staged = {name: staging_dir / name for name in targets}
                    await asyncio.to_thread(
                        extract_members, archive_path, source.archive, staged
                    )

                for name, staged_path in staged.items():
                    self._make_executable(staged_path)
                    os.replace(staged_path, targets[name])
        except OSError as e:
            raise DependencyFetchError(
                f"Failed to install {dependency.name} into '{self.libs_dir}': {e}"
            ) from e
        finally:
            shutil.rmtree(staging_dir, ignore_errors=True)

    async def _fetch(self, url: str, destination: Path, label: str) -> Path:
        log.debug(f"Fetching {label} from {url}")
        try:
            return await self._fetcher.download_file(
                url, destination, progress=self._progress, description=label
            )
        except DownloadError as e:
            raise DependencyFetchError(f"Could not download {label}: {e}") from e

    def _make_executable(self, path: Path) -> None:
        if self.platform_key == WINDOWS:
            return
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
