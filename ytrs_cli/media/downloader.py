"""
Handles the low-level downloading of files over HTTP: dependency binaries,
subtitle tracks and thumbnails.
"""

import asyncio
import logging
import os
from pathlib import Path

import aiofiles
import aiohttp

from ytrs_cli.cli.progress_manager import TransferProgress
from ytrs_cli.exceptions import DownloadError

log = logging.getLogger(__name__)

PART_SUFFIX = ".part"


class Downloader:
    """
    A low-level file downloader with optional retries.

    Files are streamed to `<destination>.part` and renamed into place only once
    complete, so an interrupted transfer never leaves a truncated file behind.
    """

    CHUNK_SIZE = 262144  # 256 KB

    def __init__(
        self,
        max_attempts: int = 1,
        base_delay: float = 1.5,
        timeout: aiohttp.ClientTimeout | None = None,
    ):
        self.max_attempts = max(1, max_attempts)
        self.base_delay = base_delay
        self._timeout = timeout or aiohttp.ClientTimeout(
            total=None, sock_connect=15, sock_read=90
        )
        self._session: aiohttp.ClientSession | None = None

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
                headers={"User-Agent": "ytrs-cli"},
            )
        return self._session

    async def close(self) -> None:
        """Gracefully closes the aiohttp session."""
        if self._session and not self._session.closed:
            await self._session.close()
            log.debug("Downloader session closed.")

    async def download_file(
        self,
        url: str,
        destination_path: Path,
        progress: TransferProgress | None = None,
        description: str | None = None,
    ) -> Path:
        """
        Downloads a URL to a file, updating a Rich progress bar if given.

        Raises:
            DownloadError: When every attempt failed. No partial file remains.
        """
        destination_path = Path(destination_path)
        part_path = destination_path.with_name(destination_path.name + PART_SUFFIX)
        label = description or destination_path.name
        last_exception: Exception | None = None

        for attempt in range(1, self.max_attempts + 1):
            task_id = None
            try:
                session = await self._get_session()
                async with session.get(url, allow_redirects=True) as response:
                    response.raise_for_status()
                    total = int(response.headers.get("Content-Length", 0)) or None
                    if progress:
                        task_id = progress.add_task(label, total)

                    bytes_downloaded = 0
                    async with aiofiles.open(part_path, "wb") as f:
                        async for chunk in response.content.iter_chunked(
                            self.CHUNK_SIZE
                        ):
                            await f.write(chunk)
                            bytes_downloaded += len(chunk)
                            if progress:
                                progress.update_task_progress(task_id, bytes_downloaded)

                await asyncio.to_thread(os.replace, part_path, destination_path)
                if progress:
                    progress.remove_task(task_id)
                log.debug(f"Downloaded '{url}' to '{destination_path}'.")
                return destination_path
            except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
                last_exception = e
                if progress:
                    progress.remove_task(task_id)
                self._discard(part_path)
                log.debug(
                    f"Download attempt {attempt}/{self.max_attempts} for "
                    f"'{destination_path.name}' failed: {e}."
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.base_delay * (2 ** (attempt - 1)))
            except BaseException:
                if progress:
                    progress.remove_task(task_id)
                self._discard(part_path)
                raise

        raise DownloadError(
            f"Failed to download '{url}' after {self.max_attempts} attempt(s): "
            f"{last_exception}"
        ) from last_exception

    async def fetch_bytes(self, url: str) -> bytes:
        """Fetches a small resource (thumbnail, subtitle track) into memory."""
        try:
            session = await self._get_session()
            async with session.get(url, allow_redirects=True) as response:
                response.raise_for_status()
                return await response.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DownloadError(f"Failed to fetch '{url}': {e}") from e

    @staticmethod
    def _discard(path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            log.warning(f"Could not remove partial file '{path}': {e}")
