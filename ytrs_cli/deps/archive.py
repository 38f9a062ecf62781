"""
Extracts executables out of downloaded release archives.
"""

import logging
import lzma
import shutil
import tarfile
import zipfile
from pathlib import Path, PurePosixPath

from ytrs_cli.exceptions import DependencyFetchError

log = logging.getLogger(__name__)


def extract_members(archive_path: Path, kind: str, targets: dict[str, Path]) -> None:
    """
    Copies archive members, matched by file name, to their target paths.

    Args:
        archive_path: The downloaded archive.
        kind: "zip" or "tar.xz".
        targets: Member file name -> destination path.

    Raises:
        DependencyFetchError: If the archive is unreadable or a member is missing.
    """
    try:
        if kind == "zip":
            found = _extract_zip(archive_path, targets)
        elif kind == "tar.xz":
            found = _extract_tar(archive_path, targets)
        else:
            raise DependencyFetchError(f"Unsupported archive format: {kind}")
    except (zipfile.BadZipFile, tarfile.TarError, lzma.LZMAError, EOFError) as e:
        raise DependencyFetchError(
            f"Archive '{archive_path.name}' is corrupt or incomplete: {e}"
        ) from e
    except OSError as e:
        raise DependencyFetchError(
            f"Failed to extract '{archive_path.name}': {e}"
        ) from e

    missing = sorted(set(targets) - found)
    if missing:
        for name in found:
            targets[name].unlink(missing_ok=True)
        raise DependencyFetchError(
            f"Archive '{archive_path.name}' does not contain: {', '.join(missing)}"
        )


def _extract_zip(archive_path: Path, targets: dict[str, Path]) -> set[str]:
    found: set[str] = set()
    with zipfile.ZipFile(archive_path) as zf:
        for info in zf.infolist():
            name = PurePosixPath(info.filename).name
            if info.is_dir() or name not in targets or name in found:
                continue
            with zf.open(info) as src, open(targets[name], "wb") as dst:
                shutil.copyfileobj(src, dst)
            log.debug(f"Extracted '{info.filename}' to '{targets[name]}'.")
            found.add(name)
    return found


def _extract_tar(archive_path: Path, targets: dict[str, Path]) -> set[str]:
    found: set[str] = set()
    with tarfile.open(archive_path, "r:xz") as tf:
        for member in tf:
            name = PurePosixPath(member.name).name
            if not member.isfile() or name not in targets or name in found:
                continue
            src = tf.extractfile(member)
            if src is None:
                continue
            with src, open(targets[name], "wb") as dst:
                shutil.copyfileobj(src, dst)
            log.debug(f"Extracted '{member.name}' to '{targets[name]}'.")
            found.add(name)
    return found
