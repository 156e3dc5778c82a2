"""
File system utilities for setup-slotalk.

This module provides the file operations the installer needs:
- Safe tar.gz extraction (directory traversal is rejected)
- Permission forcing for downloaded artifacts
- Atomic writes for the cache index
- Tree copy and removal for cache population and cleanup
"""

import logging
import os
import shutil
import sys
import tarfile
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from setup_slotalk.core.exceptions import ArchiveExtractionError, InsecureArchiveError

logger = logging.getLogger(__name__)

# rwx for owner, group and others; CI runners are ephemeral
PERMISSIVE_MODE = 0o777


# ============================================================================
# Permissions
# ============================================================================


def make_permissive(path: Union[str, Path]) -> Path:
    """
    Set path's permission bits to 0o777.

    Args:
        path: File or directory to update

    Returns:
        The path as a Path object
    """
    path = Path(path)
    os.chmod(path, PERMISSIVE_MODE)
    logger.debug(f"Set mode {PERMISSIVE_MODE:o} on {path}")
    return path


# ============================================================================
# Archive Extraction
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """Check if path is parent or lives below it."""
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def _validate_archive_path(name: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / name).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{name}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_tar_gz(
    archive_path: Union[str, Path],
    destination: Optional[Union[str, Path]] = None,
) -> Path:
    """
    Extract a gzip-compressed tar archive into a new directory.

    Args:
        archive_path: Path to the .tar.gz file (the name need not end in .tar.gz)
        destination: Directory to extract to (a new temp dir if None)

    Returns:
        Path to the directory holding the extracted tree

    Raises:
        ArchiveExtractionError: If the archive is missing or unreadable
        InsecureArchiveError: If the archive contains malicious paths

    Example:
        >>> extracted = extract_tar_gz('/tmp/slotalk_abc.tar.gz')
    """
    archive_path = Path(archive_path)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    if destination is None:
        destination = Path(tempfile.mkdtemp(prefix="slotalk_extract_"))
    else:
        destination = Path(destination)
        destination.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Extracting {archive_path} to {destination}")

    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            members = tar.getmembers()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.name, destination)

            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)

    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError, EOFError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    logger.debug(f"Extracted {len(members)} entries")
    return destination


# ============================================================================
# Safe File Operations
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: str, encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    The file is never observed in a partially-written state.
    """
    file_path = Path(file_path)
    file_path.parent.mkdir(parents=True, exist_ok=True)

    # Temp file in the same directory keeps the rename on one filesystem
    temp_fd, temp_path_str = tempfile.mkstemp(
        dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    temp_path = Path(temp_path_str)

    try:
        with open(temp_fd, "w", encoding=encoding) as f:
            f.write(content)
        temp_path.replace(file_path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def copy_tree(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Copy a directory tree, replacing destination if it exists.

    Returns:
        Resolved destination path
    """
    source = Path(source)
    destination = Path(destination)

    if destination.exists():
        safe_rmtree(destination)

    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, destination, symlinks=True)
    return destination.resolve()


def safe_rmtree(path: Union[str, Path]) -> None:
    """Remove a directory tree; a missing path is a no-op."""
    path = Path(path).resolve()

    if not path.exists():
        return

    shutil.rmtree(path)


@contextmanager
def temporary_directory(prefix: str = "slotalk_"):
    """
    Context manager for temporary directory with automatic cleanup.

    Yields:
        Path to temporary directory
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=prefix))

    try:
        yield temp_dir
    finally:
        if temp_dir.exists():
            safe_rmtree(temp_dir)


__all__ = [
    "PERMISSIVE_MODE",
    "make_permissive",
    "is_relative_to",
    "extract_tar_gz",
    "atomic_write",
    "copy_tree",
    "safe_rmtree",
    "temporary_directory",
]
