"""
Executable discovery inside an installed tree.

Release archives do not promise a layout: the binary may sit at the top
level or a few directories down. The tree is walked depth-first and the
first file carrying the tool's name wins.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Union

from setup_slotalk.core.exceptions import ExecutableNotFoundError
from setup_slotalk.core.filesystem import make_permissive

logger = logging.getLogger(__name__)


def iter_matches(root: Union[str, Path], name: str) -> Iterator[Path]:
    """
    Yield every file named name below root, depth-first.

    Entries of a directory are visited in sorted order and each
    sub-directory is descended into where it is encountered, so the same
    tree always yields the same sequence.

    Args:
        root: Directory to search
        name: File name to match exactly

    Yields:
        Paths of matching files, in traversal order
    """
    with os.scandir(root) as it:
        entries = sorted(it, key=lambda e: e.name)

    for entry in entries:
        if entry.is_dir():
            yield from iter_matches(entry.path, name)
        else:
            logger.debug(entry.name)
            if entry.name == name:
                yield Path(entry.path)


def find_executable(root: Union[str, Path], name: str = "slotalk") -> Path:
    """
    Locate the tool executable in an installed tree.

    The search root and the match are both made fully permissive so the
    binary can be invoked whatever modes the archive carried.

    Args:
        root: Installed tree to search
        name: Executable file name

    Returns:
        Absolute path of the first match

    Raises:
        ExecutableNotFoundError: If no file named name exists below root

    Example:
        >>> find_executable(Path('/opt/hostedtoolcache/slotalk/v1.2.3/x86_64'))
        PosixPath('/opt/hostedtoolcache/slotalk/v1.2.3/x86_64/bin/slotalk')
    """
    root = Path(root).resolve()
    if not root.is_dir():
        raise ExecutableNotFoundError(root, name)

    make_permissive(root)

    match = next(iter_matches(root, name), None)
    if match is None:
        raise ExecutableNotFoundError(root, name)

    make_permissive(match)
    logger.debug(f"Found {name} at {match}")
    return match


__all__ = ["iter_matches", "find_executable"]
