"""
Release tag normalization.

Users may pass ``1.2.3`` or ``v1.2.3``; the release repository only knows
the ``v``-prefixed tag form. ``latest`` is a sentinel and passes through.

Usage:
    from setup_slotalk.core.version import normalize_version

    normalize_version("1.2.3")   # 'v1.2.3'
    normalize_version("v1.2.3")  # 'v1.2.3'
    normalize_version("latest")  # 'latest'
"""

from setup_slotalk.core.exceptions import InvalidVersionError

LATEST = "latest"


def is_latest(version: str) -> bool:
    """Return True if version is the ``latest`` sentinel."""
    return version == LATEST


def normalize_version(raw: str) -> str:
    """
    Convert a user supplied version into release tag form.

    No further validation is done; a malformed tag surfaces later as a
    failed download.

    Args:
        raw: Version as given by the user ('latest', '1.2.3', 'v1.2.3')

    Returns:
        'latest' unchanged, otherwise the version prefixed with 'v'

    Raises:
        InvalidVersionError: If the version is empty

    Example:
        >>> normalize_version("0.4.0")
        'v0.4.0'
    """
    version = (raw or "").strip()

    if not version:
        raise InvalidVersionError("Version cannot be empty")

    if is_latest(version) or version.startswith("v"):
        return version

    return "v" + version


__all__ = ["LATEST", "is_latest", "normalize_version"]
