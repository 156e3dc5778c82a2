"""
Release download URL construction.

Slotalk publishes one ``.tar.gz`` per platform on GitHub releases:

    <base>/latest/download/slotalk-<os>-<arch>.tar.gz
    <base>/download/<tag>/slotalk-<os>-<arch>.tar.gz
"""

from typing import Optional

from setup_slotalk.core.platform import Platform, detect_platform, is_supported_platform
from setup_slotalk.core.version import is_latest

TOOL_NAME = "slotalk"
DEFAULT_RELEASES_BASE = "https://github.com/tfadeyi/slotalk/releases"


def build_download_url(
    os_name: str,
    arch: str,
    version: str,
    tool: str = TOOL_NAME,
    releases_base: str = DEFAULT_RELEASES_BASE,
) -> str:
    """
    Compose the download URL of a release archive.

    Pure string formatting, no network access.

    Args:
        os_name: Release os identifier ('linux', 'darwin')
        arch: Release architecture identifier ('amd64', 'arm64')
        version: 'latest' or a 'v'-prefixed release tag
        tool: Tool (and asset) name
        releases_base: Base URL of the releases page

    Returns:
        Download URL

    Raises:
        ValueError: If the pair is not supported or the tag lacks its 'v'

    Example:
        >>> build_download_url("linux", "amd64", "v1.2.3")
        'https://github.com/tfadeyi/slotalk/releases/download/v1.2.3/slotalk-linux-amd64.tar.gz'
    """
    if not is_supported_platform(os_name, arch):
        raise ValueError(f"Unsupported platform pair: {os_name}/{arch}")

    base = releases_base.rstrip("/")
    asset = f"{tool}-{os_name}-{arch}.tar.gz"

    if is_latest(version):
        return f"{base}/latest/download/{asset}"

    if not version.startswith("v"):
        raise ValueError(f"Release tag must start with 'v': {version}")

    return f"{base}/download/{version}/{asset}"


def get_download_url(
    version: str,
    platform: Optional[Platform] = None,
    tool: str = TOOL_NAME,
    releases_base: str = DEFAULT_RELEASES_BASE,
) -> str:
    """
    Build the download URL for the given (or detected) host platform.

    Raises:
        UnsupportedPlatformError: If the host platform is not supported
    """
    if platform is None:
        platform = detect_platform()

    return build_download_url(
        platform.os, platform.arch, version, tool=tool, releases_base=releases_base
    )


__all__ = [
    "TOOL_NAME",
    "DEFAULT_RELEASES_BASE",
    "build_download_url",
    "get_download_url",
]
