"""
Platform detection for setup-slotalk.

Maps the host operating system and CPU architecture onto one of the four
platform pairs slotalk publishes binaries for:

- linux/amd64
- linux/arm64
- darwin/amd64
- darwin/arm64

Any other combination is reported as unsupported before a URL is built.

Usage:
    from setup_slotalk.core.platform import detect_platform

    host = detect_platform()
    print(host.asset_suffix())  # e.g. 'linux-amd64'
"""

import functools
import logging
import platform
from dataclasses import dataclass

from setup_slotalk.core.exceptions import UnsupportedPlatformError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Platform:
    """
    A supported (operating system, architecture) pair.

    Attributes:
        os: Release os identifier ('linux', 'darwin')
        arch: Release architecture identifier ('amd64', 'arm64')
    """

    os: str
    arch: str

    def asset_suffix(self) -> str:
        """
        Get the platform part of a release asset name.

        Example:
            >>> Platform("darwin", "arm64").asset_suffix()
            'darwin-arm64'
        """
        return f"{self.os}-{self.arch}"

    def __str__(self) -> str:
        return f"{self.os}/{self.arch}"


SUPPORTED_PLATFORMS = (
    Platform("linux", "amd64"),
    Platform("linux", "arm64"),
    Platform("darwin", "amd64"),
    Platform("darwin", "arm64"),
)

_OS_MAP = {
    "linux": "linux",
    "darwin": "darwin",
}

_ARCH_MAP = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def resolve_platform(system: str, machine: str) -> Platform:
    """
    Resolve the host's reported OS kind and CPU architecture.

    Args:
        system: OS kind as reported by platform.system() ('Linux', 'Darwin')
        machine: Architecture as reported by platform.machine()

    Returns:
        The matching supported Platform

    Raises:
        UnsupportedPlatformError: If no published binary matches the host
    """
    os_name = _OS_MAP.get((system or "").lower())
    arch = _ARCH_MAP.get((machine or "").lower())

    candidate = Platform(os_name, arch) if os_name and arch else None
    if candidate is None or candidate not in SUPPORTED_PLATFORMS:
        logger.warning(
            "the installer was not able to find a valid slotalk binary for the "
            f"host runner os/arch: {system}/{machine}"
        )
        raise UnsupportedPlatformError(system, machine)

    logger.debug(f"Resolved host {system}/{machine} to {candidate}")
    return candidate


@functools.lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """
    Detect the current host platform.

    Cached: detection runs once per process.

    Raises:
        UnsupportedPlatformError: If the host is not a supported pair
    """
    return resolve_platform(platform.system(), platform.machine())


def is_supported_platform(os_name: str, arch: str) -> bool:
    """Check whether (os_name, arch) is one of the published pairs."""
    return Platform(os_name, arch) in SUPPORTED_PLATFORMS


def clear_platform_cache():
    """Clear the detect_platform() cache."""
    detect_platform.cache_clear()


__all__ = [
    "Platform",
    "SUPPORTED_PLATFORMS",
    "resolve_platform",
    "detect_platform",
    "is_supported_platform",
    "clear_platform_cache",
]
