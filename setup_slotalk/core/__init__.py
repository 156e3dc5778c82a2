"""
Core functionality for setup-slotalk.

This package contains the resolution, download, caching and discovery
logic; the pipeline and CLI layers build on it.
"""

from .exceptions import (
    SetupSlotalkError,
    ConfigError,
    InputError,
    InvalidVersionError,
    UnsupportedPlatformError,
    DownloadError,
    ArchiveExtractionError,
    InsecureArchiveError,
    ExecutableNotFoundError,
    RegistryError,
    RegistryLockTimeout,
)

from .version import LATEST, is_latest, normalize_version

from .platform import (
    Platform,
    SUPPORTED_PLATFORMS,
    resolve_platform,
    detect_platform,
    is_supported_platform,
    clear_platform_cache,
)

from .release import (
    TOOL_NAME,
    DEFAULT_RELEASES_BASE,
    build_download_url,
    get_download_url,
)

from .tool_cache import ToolCache, get_default_cache_root
from .locator import iter_matches, find_executable
from .installer import InstallState, InstallResult, SlotalkInstaller

__all__ = [
    "SetupSlotalkError",
    "ConfigError",
    "InputError",
    "InvalidVersionError",
    "UnsupportedPlatformError",
    "DownloadError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "ExecutableNotFoundError",
    "RegistryError",
    "RegistryLockTimeout",
    "LATEST",
    "is_latest",
    "normalize_version",
    "Platform",
    "SUPPORTED_PLATFORMS",
    "resolve_platform",
    "detect_platform",
    "is_supported_platform",
    "clear_platform_cache",
    "TOOL_NAME",
    "DEFAULT_RELEASES_BASE",
    "build_download_url",
    "get_download_url",
    "ToolCache",
    "get_default_cache_root",
    "iter_matches",
    "find_executable",
    "InstallState",
    "InstallResult",
    "SlotalkInstaller",
]
