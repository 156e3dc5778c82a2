"""
Slotalk installation workflow.

Sequences version normalization, cache lookup, download and extraction on
a miss, and executable discovery:

    NORMALIZE_VERSION -> RESOLVE_CACHE_OR_DOWNLOAD -> LOCATE_EXECUTABLE -> DONE

Any failure moves the installer to FAILED and the error propagates to the
caller. Nothing is retried.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from setup_slotalk.core.download import download_file
from setup_slotalk.core.filesystem import (
    extract_tar_gz,
    make_permissive,
    temporary_directory,
)
from setup_slotalk.core.locator import find_executable
from setup_slotalk.core.platform import Platform
from setup_slotalk.core.release import (
    DEFAULT_RELEASES_BASE,
    TOOL_NAME,
    get_download_url,
)
from setup_slotalk.core.tool_cache import ToolCache
from setup_slotalk.core.version import normalize_version

logger = logging.getLogger(__name__)


class InstallState(Enum):
    """States of a single install run."""

    NORMALIZE_VERSION = "normalize-version"
    RESOLVE_CACHE_OR_DOWNLOAD = "resolve-cache-or-download"
    LOCATE_EXECUTABLE = "locate-executable"
    DONE = "done"
    FAILED = "failed"


@dataclass
class InstallResult:
    """
    Outcome of a successful install.

    Attributes:
        version: Normalized release tag
        path: Absolute path of the slotalk executable
        cached: True if the install was served from the tool cache
        download_url: URL fetched on a cache miss, None on a hit
    """

    version: str
    path: Path
    cached: bool
    download_url: Optional[str] = None


class SlotalkInstaller:
    """
    Resolve a slotalk version to an executable in the tool cache.

    Example:
        >>> installer = SlotalkInstaller(ToolCache(Path('/tmp/tool-cache')))
        >>> result = installer.install('1.2.3')
        >>> print(result.path)
    """

    def __init__(
        self,
        cache: ToolCache,
        platform: Optional[Platform] = None,
        releases_base: str = DEFAULT_RELEASES_BASE,
        tool_name: str = TOOL_NAME,
        timeout: int = 30,
        downloader: Callable[..., Path] = download_file,
        extractor: Callable[[Path, Path], Path] = extract_tar_gz,
    ):
        """
        Initialize installer.

        Args:
            cache: Tool cache to look up and populate
            platform: Target platform (detected on a cache miss if None)
            releases_base: Base URL of the releases page
            tool_name: Tool name used for cache keys, asset and executable names
            timeout: Download timeout in seconds
            downloader: Callable(url, timeout=...) returning the archive path
            extractor: Callable(archive, destination) returning the extracted tree
        """
        self.cache = cache
        self.platform = platform
        self.releases_base = releases_base
        self.tool_name = tool_name
        self.timeout = timeout
        self.downloader = downloader
        self.extractor = extractor
        self.state = InstallState.NORMALIZE_VERSION
        self.history: List[InstallState] = []

    def _enter(self, state: InstallState):
        self.state = state
        self.history.append(state)
        logger.debug(f"Install state: {state.value}")

    def install(self, raw_version: str) -> InstallResult:
        """
        Install (or reuse) the requested slotalk version.

        Args:
            raw_version: 'latest' or a version with or without its 'v' prefix

        Returns:
            InstallResult describing the located executable

        Raises:
            InvalidVersionError: If the version is empty
            UnsupportedPlatformError: If the host has no published binary
            DownloadError: If the archive cannot be fetched
            ArchiveExtractionError: If the archive cannot be extracted
            ExecutableNotFoundError: If the tree holds no slotalk file
        """
        self.history = []

        try:
            self._enter(InstallState.NORMALIZE_VERSION)
            version = normalize_version(raw_version)

            self._enter(InstallState.RESOLVE_CACHE_OR_DOWNLOAD)
            download_url = None
            install_root = self.cache.find(self.tool_name, version)
            cached = install_root is not None

            if cached:
                logger.info(f"Found {self.tool_name} {version} in tool cache")
            else:
                download_url = get_download_url(
                    version,
                    platform=self.platform,
                    tool=self.tool_name,
                    releases_base=self.releases_base,
                )
                install_root = self._download_and_cache(download_url, version)

            self._enter(InstallState.LOCATE_EXECUTABLE)
            path = find_executable(install_root, self.tool_name)

        except Exception:
            self._enter(InstallState.FAILED)
            raise

        self._enter(InstallState.DONE)
        return InstallResult(
            version=version, path=path, cached=cached, download_url=download_url
        )

    def _download_and_cache(self, url: str, version: str) -> Path:
        """Fetch, extract and register one release archive."""
        archive = self.downloader(url, timeout=self.timeout)

        try:
            make_permissive(archive)
            with temporary_directory(prefix=f"{self.tool_name}_extract_") as staging:
                extracted = self.extractor(archive, staging)
                return self.cache.cache_dir(
                    extracted, self.tool_name, version, source_url=url
                )
        finally:
            Path(archive).unlink(missing_ok=True)


__all__ = ["InstallState", "InstallResult", "SlotalkInstaller"]
