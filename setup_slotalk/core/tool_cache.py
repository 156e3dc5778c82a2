"""
Local tool cache keyed by (tool name, version).

Installed trees live under the cache root as::

    <root>/
      registry.json                   index of cached installs
      lock/registry.lock              index lock
      <tool>/<version>/<arch>/        installed tree
      <tool>/<version>/<arch>.complete  completion marker

An entry is a hit only when it is registered, its tree exists and its
completion marker is present. Entries are never evicted here; pruning the
cache root is left to whoever owns it.
"""

import json
import logging
import os
import platform
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

from filelock import FileLock, Timeout

from setup_slotalk.core.exceptions import RegistryError, RegistryLockTimeout
from setup_slotalk.core.filesystem import atomic_write, copy_tree

logger = logging.getLogger(__name__)

TOOL_CACHE_ENV = "RUNNER_TOOL_CACHE"


def get_default_cache_root() -> Path:
    """
    Get the default tool cache root.

    Returns:
        $RUNNER_TOOL_CACHE when set (hosted CI runners), otherwise
        ~/.setup-slotalk/tool-cache
    """
    runner_cache = os.environ.get(TOOL_CACHE_ENV)
    if runner_cache:
        return Path(runner_cache)
    return Path.home() / ".setup-slotalk" / "tool-cache"


def _empty_registry() -> dict:
    return {"version": 1, "tools": {}}


class ToolCache:
    """
    Index of downloaded tool versions with file-locked access.

    Example:
        >>> cache = ToolCache(Path('/opt/hostedtoolcache'))
        >>> root = cache.find('slotalk', 'v1.2.3')
        >>> if root is None:
        ...     root = cache.cache_dir(extracted, 'slotalk', 'v1.2.3')
    """

    def __init__(
        self,
        root: Optional[Path] = None,
        arch: Optional[str] = None,
        lock_timeout: int = 30,
    ):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory (default: get_default_cache_root())
            arch: Architecture sub-directory name (default: host machine)
            lock_timeout: Timeout in seconds for acquiring the index lock
        """
        self.root = Path(root) if root is not None else get_default_cache_root()
        self.arch = arch or platform.machine().lower() or "unknown"
        self.registry_path = self.root / "registry.json"
        self.lock_path = self.root / "lock" / "registry.lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root}")

    @staticmethod
    def _key(tool: str, version: str) -> str:
        return f"{tool}@{version}"

    def install_dir(self, tool: str, version: str) -> Path:
        """Directory a (tool, version) pair is installed into."""
        return self.root / tool / version / self.arch

    def _marker(self, tool: str, version: str) -> Path:
        return self.root / tool / version / f"{self.arch}.complete"

    def _load_registry(self) -> dict:
        if not self.registry_path.exists():
            return _empty_registry()

        try:
            with open(self.registry_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load tool cache index: {e}")
            raise RegistryError(f"Failed to load tool cache index: {e}") from e

        if not isinstance(data, dict) or "tools" not in data:
            logger.warning("Invalid tool cache index format, resetting")
            return _empty_registry()

        return data

    def _save_registry(self, data: dict):
        try:
            atomic_write(self.registry_path, json.dumps(data, indent=2))
        except OSError as e:
            logger.error(f"Failed to save tool cache index: {e}")
            raise RegistryError(f"Failed to save tool cache index: {e}") from e

        logger.debug(f"Saved tool cache index with {len(data['tools'])} entries")

    @contextmanager
    def _lock(self):
        """
        Hold the exclusive index lock.

        Raises:
            RegistryLockTimeout: If lock cannot be acquired within timeout
        """
        try:
            self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RegistryError(
                f"Cannot create tool cache lock directory under {self.root}: {e}"
            ) from e
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)

        try:
            with lock:
                yield
        except Timeout as e:
            raise RegistryLockTimeout(
                f"Could not acquire tool cache lock within {self.lock_timeout} seconds"
            ) from e

    def find(self, tool: str, version: str) -> Optional[Path]:
        """
        Look up a cached install root.

        No side effects and no network access.

        Args:
            tool: Tool name
            version: Release tag or 'latest'

        Returns:
            Absolute install root, or None if not cached
        """
        entry = self.get_entry(tool, version)
        if entry is None:
            logger.debug(f"Cache miss: {tool} {version}")
            return None

        if not isinstance(entry, dict) or not entry.get("path"):
            logger.warning(f"Ignoring malformed cache entry for {tool} {version}")
            return None

        path = Path(entry["path"])
        if not path.is_dir() or not self._marker(tool, version).exists():
            logger.debug(f"Cache entry for {tool} {version} is incomplete: {path}")
            return None

        logger.debug(f"Cache hit: {tool} {version} at {path}")
        return path

    def cache_dir(
        self,
        source_dir: Path,
        tool: str,
        version: str,
        source_url: str = "",
    ) -> Path:
        """
        Copy an extracted tree into the cache and register it.

        Registering an already cached pair replaces the previous install.

        Args:
            source_dir: Extracted tree to cache
            tool: Tool name
            version: Release tag or 'latest'
            source_url: URL the archive was downloaded from

        Returns:
            Absolute install root inside the cache
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise RegistryError(f"Source directory not found: {source_dir}")

        with self._lock():
            marker = self._marker(tool, version)
            try:
                marker.unlink(missing_ok=True)
                target = copy_tree(source_dir, self.install_dir(tool, version))
                marker.write_text("")
            except OSError as e:
                logger.error(f"Failed to cache {tool} {version}: {e}")
                raise RegistryError(
                    f"Failed to copy {source_dir} into tool cache: {e}"
                ) from e

            data = self._load_registry()
            data["tools"][self._key(tool, version)] = {
                "tool": tool,
                "version": version,
                "arch": self.arch,
                "path": str(target),
                "installed": datetime.now().isoformat(),
                "source_url": source_url,
            }
            self._save_registry(data)

        logger.info(f"Cached {tool} {version} at {target}")
        return target

    def get_entry(self, tool: str, version: str) -> Optional[Dict]:
        """Get the raw index entry of a cached pair."""
        return self._load_registry()["tools"].get(self._key(tool, version))

    def list_versions(self, tool: str) -> List[str]:
        """List every version of tool recorded in the index."""
        data = self._load_registry()
        return sorted(
            entry["version"]
            for entry in data["tools"].values()
            if isinstance(entry, dict) and entry.get("tool") == tool and "version" in entry
        )


__all__ = ["TOOL_CACHE_ENV", "get_default_cache_root", "ToolCache"]
