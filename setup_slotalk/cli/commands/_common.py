"""
Shared helpers for CLI commands.
"""

from setup_slotalk.config import SetupConfig, load_config
from setup_slotalk.core.tool_cache import ToolCache


def config_from_args(args) -> SetupConfig:
    """Build the effective configuration from parsed arguments."""
    overrides = {
        "version": getattr(args, "release", None),
        "cache_dir": getattr(args, "cache_dir", None),
        "releases_base": getattr(args, "releases_base", None),
        "download_timeout": getattr(args, "timeout", None),
    }
    return load_config(config_file=args.config, overrides=overrides)


def cache_from_config(config: SetupConfig) -> ToolCache:
    return ToolCache(config.cache_dir, lock_timeout=config.lock_timeout)
