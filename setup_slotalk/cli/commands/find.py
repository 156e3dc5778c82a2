"""
Find command implementation.

Looks a version up in the tool cache without touching the network.
"""

import logging

from setup_slotalk.cli.commands._common import cache_from_config, config_from_args
from setup_slotalk.core.locator import find_executable
from setup_slotalk.core.version import normalize_version

logger = logging.getLogger(__name__)


def run(args) -> int:
    config = config_from_args(args)
    version = normalize_version(config.version)

    root = cache_from_config(config).find(config.tool_name, version)
    if root is None:
        logger.error(f"{config.tool_name} {version} is not in the tool cache")
        return 1

    print(find_executable(root, config.tool_name))
    return 0
