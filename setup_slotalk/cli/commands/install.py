"""
Install command implementation.

Installs slotalk into the tool cache and prints the executable path.
"""

import logging

from setup_slotalk.cli.commands._common import cache_from_config, config_from_args
from setup_slotalk.core.installer import SlotalkInstaller

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    config = config_from_args(args)
    installer = SlotalkInstaller(
        cache_from_config(config),
        releases_base=config.releases_base,
        tool_name=config.tool_name,
        timeout=config.download_timeout,
    )

    result = installer.install(config.version)

    if result.cached:
        logger.info(f"Using cached {config.tool_name} {result.version}")
    else:
        logger.info(
            f"Installed {config.tool_name} {result.version} from {result.download_url}"
        )

    print(result.path)
    return 0
