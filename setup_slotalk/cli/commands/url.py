"""
URL command implementation.

Prints the release archive URL for a version.
"""

from setup_slotalk.cli.commands._common import config_from_args
from setup_slotalk.core.platform import Platform, detect_platform
from setup_slotalk.core.release import build_download_url
from setup_slotalk.core.version import normalize_version


def run(args) -> int:
    config = config_from_args(args)
    version = normalize_version(config.version)

    if args.target_os and args.target_arch:
        target = Platform(args.target_os, args.target_arch)
    else:
        host = detect_platform()
        target = Platform(args.target_os or host.os, args.target_arch or host.arch)

    print(
        build_download_url(
            target.os,
            target.arch,
            version,
            tool=config.tool_name,
            releases_base=config.releases_base,
        )
    )
    return 0
