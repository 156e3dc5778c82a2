"""
setup-slotalk CLI argument parser.

This module implements the command-line interface for setup-slotalk using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from setup_slotalk import __version__
from setup_slotalk.core.exceptions import SetupSlotalkError

logger = logging.getLogger(__name__)


class CLI:
    """setup-slotalk command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="setup-slotalk",
            description="Install the slotalk release binary into a tool cache",
            epilog='Use "setup-slotalk COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"setup-slotalk {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./setup-slotalk.yaml)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_find_command(subparsers)
        self._add_url_command(subparsers)
        self._add_action_command(subparsers)

        return parser

    @staticmethod
    def _add_cache_options(parser):
        parser.add_argument(
            "--cache-dir",
            type=Path,
            metavar="DIR",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE or ~/.setup-slotalk/tool-cache)",
        )

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install slotalk and print the executable path",
            description="Download slotalk into the tool cache unless already cached",
        )
        parser.add_argument(
            "release",
            nargs="?",
            metavar="VERSION",
            help="Version to install: 'latest', '1.2.3' or 'v1.2.3'",
        )
        self._add_cache_options(parser)
        parser.add_argument(
            "--releases-base",
            metavar="URL",
            help="Base URL of the releases page",
        )
        parser.add_argument(
            "--timeout",
            type=int,
            metavar="SECONDS",
            help="Download timeout in seconds (default: 30)",
        )

    def _add_find_command(self, subparsers):
        """Add 'find' subcommand."""
        parser = subparsers.add_parser(
            "find",
            help="Print the path of a cached slotalk executable",
            description="Look up a version in the tool cache without downloading",
        )
        parser.add_argument("release", metavar="VERSION", help="Version to look up")
        self._add_cache_options(parser)

    def _add_url_command(self, subparsers):
        """Add 'url' subcommand."""
        parser = subparsers.add_parser(
            "url",
            help="Print the download URL for a version",
            description="Print the release archive URL for this or the given platform",
        )
        parser.add_argument("release", metavar="VERSION", help="Version to resolve")
        parser.add_argument(
            "--os",
            dest="target_os",
            choices=["linux", "darwin"],
            help="Target operating system (default: host)",
        )
        parser.add_argument(
            "--arch",
            dest="target_arch",
            choices=["amd64", "arm64"],
            help="Target architecture (default: host)",
        )

    def _add_action_command(self, subparsers):
        """Add 'action' subcommand."""
        subparsers.add_parser(
            "action",
            help="Run as a CI pipeline step",
            description="Read INPUT_VERSION, install slotalk, set output slotalk-path",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        if parsed_args.command != "action":
            self._configure_logging(parsed_args)

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except (SetupSlotalkError, OSError) as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stderr,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "setup_slotalk.cli.commands.install",
            "find": "setup_slotalk.cli.commands.find",
            "url": "setup_slotalk.cli.commands.url",
            "action": "setup_slotalk.cli.commands.action",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
