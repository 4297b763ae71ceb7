#!/usr/bin/env python3
"""
pkgs command line entry point.

Detects the native package manager and manages its repository definitions:
adding, enabling and disabling repositories, installing signing keys and
listing what is configured.
"""

import argparse
import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

from src.i18n import _, set_language
from src.pkgs.core.config import ConfigManager
from src.pkgs.core.detection import PackageManager, detect_package_manager
from src.pkgs.core.version import get_version_banner
from src.pkgs.operations.repository_families import (
    RepositoryFamily,
    RepositoryOptions,
)
from src.pkgs.operations.repository_operations import RepositoryOperations
from src.pkgs.utils.logging_formatter import UTCTimestampFormatter
from src.pkgs.utils.verbosity_logger import get_logger, parse_levels

# Native subcommand that refreshes package lists after a repository change
REFRESH_SUBCOMMANDS = {
    RepositoryFamily.DEBIAN: "update",
    RepositoryFamily.REDHAT: "makecache",
    RepositoryFamily.ALPINE: "update",
}

REPOSITORY_COMMANDS = ("add-repo", "enable-repo", "disable-repo")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for all pkgs commands."""
    parser = argparse.ArgumentParser(
        prog="pkgs",
        description=_("A unified package manager interface"),
    )
    parser.add_argument(
        "-y",
        "--yes",
        action="store_true",
        help=_(
            "Automatic yes to prompts; assume 'yes' as answer to all prompts "
            "and run non-interactively"
        ),
    )
    parser.add_argument(
        "--config", metavar="PATH", help=_("Path to a pkgs.yaml configuration file")
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help=_("Print version information")
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    add_repo = subparsers.add_parser("add-repo", help=_("Add a repository"))
    add_repo.add_argument(
        "values",
        nargs="+",
        metavar="[NAME] URL",
        help=_("Repository name (optional for .repo URLs and taps) and URL"),
    )

    enable_repo = subparsers.add_parser("enable-repo", help=_("Enable a repository"))
    enable_repo.add_argument("name", help=_("Repository name"))

    disable_repo = subparsers.add_parser(
        "disable-repo", help=_("Disable a repository")
    )
    disable_repo.add_argument("name", help=_("Repository name"))

    add_key = subparsers.add_parser("add-key", help=_("Add a repository signing key"))
    add_key.add_argument(
        "values",
        nargs="+",
        metavar="[NAME] URL",
        help=_("Key name (optional on Alpine) and URL"),
    )

    subparsers.add_parser("list-repos", help=_("List configured repositories"))

    which = subparsers.add_parser(
        "which", help=_("Show which package manager is being used")
    )
    which.add_argument(
        "-s",
        "--simple",
        action="store_true",
        help=_("Output only the package manager name"),
    )

    return parser


def split_name_and_url(values: List[str]) -> Dict[str, str]:
    """Turn ``[name] url`` positional values into a parameters dict."""
    if len(values) > 2:
        raise ValueError(_("Expected at most two arguments: [name] url"))
    if len(values) == 1:
        return {"name": "", "url": values[0]}
    return {"name": values[0], "url": values[1]}


def setup_logging(config: ConfigManager) -> None:
    """Setup logging based on configuration with verbosity support."""
    enabled_levels = parse_levels(config.get_log_levels())
    formatter = UTCTimestampFormatter(config.get_log_format())

    # Clear any existing handlers to prevent double logging
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.DEBUG)

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    log_file = config.get_log_file()
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(lambda record: record.levelno in enabled_levels)
        root_logger.addHandler(handler)


def build_options(args: argparse.Namespace, config: ConfigManager) -> RepositoryOptions:
    """Non-interactive mode from --yes, PKGS_YES or configuration."""
    return RepositoryOptions(assume_yes=args.yes or config.should_assume_yes())


def print_which(manager: PackageManager, simple: bool) -> None:
    if simple:
        print(manager.name)
        return
    print(_("Detected package manager: %s") % manager.name)
    print(_("Type: %s") % manager.family.value)
    print(_("Binary: %s") % manager.binary)


def print_repositories(manager: PackageManager, repositories: List[Dict[str, Any]]):
    """Print repositories with their enabled state."""
    title = _("%s Repositories:") % manager.name
    print(title)
    print("=" * len(title))
    if not repositories:
        print(_("  No repositories found."))
        return

    for repo in repositories:
        status = _("Enabled") if repo.get("enabled") else _("Disabled")
        name = repo.get("name", "")
        url = repo.get("url", "")
        if name and name != url:
            print(f"  [{status}] {name}: {url}")
        else:
            print(f"  [{status}] {url}")


def print_result(result: Dict[str, Any]) -> int:
    """Print a mutator result and return the exit code."""
    if result.get("success"):
        print(result.get("result", ""))
        return 0
    print(_("Error: %s") % result.get("error", ""), file=sys.stderr)
    return 1


async def run_command(
    args: argparse.Namespace,
    config: ConfigManager,
    manager: PackageManager,
) -> int:
    """Dispatch a parsed command to the repository operations."""
    operations = RepositoryOperations(manager.family, config)
    options = build_options(args, config)

    if args.command == "list-repos":
        result = await operations.list_repositories()
        if not result.get("success"):
            return print_result(result)
        print_repositories(manager, result["repositories"])
        return 0

    if args.command == "add-repo":
        result = await operations.add_repository(
            split_name_and_url(args.values), options
        )
    elif args.command == "enable-repo":
        result = await operations.enable_repository({"name": args.name}, options)
    elif args.command == "disable-repo":
        result = await operations.disable_repository({"name": args.name}, options)
    else:
        result = await operations.add_key(split_name_and_url(args.values), options)

    exit_code = print_result(result)
    if (
        result.get("changed")
        and args.command in REPOSITORY_COMMANDS
        and manager.family in REFRESH_SUBCOMMANDS
    ):
        refresh = f"{manager.name} {REFRESH_SUBCOMMANDS[manager.family]}"
        print(_("Run '%s' to update the package lists.") % refresh)
    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(get_version_banner())
        return 0

    if not args.command:
        parser.print_help()
        return 1

    try:
        config = ConfigManager(args.config)
    except (FileNotFoundError, ValueError) as error:
        print(_("Error: %s") % error, file=sys.stderr)
        return 1

    set_language(config.get_language())
    setup_logging(config)
    logger = get_logger(__name__, config)

    try:
        manager = detect_package_manager(config.get_forced_family())
    except ValueError as error:
        print(_("Error: %s") % error, file=sys.stderr)
        return 1

    if manager is None:
        print(_("No supported package manager detected on this system."))
        return 1
    logger.debug("Using package manager %s (%s)", manager.name, manager.family.value)

    if args.command == "which":
        print_which(manager, args.simple)
        return 0

    try:
        return asyncio.run(run_command(args, config, manager))
    except ValueError as error:
        print(_("Error: %s") % error, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print(_("Operation cancelled by user"), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
