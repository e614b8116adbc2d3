"""
Command-line argument parsing for TT Bot.

This module parses the command-line arguments that select the configuration
file, the log folder and debug mode.
"""

import argparse
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import NamedTuple

from ...config.manager import default_config_file, is_debug_enabled
from ..core.version import get_version
from .paths import DEFAULT_LOG_FOLDER


class PathValidationError(Exception):
    """Raised when a path validation fails."""

    pass


class ParsedArgs(NamedTuple):
    """Container for parsed command-line arguments."""

    config_file: Path
    log_folder: Path
    debug: bool


class DefaultPaths:
    """Default paths for TT Bot."""

    LOG_FOLDER: Path = DEFAULT_LOG_FOLDER


def validate_config_file_path(config_file_str: str) -> Path:
    """
    Validate configuration file path.

    Args:
        config_file_str: String path to configuration file

    Returns:
        Resolved Path object for the configuration file

    Raises:
        PathValidationError: If the configuration file path is invalid
    """
    try:
        config_file = Path(config_file_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid config file path: {e}") from e

    if config_file.exists() and config_file.is_dir():
        raise PathValidationError(
            f"Config file path exists but is not a file: {config_file}"
        )

    if not config_file.parent.exists():
        raise PathValidationError(
            f"Parent directory for config file does not exist: {config_file.parent}"
        )

    return config_file


def validate_folder_path(path_str: str, folder_name: str) -> Path:
    """
    Validate and resolve a folder path.

    Args:
        path_str: String representation of the folder path
        folder_name: Name of the folder (for error messages)

    Returns:
        Resolved absolute path to the folder

    Raises:
        PathValidationError: If the path is invalid
    """
    try:
        path = Path(path_str).expanduser().resolve()
    except (OSError, ValueError) as e:
        raise PathValidationError(f"Invalid {folder_name} path: {e}") from e

    if path.exists() and not path.is_dir():
        raise PathValidationError(
            f"{folder_name.capitalize()} path exists but is not a directory: {path}"
        )

    return path


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for TT Bot.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="tt-bot",
        description="TT Bot - Discord bot that turns times into timestamp badges",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tt-bot
    Run with deploy.yml (or dev.yml when TT_DEBUG=true)

  tt-bot --debug
    Run in debug mode with dev.yml and verbose console logging

  tt-bot --config-file /etc/tt-bot/config.yml --log-folder /var/log/tt-bot
    Use custom paths
""",
    )

    _ = parser.add_argument(
        "--config-file",
        type=str,
        default=None,
        help=(
            "Path to the configuration file "
            "(default: dev.yml in debug mode, deploy.yml otherwise)."
        ),
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--log-folder",
        type=str,
        default=str(DefaultPaths.LOG_FOLDER),
        help=(
            "Path to the log folder (default: %(default)s). "
            "The directory will be created if it doesn't exist."
        ),
        metavar="PATH",
    )

    _ = parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug mode (also enabled by the TT_DEBUG environment variable).",
    )

    _ = parser.add_argument(
        "--version", action="version", version=f"%(prog)s {get_version()}"
    )

    return parser


def parse_arguments(
    args: list[str] | None = None, environ: Mapping[str, str] | None = None
) -> ParsedArgs:
    """
    Parse command-line arguments.

    Args:
        args: List of arguments to parse (defaults to sys.argv[1:])
        environ: Environment consulted for TT_DEBUG (defaults to os.environ)

    Returns:
        ParsedArgs containing validated and resolved paths

    Raises:
        SystemExit: If argument parsing or path validation fails
    """
    parser = create_argument_parser()
    parsed = parser.parse_args(args)

    debug: bool = bool(getattr(parsed, "debug", False)) or is_debug_enabled(environ)
    config_file_str: str | None = getattr(parsed, "config_file", None)
    log_folder_str: str = getattr(parsed, "log_folder", str(DefaultPaths.LOG_FOLDER))

    if config_file_str is None:
        config_file_str = str(default_config_file(debug))

    try:
        config_file = validate_config_file_path(config_file_str)
        log_folder = validate_folder_path(log_folder_str, "log folder")
    except PathValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    return ParsedArgs(config_file=config_file, log_folder=log_folder, debug=debug)


def get_parsed_args() -> ParsedArgs:
    """
    Parse arguments and ensure the log directory exists.

    Returns:
        ParsedArgs containing validated paths with directories created

    Raises:
        SystemExit: If argument parsing fails
        OSError: If directory creation fails
    """
    parsed_args = parse_arguments()
    parsed_args.log_folder.mkdir(parents=True, exist_ok=True)
    return parsed_args
