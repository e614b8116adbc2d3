"""
Main entry point for TT Bot.

This module initializes the bot, loads configuration, sets up logging,
loads command extensions, registers the application commands with Discord
and manages the bot lifecycle.
"""

import asyncio
import logging
import logging.handlers
import signal
import sys
from datetime import datetime
from pathlib import Path
from typing import override

import discord
from discord import app_commands
from discord.ext import commands

from .bot.dispatcher import CommandDispatcher
from .bot.extensions import load_extensions
from .config.manager import ConfigManager
from .config.schema import TTBotConfig
from .utils.cli.args import get_parsed_args
from .utils.cli.paths import get_path_config

LOG_FILES = ("tt-bot.log", "tt-bot-errors.log")


def rotate_logs_on_startup(logs_dir: Path) -> None:
    """
    Rotate existing log files on startup with timestamp-based naming.

    Args:
        logs_dir: Directory containing log files
    """
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    for log_file in LOG_FILES:
        log_path = logs_dir / log_file
        if log_path.exists():
            backup_path = logs_dir / f"{log_file}.{timestamp}"
            try:
                _ = log_path.rename(backup_path)
                print(f"Rotated {log_file} to {backup_path.name}")
            except OSError as e:
                print(f"Warning: Failed to rotate {log_file}: {e}")


def cleanup_old_logs(logs_dir: Path, max_files: int = 10) -> None:
    """
    Clean up old timestamped log files, keeping only the most recent ones.

    Args:
        logs_dir: Directory containing log files
        max_files: Maximum number of timestamped log files to keep per type
    """
    for log_type in LOG_FILES:
        timestamped_files = [
            file_path
            for file_path in logs_dir.glob(f"{log_type}.*")
            if file_path.name != log_type
        ]

        # Newest first
        timestamped_files.sort(key=lambda x: x.stat().st_mtime, reverse=True)

        for file_path in timestamped_files[max_files:]:
            try:
                file_path.unlink()
                print(f"Cleaned up old log file: {file_path.name}")
            except OSError as e:
                print(f"Warning: Failed to remove {file_path.name}: {e}")


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging with rotation and multiple handlers.

    Sets up file and console logging with startup-based and size-based
    log rotation. Debug mode lowers the console level to DEBUG.

    Args:
        debug: Whether debug mode is enabled
    """
    logs_dir = get_path_config().log_folder
    _ = logs_dir.mkdir(exist_ok=True, parents=True)

    rotate_logs_on_startup(logs_dir)
    cleanup_old_logs(logs_dir, max_files=10)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    detailed_formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
    )
    simple_formatter = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    file_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "tt-bot.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=5,
        encoding="utf-8",
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(detailed_formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if debug else logging.INFO)
    console_handler.setFormatter(simple_formatter)

    error_handler = logging.handlers.RotatingFileHandler(
        logs_dir / "tt-bot-errors.log",
        maxBytes=5 * 1024 * 1024,  # 5MB
        backupCount=3,
        encoding="utf-8",
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(detailed_formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)
    root_logger.addHandler(error_handler)

    # Quiet noisy libraries
    logging.getLogger("discord").setLevel(logging.WARNING)
    logging.getLogger("discord.http").setLevel(logging.WARNING)
    logging.getLogger("discord.gateway").setLevel(logging.INFO)
    logging.getLogger("asyncio").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)

# Raised by discord.py before a command callback runs: an unregistered name,
# a missing required option, or an option value it cannot convert
UNBOUND_COMMAND_ERRORS: tuple[type[app_commands.AppCommandError], ...] = (
    app_commands.CommandNotFound,
    app_commands.CommandSignatureMismatch,
    app_commands.TransformerError,
)


class TTCommandTree(app_commands.CommandTree["TTBot"]):
    """Command tree that hands payloads it cannot bind to the dispatcher."""

    @override
    async def on_error(
        self,
        interaction: discord.Interaction["TTBot"],
        error: app_commands.AppCommandError,
    ) -> None:
        if isinstance(error, UNBOUND_COMMAND_ERRORS):
            # The callback never ran; the dispatcher answers with a diagnostic
            _ = await self.client.dispatcher.dispatch(interaction)
            return
        await super().on_error(interaction, error)


class TTBot(commands.Bot):
    """
    TT Bot - Discord bot that converts time requests into timestamp badges.

    Registers the /timestamp slash command and the "Tell me the times"
    message context menu, and routes every invocation through a
    CommandDispatcher built from the immutable configuration.
    """

    def __init__(self, config: TTBotConfig) -> None:
        """Initialize the bot with default intents and its dispatcher."""
        # Application commands need no privileged intents
        intents = discord.Intents.default()

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
            tree_cls=TTCommandTree,
        )

        self.config: TTBotConfig = config
        self.dispatcher: CommandDispatcher = CommandDispatcher(config)
        self._is_shutting_down: bool = False

    def is_shutting_down(self) -> bool:
        """Check if the bot is currently shutting down."""
        return self._is_shutting_down

    @override
    async def setup_hook(self) -> None:
        """Load extensions and register the application commands."""
        logger.info("Setting up TT Bot...")

        extension_results = await load_extensions(self)
        failed_extensions = [r for r in extension_results if not r.loaded]
        if failed_extensions:
            for failed in failed_extensions:
                logger.warning(f"  - {failed.name}: {failed.error}")
            raise RuntimeError("Bot setup failed: Extension loading failed")

        await self.sync_commands()
        logger.info("TT Bot setup complete")

    async def sync_commands(self) -> list[app_commands.AppCommand]:
        """
        Register the application commands with Discord.

        Commands are registered for the configured guild when one is set,
        otherwise globally. Failures are logged and do not stop the bot.

        Returns:
            The commands Discord acknowledged (empty on failure)
        """
        guild_id = self.config.services.discord.guild_id
        try:
            if guild_id is not None:
                guild = discord.Object(id=guild_id)
                self.tree.copy_global_to(guild=guild)
                synced = await self.tree.sync(guild=guild)
                logger.debug(
                    f"Registered application commands for guild {guild_id}: {synced}"
                )
            else:
                synced = await self.tree.sync()
                logger.debug(f"Registered application commands globally: {synced}")
        except discord.DiscordException as e:
            if guild_id is not None:
                logger.error(
                    f"Application commands for guild {guild_id} could not be registered: {e}"
                )
            else:
                logger.error(f"Global application commands could not be registered: {e}")
            return []

        logger.info(f"Successfully synced {len(synced)} application commands")
        return synced

    async def on_ready(self) -> None:
        """Called when the bot has successfully connected to Discord."""
        if self.user is None:
            logger.error("Bot user is None after ready event")
            return
        logger.info(f"Connected as {self.user.name} (ID: {self.user.id})")

    async def on_resumed(self) -> None:
        """Called when the bot resumes a session."""
        logger.info("Resumed")

    async def on_disconnect(self) -> None:
        """Called when the bot disconnects from Discord."""
        logger.warning("Bot disconnected from Discord")

    @override
    async def on_error(self, event_method: str, /, *args: object, **kwargs: object) -> None:
        """Log errors raised by event handlers instead of crashing."""
        logger.exception(f"Unhandled exception in event '{event_method}'")

    @override
    async def close(self) -> None:
        """Shut down the bot once, even if close() is called repeatedly."""
        if self._is_shutting_down:
            logger.debug("Shutdown already in progress, skipping duplicate close")
            return

        self._is_shutting_down = True
        logger.info("Initiating graceful shutdown of TT Bot...")
        logger.info(f"Error summary: {self.dispatcher.tracker.get_summary()}")
        await super().close()
        logger.info("TT Bot shutdown complete")


def setup_signal_handlers(bot: TTBot) -> None:
    """
    Setup signal handlers for graceful shutdown.

    Handles SIGTERM and SIGINT so the bot closes its Discord session
    before the process exits.
    """
    loop = asyncio.get_running_loop()

    def signal_handler(signum: int) -> None:
        signal_name = signal.Signals(signum).name
        logger.info(f"Received {signal_name} signal, initiating graceful shutdown...")
        _ = loop.create_task(bot.close())

    for signum in (signal.SIGTERM, signal.SIGINT):
        try:
            loop.add_signal_handler(signum, signal_handler, signum)
        except NotImplementedError:
            # Not supported on Windows event loops
            logger.debug(f"Cannot install handler for {signal.Signals(signum).name}")

    logger.debug("Signal handlers registered for graceful shutdown")


async def main() -> None:
    """
    Main entry point for the TT Bot application.

    Sets up logging, loads configuration, creates the bot instance and
    runs it until shutdown.
    """
    parsed_args = get_parsed_args()
    path_config = get_path_config()
    path_config.set_paths(
        config_file=parsed_args.config_file, log_folder=parsed_args.log_folder
    )

    setup_logging(debug=parsed_args.debug)
    logger.info("TT Bot starting up...")
    if parsed_args.debug:
        logger.info("Debug mode enabled")

    config_path = path_config.config_file

    if not config_path.exists():
        logger.error(f"Configuration file '{config_path}' not found")
        logger.error(
            "Please copy 'config.yml.sample' to 'deploy.yml' (or 'dev.yml') and configure it"
        )
        sys.exit(1)

    try:
        config = ConfigManager.load_config(config_path)
        logger.info("Configuration loaded and validated successfully")
    except Exception as e:
        logger.exception(f"Failed to load configuration: {e}")
        sys.exit(1)

    bot = TTBot(config)
    setup_signal_handlers(bot)

    try:
        logger.info("Starting TT Bot...")
        await bot.start(config.services.discord.token)
    except discord.LoginFailure as e:
        logger.error(f"Failed to login to Discord: {e}")
        logger.error("Please check the Discord bot token in your configuration")
        sys.exit(1)
    except discord.HTTPException as e:
        logger.error(f"HTTP error connecting to Discord: {e}")
        sys.exit(1)
    finally:
        if not bot.is_shutting_down():
            await bot.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
