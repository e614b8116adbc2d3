"""
Extension management for TT Bot.

Every public module in ``tt_bot.bot.commands`` is a discord.py extension
owning one cog. They are discovered at startup and loaded one by one, so a
broken extension is reported without preventing the others from loading.
"""

import logging
import pkgutil
from pathlib import Path
from typing import NamedTuple

from discord.ext import commands

logger = logging.getLogger(__name__)

COMMANDS_PACKAGE = f"{__package__}.commands"
COMMANDS_PATH = Path(__file__).parent / "commands"

_FAILURE_DESCRIPTIONS: tuple[tuple[type[commands.ExtensionError], str], ...] = (
    (commands.ExtensionNotFound, "Extension not found"),
    (commands.NoEntryPointError, "No setup function found"),
    (commands.ExtensionFailed, "Extension setup failed"),
)


class ExtensionStatus(NamedTuple):
    """Outcome of loading one extension."""

    name: str
    loaded: bool
    error: str | None = None


def describe_extension_error(error: commands.ExtensionError) -> str:
    """Human readable reason an extension could not be loaded."""
    for error_type, description in _FAILURE_DESCRIPTIONS:
        if isinstance(error, error_type):
            return f"{description}: {error}"
    return f"Extension error: {error}"


class ExtensionManager:
    """Loads the command extensions and remembers which ones failed."""

    def __init__(self) -> None:
        self._loaded_extensions: set[str] = set()
        self._failed_extensions: dict[str, str] = {}

    def discover_extensions(self) -> list[str]:
        """
        Find the command extensions shipped with the bot.

        Returns:
            Fully qualified module names, sorted; modules starting with an
            underscore are skipped
        """
        if not COMMANDS_PATH.exists():
            logger.warning(f"Commands directory not found: {COMMANDS_PATH}")
            return []

        extensions = sorted(
            f"{COMMANDS_PACKAGE}.{module.name}"
            for module in pkgutil.iter_modules([str(COMMANDS_PATH)])
            if not module.name.startswith("_")
        )
        logger.debug(f"Discovered {len(extensions)} extensions: {extensions}")
        return extensions

    async def load_extension_safe(
        self, bot: commands.Bot, extension_name: str
    ) -> ExtensionStatus:
        """
        Load one extension, turning discord.py extension errors into a status.

        Args:
            bot: The Discord bot instance
            extension_name: Fully qualified module name of the extension

        Returns:
            ExtensionStatus with the load result
        """
        try:
            await bot.load_extension(extension_name)
        except commands.ExtensionAlreadyLoaded:
            logger.warning(f"Extension already loaded: {extension_name}")
        except commands.ExtensionError as e:
            error_msg = describe_extension_error(e)
            logger.error(error_msg)
            self._failed_extensions[extension_name] = error_msg
            return ExtensionStatus(extension_name, False, error_msg)
        else:
            logger.info(f"Successfully loaded extension: {extension_name}")

        self._loaded_extensions.add(extension_name)
        _ = self._failed_extensions.pop(extension_name, None)
        return ExtensionStatus(extension_name, True)

    def get_loaded_extensions(self) -> list[str]:
        """Names of the extensions loaded so far."""
        return sorted(self._loaded_extensions)

    def get_failed_extensions(self) -> dict[str, str]:
        """Failed extension names mapped to the reason they failed."""
        return dict(self._failed_extensions)


async def load_extensions(
    bot: commands.Bot, manager: ExtensionManager | None = None
) -> list[ExtensionStatus]:
    """
    Discover and load every command extension.

    Args:
        bot: The Discord bot instance
        manager: Extension manager to use (a fresh one by default)

    Returns:
        One ExtensionStatus per discovered extension, in load order
    """
    manager = manager or ExtensionManager()
    extensions = manager.discover_extensions()
    logger.info(f"Loading {len(extensions)} extensions...")

    results = [await manager.load_extension_safe(bot, name) for name in extensions]

    failed = [status.name for status in results if not status.loaded]
    logger.info(
        f"Extension loading complete: {len(results) - len(failed)} loaded, "
        f"{len(failed)} failed"
    )
    if failed:
        logger.warning(f"Failed extensions: {failed}")

    return results
