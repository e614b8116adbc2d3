"""
Command dispatching for TT Bot.

Every application command interaction goes through CommandDispatcher.dispatch():
the command name is looked up in a fixed handler table, the handler compiles a
response, and the response is sent back to Discord. When any of these steps
fails, the user receives a private diagnostic message asking them to contact
the maintainer instead. A failure to deliver that diagnostic is logged and
recorded, and the interaction is given up.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from ..utils.core.error_handler import (
    ErrorContext,
    ErrorTracker,
    error_tracker,
    log_error_with_context,
)
from ..utils.core.exceptions import (
    ConfigurationError,
    DispatchError,
    ErrorSeverity,
    TransportError,
    TTBotError,
)
from ..utils.discord.responses import send_command_response
from ..utils.time.timezone import get_local_now
from .commands.tell_me_the_times import run_tell_me_the_times
from .commands.timestamp import run_timestamp
from .options import parse_command_request
from .types import CommandHandler, CommandId

if TYPE_CHECKING:
    import discord

    from ..config.schema import TTBotConfig

logger = logging.getLogger(__name__)

DEFAULT_HANDLERS: Mapping[CommandId, CommandHandler] = {
    CommandId.TELL_ME_THE_TIMES: run_tell_me_the_times,
    CommandId.TIMESTAMP: run_timestamp,
}


class DispatchState(Enum):
    """Terminal states of a dispatched interaction."""

    RESPONSE_SENT = "response_sent"
    RESPONSE_UNRECOVERABLE = "response_unrecoverable"


@dataclass(frozen=True)
class DispatchOutcome:
    """
    Result of dispatching one interaction.

    Attributes:
        state: Whether the user received any response
        command: The command that was resolved, if the name was recognized
        error: The failure that replaced the primary response with the
            diagnostic message, if any
        diagnostic_error: The failure to deliver the diagnostic message, if any
    """

    state: DispatchState
    command: CommandId | None = None
    error: BaseException | None = None
    diagnostic_error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        """True when the primary response was delivered."""
        return self.state is DispatchState.RESPONSE_SENT and self.error is None


def resolve_command(name: str | None) -> CommandId:
    """
    Map a Discord command name to its identifier.

    Raises:
        DispatchError: If no command with this exact name is registered
    """
    try:
        return CommandId(name)
    except ValueError as e:
        raise DispatchError(name) from e


class CommandDispatcher:
    """
    Routes application command interactions to their handlers.

    The dispatcher holds only read-only state (configuration and handler
    table), so any number of interactions may be dispatched concurrently.
    """

    def __init__(
        self,
        config: TTBotConfig,
        handlers: Mapping[CommandId, CommandHandler] | None = None,
        clock: Callable[[], datetime] = get_local_now,
        tracker: ErrorTracker | None = None,
    ) -> None:
        """
        Initialize the dispatcher.

        Args:
            config: Immutable bot configuration
            handlers: Handler for every CommandId (defaults to the built-in commands)
            clock: Source of the current local (naive) time
            tracker: Error tracker for undeliverable failures

        Raises:
            ConfigurationError: If a CommandId has no handler
        """
        table = dict(DEFAULT_HANDLERS if handlers is None else handlers)
        missing = [command.name for command in CommandId if command not in table]
        if missing:
            raise ConfigurationError(f"No handler registered for commands: {missing}")

        self._config: TTBotConfig = config
        self._handlers: dict[CommandId, CommandHandler] = table
        self._clock: Callable[[], datetime] = clock
        self._tracker: ErrorTracker = tracker if tracker is not None else error_tracker
        self._diagnostic_message: str = config.maintainer.diagnostic_message()

    @property
    def tracker(self) -> ErrorTracker:
        """The tracker recording failed interactions."""
        return self._tracker

    async def dispatch(self, interaction: discord.Interaction) -> DispatchOutcome:
        """
        Handle one application command interaction to completion.

        Never raises for failures of the command or of the transport; those
        are turned into a diagnostic response, or recorded when even the
        diagnostic cannot be delivered.

        Args:
            interaction: The Discord interaction to answer

        Returns:
            DispatchOutcome describing how the interaction ended
        """
        request = parse_command_request(interaction.data)  # pyright: ignore[reportArgumentType]
        context = ErrorContext.from_interaction(interaction, request.name)
        logger.debug(
            f"Received command interaction: {request.name!r} options={list(request.options)}"
        )

        command: CommandId | None = None
        try:
            command = resolve_command(request.name)
            response = self._handlers[command](request, self._config, self._clock())
            await send_command_response(
                interaction, response.content, public=response.public, context=context
            )
        except Exception as e:
            return await self._recover(interaction, command, e, context)

        logger.debug(f"Responded to {command.value!r} for user {context.user_id}")
        return DispatchOutcome(DispatchState.RESPONSE_SENT, command)

    async def _recover(
        self,
        interaction: discord.Interaction,
        command: CommandId | None,
        error: Exception,
        context: ErrorContext,
    ) -> DispatchOutcome:
        """Send the diagnostic message after a failed command."""
        if isinstance(error, TTBotError) and error.context is None:
            error.context = context

        log_error_with_context(error, context)
        category = error.category.value if isinstance(error, TTBotError) else "unknown"
        self._tracker.record_error(
            f"{category}_{type(error).__name__}",
            error.severity if isinstance(error, TTBotError) else ErrorSeverity.HIGH,
        )

        try:
            await send_command_response(
                interaction, self._diagnostic_message, public=False, context=context
            )
        except Exception as send_error:
            # Errors below the Discord API (timeouts, sockets) arrive unwrapped
            logger.error(
                f"Cannot send error message to user: {send_error!r}",
                exc_info=not isinstance(send_error, TransportError),
            )
            self._tracker.record_error(
                f"transport_{type(send_error).__name__}", ErrorSeverity.HIGH
            )
            return DispatchOutcome(
                DispatchState.RESPONSE_UNRECOVERABLE,
                command,
                error=error,
                diagnostic_error=send_error,
            )

        return DispatchOutcome(DispatchState.RESPONSE_SENT, command, error=error)
