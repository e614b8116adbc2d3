"""
Tests for the command dispatcher.

This module tests routing of interactions to handlers, the private
diagnostic sent when a command fails, and giving up when even the
diagnostic cannot be delivered.
"""

from __future__ import annotations

from datetime import datetime
from unittest.mock import MagicMock

import discord
import pytest

from src.tt_bot.bot.dispatcher import (
    DEFAULT_HANDLERS,
    CommandDispatcher,
    DispatchOutcome,
    DispatchState,
    resolve_command,
)
from src.tt_bot.bot.options import CommandRequest
from src.tt_bot.bot.types import CommandId, CommandResponse
from src.tt_bot.config.schema import TTBotConfig
from src.tt_bot.utils.core.error_handler import ErrorTracker
from src.tt_bot.utils.core.exceptions import (
    ConfigurationError,
    DispatchError,
    MissingRequiredOption,
    TransportError,
)
from tests.utils.test_helpers import (
    command_option,
    create_mock_interaction,
    create_test_config,
)

NOW = datetime(2024, 6, 15, 12, 0, 0)
DIAGNOSTIC = (
    "An error happened on the server side. Please contact the bot maintainer "
    "and tell them what command you ran at what time."
)


def http_exception() -> discord.HTTPException:
    response = MagicMock()
    response.status = 503
    response.reason = "Service Unavailable"
    return discord.HTTPException(response, "Service Unavailable")


@pytest.fixture
def dispatcher(base_config: TTBotConfig, tracker: ErrorTracker) -> CommandDispatcher:
    return CommandDispatcher(base_config, clock=lambda: NOW, tracker=tracker)


class TestResolveCommand:
    """Test cases for resolve_command()."""

    def test_known_names(self) -> None:
        assert resolve_command("timestamp") is CommandId.TIMESTAMP
        assert resolve_command("Tell me the times") is CommandId.TELL_ME_THE_TIMES

    @pytest.mark.parametrize("name", ["foo", "Timestamp", "tell me the times", "", None])
    def test_unknown_names(self, name: str | None) -> None:
        """Names are matched exactly."""
        with pytest.raises(DispatchError) as exc_info:
            _ = resolve_command(name)

        assert exc_info.value.command_name == name


class TestDispatcherConstruction:
    """Test cases for CommandDispatcher construction."""

    def test_default_handlers_cover_all_commands(self) -> None:
        assert set(DEFAULT_HANDLERS) == set(CommandId)

    def test_missing_handler_rejected(self, base_config: TTBotConfig) -> None:
        with pytest.raises(ConfigurationError, match="TELL_ME_THE_TIMES"):
            _ = CommandDispatcher(
                base_config,
                handlers={CommandId.TIMESTAMP: DEFAULT_HANDLERS[CommandId.TIMESTAMP]},
            )


class TestDispatch:
    """Test cases for CommandDispatcher.dispatch()."""

    @pytest.mark.asyncio
    async def test_timestamp_success(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        interaction = create_mock_interaction(
            options=[command_option("descriptor", "now")]
        )

        outcome = await dispatcher.dispatch(interaction)

        assert outcome == DispatchOutcome(DispatchState.RESPONSE_SENT, CommandId.TIMESTAMP)
        assert outcome.succeeded
        send = interaction.response.send_message  # pyright: ignore[reportAttributeAccessIssue]
        send.assert_called_once()
        assert send.call_args.kwargs["ephemeral"] is True
        assert send.call_args.kwargs["content"].startswith("`<t:1718449200:R>`")
        assert tracker.get_summary()["total_errors"] == 0

    @pytest.mark.asyncio
    async def test_context_menu_is_public(self, dispatcher: CommandDispatcher) -> None:
        interaction = create_mock_interaction(command_name="Tell me the times")

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.succeeded
        assert outcome.command is CommandId.TELL_ME_THE_TIMES
        interaction.response.send_message.assert_called_once_with(  # pyright: ignore[reportAttributeAccessIssue]
            content="hi", ephemeral=False
        )

    @pytest.mark.asyncio
    async def test_missing_descriptor_sends_diagnostic(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        interaction = create_mock_interaction(options=[command_option("format", "T")])

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.state is DispatchState.RESPONSE_SENT
        assert not outcome.succeeded
        assert isinstance(outcome.error, MissingRequiredOption)
        interaction.response.send_message.assert_called_once_with(  # pyright: ignore[reportAttributeAccessIssue]
            content=DIAGNOSTIC, ephemeral=True
        )
        assert tracker.get_error_count("validation_MissingRequiredOption") == 1

    @pytest.mark.asyncio
    async def test_unknown_command_sends_diagnostic(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        interaction = create_mock_interaction(command_name="foo")

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.command is None
        assert isinstance(outcome.error, DispatchError)
        assert "Unexpected interaction name from discord" in str(outcome.error)
        interaction.response.send_message.assert_called_once_with(  # pyright: ignore[reportAttributeAccessIssue]
            content=DIAGNOSTIC, ephemeral=True
        )
        assert tracker.get_error_count("dispatch_DispatchError") == 1

    @pytest.mark.asyncio
    async def test_missing_name_sends_diagnostic(self, dispatcher: CommandDispatcher) -> None:
        interaction = create_mock_interaction(command_name=None)

        outcome = await dispatcher.dispatch(interaction)

        assert isinstance(outcome.error, DispatchError)
        assert outcome.state is DispatchState.RESPONSE_SENT

    @pytest.mark.asyncio
    async def test_error_context_attached(self, dispatcher: CommandDispatcher) -> None:
        interaction = create_mock_interaction(
            command_name="foo", user_id=42, guild_id=7, channel_id=9
        )

        outcome = await dispatcher.dispatch(interaction)

        assert isinstance(outcome.error, DispatchError)
        context = outcome.error.context
        assert context is not None
        assert context.user_id == 42  # pyright: ignore[reportAttributeAccessIssue]
        assert context.command_name == "foo"  # pyright: ignore[reportAttributeAccessIssue]

    @pytest.mark.asyncio
    async def test_handler_bug_sends_diagnostic(
        self, base_config: TTBotConfig, tracker: ErrorTracker
    ) -> None:
        def broken(request: CommandRequest, config: TTBotConfig, now: datetime) -> CommandResponse:
            raise RuntimeError("bug")

        dispatcher = CommandDispatcher(
            base_config,
            handlers={**DEFAULT_HANDLERS, CommandId.TIMESTAMP: broken},
            tracker=tracker,
        )
        interaction = create_mock_interaction(
            options=[command_option("descriptor", "now")]
        )

        outcome = await dispatcher.dispatch(interaction)

        assert isinstance(outcome.error, RuntimeError)
        assert outcome.command is CommandId.TIMESTAMP
        interaction.response.send_message.assert_called_once_with(  # pyright: ignore[reportAttributeAccessIssue]
            content=DIAGNOSTIC, ephemeral=True
        )
        assert tracker.get_error_count("unknown_RuntimeError") == 1

    @pytest.mark.asyncio
    async def test_handler_receives_clock_and_config(
        self, base_config: TTBotConfig
    ) -> None:
        seen: list[tuple[CommandRequest, TTBotConfig, datetime]] = []

        def recording(request: CommandRequest, config: TTBotConfig, now: datetime) -> CommandResponse:
            seen.append((request, config, now))
            return CommandResponse("ok")

        dispatcher = CommandDispatcher(
            base_config,
            handlers={**DEFAULT_HANDLERS, CommandId.TIMESTAMP: recording},
            clock=lambda: NOW,
        )

        _ = await dispatcher.dispatch(
            create_mock_interaction(options=[command_option("descriptor", "x")])
        )

        assert len(seen) == 1
        request, config, now = seen[0]
        assert request.name == "timestamp"
        assert config is base_config
        assert now == NOW

    @pytest.mark.asyncio
    async def test_answered_interaction_uses_followup(
        self, dispatcher: CommandDispatcher
    ) -> None:
        interaction = create_mock_interaction(
            options=[command_option("descriptor", "now"), command_option("list", False, 5)],
            is_response_done=True,
        )

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.succeeded
        interaction.followup.send.assert_called_once_with(  # pyright: ignore[reportAttributeAccessIssue]
            content="`<t:1718449200:R>` => <t:1718449200:R>", ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_primary_send_failure_sends_diagnostic(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        interaction = create_mock_interaction(
            options=[command_option("descriptor", "now")]
        )
        interaction.response.send_message.side_effect = [http_exception(), None]  # pyright: ignore[reportAttributeAccessIssue]

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.state is DispatchState.RESPONSE_SENT
        assert isinstance(outcome.error, TransportError)
        assert outcome.diagnostic_error is None
        last_call = interaction.response.send_message.call_args  # pyright: ignore[reportAttributeAccessIssue]
        assert last_call.kwargs == {"content": DIAGNOSTIC, "ephemeral": True}
        assert tracker.get_error_count("transport_TransportError") == 1

    @pytest.mark.asyncio
    async def test_diagnostic_send_failure_is_unrecoverable(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        interaction = create_mock_interaction(command_name="foo")
        interaction.response.send_message.side_effect = http_exception()  # pyright: ignore[reportAttributeAccessIssue]

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.state is DispatchState.RESPONSE_UNRECOVERABLE
        assert isinstance(outcome.error, DispatchError)
        assert isinstance(outcome.diagnostic_error, TransportError)
        assert tracker.get_error_count("dispatch_DispatchError") == 1
        assert tracker.get_error_count("transport_TransportError") == 1

    @pytest.mark.asyncio
    async def test_diagnostic_send_timeout_is_unrecoverable(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        """Errors below the Discord API are recorded instead of escaping."""
        interaction = create_mock_interaction(command_name="foo")
        interaction.response.send_message.side_effect = TimeoutError()  # pyright: ignore[reportAttributeAccessIssue]

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.state is DispatchState.RESPONSE_UNRECOVERABLE
        assert isinstance(outcome.diagnostic_error, TimeoutError)
        assert tracker.get_error_count("dispatch_DispatchError") == 1
        assert tracker.get_error_count("transport_TimeoutError") == 1

    @pytest.mark.asyncio
    async def test_primary_send_oserror_sends_diagnostic(
        self, dispatcher: CommandDispatcher, tracker: ErrorTracker
    ) -> None:
        interaction = create_mock_interaction(
            options=[command_option("descriptor", "now")]
        )
        interaction.response.send_message.side_effect = [ConnectionResetError(), None]  # pyright: ignore[reportAttributeAccessIssue]

        outcome = await dispatcher.dispatch(interaction)

        assert outcome.state is DispatchState.RESPONSE_SENT
        assert isinstance(outcome.error, ConnectionResetError)
        assert tracker.get_error_count("unknown_ConnectionResetError") == 1
        last_call = interaction.response.send_message.call_args  # pyright: ignore[reportAttributeAccessIssue]
        assert last_call.kwargs == {"content": DIAGNOSTIC, "ephemeral": True}

    @pytest.mark.asyncio
    async def test_custom_maintainer_in_diagnostic(self, tracker: ErrorTracker) -> None:
        config = create_test_config(contact="<@1234>", object_pronoun="her")
        dispatcher = CommandDispatcher(config, tracker=tracker)
        interaction = create_mock_interaction(command_name="foo")

        _ = await dispatcher.dispatch(interaction)

        content = interaction.response.send_message.call_args.kwargs["content"]  # pyright: ignore[reportAttributeAccessIssue]
        assert "Please contact <@1234> and tell her" in content
