"""
Interaction response utilities for TT Bot.

This module sends text responses to Discord interactions, choosing between
the initial interaction response and a followup message depending on
whether the interaction has already been answered. Failures from the
Discord API are re-raised as TransportError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord

from ..core.exceptions import TransportError

if TYPE_CHECKING:
    from ..core.error_handler import ErrorContext

logger = logging.getLogger(__name__)


async def send_command_response(
    interaction: discord.Interaction,
    content: str,
    *,
    public: bool,
    context: ErrorContext | None = None,
) -> None:
    """
    Send a text response to an interaction.

    Args:
        interaction: The Discord interaction to respond to
        content: The text content of the message
        public: Whether everyone in the channel can see the response; private
            responses are ephemeral (only visible to the invoking user)
        context: Error context attached to a TransportError on failure

    Raises:
        ValueError: If content is empty
        TransportError: If the Discord API call fails
    """
    if not content:
        msg = "Response content must not be empty"
        raise ValueError(msg)

    ephemeral = not public

    visibility = "public" if public else "ephemeral"
    logger.debug(f"Sending {visibility} response for user {interaction.user.id}")

    try:
        if interaction.response.is_done():
            # The initial response slot is used up; answer with a followup
            _ = await interaction.followup.send(content=content, ephemeral=ephemeral)
        else:
            _ = await interaction.response.send_message(
                content=content, ephemeral=ephemeral
            )
    except discord.DiscordException as e:
        logger.debug(
            f"Failed to send response for user {interaction.user.id}: {e}",
            exc_info=True,
        )
        raise TransportError(
            f"Failed to send interaction response: {e}", context=context
        ) from e
