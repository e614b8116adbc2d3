"""
"Tell me the times" message context menu for TT Bot.

The command is registered on messages and currently answers with a
placeholder acknowledgment.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from ..types import CommandId, CommandResponse

if TYPE_CHECKING:
    from ...config.schema import TTBotConfig
    from ...main import TTBot
    from ..options import CommandRequest

PLACEHOLDER_RESPONSE = "hi"


def run_tell_me_the_times(
    request: CommandRequest, config: TTBotConfig, now: datetime
) -> CommandResponse:
    """Dispatcher handler for the context menu."""
    return CommandResponse(PLACEHOLDER_RESPONSE, public=True)


class TellMeTheTimesCog(commands.Cog):
    """Cog owning the "Tell me the times" message context menu."""

    def __init__(self, bot: TTBot) -> None:
        self.bot: TTBot = bot
        # Context menus cannot be declared with decorators inside a cog
        self.ctx_menu: app_commands.ContextMenu = app_commands.ContextMenu(
            name=CommandId.TELL_ME_THE_TIMES.value,
            callback=self.tell_me_the_times,
        )

    async def cog_load(self) -> None:
        self.bot.tree.add_command(self.ctx_menu)

    async def cog_unload(self) -> None:
        _ = self.bot.tree.remove_command(self.ctx_menu.name, type=self.ctx_menu.type)

    async def tell_me_the_times(
        self, interaction: discord.Interaction, message: discord.Message
    ) -> None:
        _ = await self.bot.dispatcher.dispatch(interaction)


async def setup(bot: TTBot) -> None:
    """
    Setup function to add the cog to the bot.

    Args:
        bot: The Discord bot instance
    """
    await bot.add_cog(TellMeTheTimesCog(bot))
