"""
Timestamp command for TT Bot.

This module defines the /timestamp slash command, which converts a time
request into a Discord timestamp badge. The badge is shown twice: once as
raw markup the user can copy, and once rendered live by the client.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import TYPE_CHECKING

import discord
from discord import app_commands
from discord.ext import commands

from ...utils.core.exceptions import InvalidFormatMarker, MissingRequiredOption
from ...utils.time.badges import format_badge_for_datetime, format_badge_preview
from ...utils.time.formats import FORMAT_LEGEND, TimestampFormat
from ...utils.time.timezone import localize, parse_timezone
from ..options import (
    CommandOption,
    CommandRequest,
    OptionSpec,
    extract_options,
    strip_enclosing_quotes,
)
from ..types import CommandId, CommandResponse

if TYPE_CHECKING:
    from ...config.schema import TTBotConfig
    from ...main import TTBot

logger = logging.getLogger(__name__)

TIMESTAMP_OPTIONS: dict[str, OptionSpec] = {
    "descriptor": OptionSpec(str),
    "timezone": OptionSpec(str, "default"),
    "format": OptionSpec(str, TimestampFormat.RELATIVE.marker),
    "list": OptionSpec(bool, True),
}


@dataclass(frozen=True)
class TimestampRequest:
    """The options of a /timestamp invocation, validated and resolved."""

    descriptor: str
    timezone: tzinfo
    format: TimestampFormat
    list_other_formats: bool


def resolve_timestamp_request(
    options: Iterable[CommandOption], default_timezone: timezone
) -> TimestampRequest:
    """
    Read and validate the options of a /timestamp invocation.

    Args:
        options: Raw options as supplied by Discord
        default_timezone: The server-wide default offset

    Returns:
        TimestampRequest with the timezone and format resolved

    Raises:
        MissingRequiredOption: If no descriptor was supplied
        InvalidFormatMarker: If the format is not one of ``RtTdDfF``
        UnrecognizedTimezone: If the timezone descriptor cannot be parsed
    """
    values = extract_options(options, TIMESTAMP_OPTIONS)

    descriptor = values.get("descriptor")
    if not isinstance(descriptor, str):
        raise MissingRequiredOption("descriptor")

    raw_format = values.get("format")
    if not isinstance(raw_format, str):
        raise InvalidFormatMarker(raw_format)
    fmt = TimestampFormat.from_marker(strip_enclosing_quotes(raw_format))

    raw_timezone = values.get("timezone")
    tz = parse_timezone(
        strip_enclosing_quotes(raw_timezone)
        if isinstance(raw_timezone, str)
        else "default",
        default_timezone,
    )

    return TimestampRequest(
        descriptor=descriptor,
        timezone=tz,
        format=fmt,
        list_other_formats=values.get("list") is True,
    )


def compile_timestamp_request(
    options: Iterable[CommandOption], now: datetime, default_timezone: timezone
) -> CommandResponse:
    """
    Build the response text of a /timestamp invocation.

    Args:
        options: Raw options as supplied by Discord
        now: The current local time (naive)
        default_timezone: The server-wide default offset

    Returns:
        A private CommandResponse containing the badge preview and, unless
        ``list`` is false, the legend of all format markers

    Raises:
        ValidationError: If an option is missing or malformed
        ResolutionError: If the time cannot be placed in the requested timezone
    """
    request = resolve_timestamp_request(options, default_timezone)

    # TODO: interpret request.descriptor once natural-language parsing lands
    instant = localize(now, request.timezone)
    badge = format_badge_for_datetime(instant, request.format)
    logger.debug(f"Compiled {request.format.label} badge {badge} in {instant.tzinfo}")

    content = format_badge_preview(badge)
    if request.list_other_formats:
        content += "\n" + FORMAT_LEGEND

    return CommandResponse(content, public=False)


def run_timestamp(
    request: CommandRequest, config: TTBotConfig, now: datetime
) -> CommandResponse:
    """Dispatcher handler for /timestamp."""
    return compile_timestamp_request(request.options, now, config.default_timezone())


class TimestampCog(commands.Cog):
    """Cog for the /timestamp command."""

    def __init__(self, bot: TTBot) -> None:
        """
        Initialize the Timestamp cog.

        Args:
            bot: The Discord bot instance
        """
        self.bot: TTBot = bot

    @app_commands.command(
        name=CommandId.TIMESTAMP.value,
        description="Converts the given description of a time/date into a discord timestamp badge",
    )
    @app_commands.rename(tz="timezone", fmt="format", show_list="list")
    @app_commands.describe(
        descriptor='The datetime descriptor (e.g. "Apr 16", "6pm", "23:45", "twenty minutes ago")',
        tz="The timezone relative to which the datetime descriptors should be interpreted",
        fmt="The format of string that should be returned",
        show_list="Along with the ready-made timestamp, list the other format options (default: true)",
    )
    @app_commands.choices(
        fmt=[app_commands.Choice(name=f.label, value=f.marker) for f in TimestampFormat]
    )
    async def timestamp(
        self,
        interaction: discord.Interaction,
        descriptor: str,
        tz: str | None = None,
        fmt: str | None = None,
        show_list: bool | None = None,
    ) -> None:
        """
        Answer a /timestamp invocation.

        The parameters only describe the registered schema; the dispatcher
        reads the option values from the raw interaction payload. ``fmt`` is
        a plain string so discord.py passes values outside the choices
        through to the dispatcher instead of rejecting them.
        """
        _ = await self.bot.dispatcher.dispatch(interaction)


async def setup(bot: TTBot) -> None:
    """
    Setup function to add the cog to the bot.

    Args:
        bot: The Discord bot instance
    """
    await bot.add_cog(TimestampCog(bot))
