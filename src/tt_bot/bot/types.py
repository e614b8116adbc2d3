"""
Shared command types for TT Bot.

Commands are identified by a closed enumeration; each identifier is mapped
to exactly one handler by the dispatcher.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, NamedTuple

if TYPE_CHECKING:
    from ..config.schema import TTBotConfig
    from .options import CommandRequest


class CommandId(Enum):
    """Application commands registered by the bot, keyed by their Discord name."""

    TELL_ME_THE_TIMES = "Tell me the times"
    TIMESTAMP = "timestamp"


class CommandResponse(NamedTuple):
    """Text to send back to the invoking user and whether everyone may see it."""

    content: str
    public: bool = False


CommandHandler = Callable[["CommandRequest", "TTBotConfig", datetime], CommandResponse]
"""Handler signature: (request, configuration, local naive "now") -> response."""
