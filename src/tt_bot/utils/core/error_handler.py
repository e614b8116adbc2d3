"""
Error context and tracking utilities for TT Bot.

This module provides:
- Error context capture from Discord interactions
- Severity-aware error logging
- In-process error tracking for failures that cannot reach the user
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .exceptions import ErrorCategory, ErrorSeverity, TTBotError

if TYPE_CHECKING:
    import discord

logger = logging.getLogger(__name__)


class ErrorContext:
    """Context information for error tracking and debugging."""

    def __init__(
        self,
        user_id: int | None = None,
        guild_id: int | None = None,
        channel_id: int | None = None,
        command_name: str | None = None,
        additional_context: dict[str, object] | None = None,
    ) -> None:
        self.user_id: int | None = user_id
        self.guild_id: int | None = guild_id
        self.channel_id: int | None = channel_id
        self.command_name: str | None = command_name
        self.additional_context: dict[str, object] = additional_context or {}
        self.timestamp: datetime = datetime.now()

    @classmethod
    def from_interaction(
        cls, interaction: discord.Interaction, command_name: str | None = None
    ) -> ErrorContext:
        """Build a context from the ids carried by an interaction."""
        return cls(
            user_id=interaction.user.id,
            guild_id=interaction.guild.id if interaction.guild else None,
            channel_id=interaction.channel.id if interaction.channel else None,
            command_name=command_name,
        )

    def to_dict(self) -> dict[str, object]:
        """Convert context to dictionary for logging."""
        return {
            "user_id": self.user_id,
            "guild_id": self.guild_id,
            "channel_id": self.channel_id,
            "command_name": self.command_name,
            "timestamp": self.timestamp.isoformat(),
            "additional_context": self.additional_context,
        }


class ErrorTracker:
    """Track error patterns and frequencies for monitoring."""

    def __init__(self, max_history: int = 1000) -> None:
        self._error_counts: dict[str, int] = defaultdict(int)
        self._error_history: list[tuple[datetime, str, ErrorSeverity]] = []
        self._max_history: int = max_history

    def record_error(
        self, error_type: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM
    ) -> None:
        """Record an error occurrence."""
        now = datetime.now()
        self._error_counts[error_type] += 1
        self._error_history.append((now, error_type, severity))

        if len(self._error_history) > self._max_history:
            self._error_history = self._error_history[-self._max_history :]

    def get_error_count(self, error_type: str) -> int:
        """Get the total number of recorded errors of a type."""
        return self._error_counts.get(error_type, 0)

    def get_summary(self, window: timedelta = timedelta(hours=1)) -> dict[str, object]:
        """Summarize the recorded errors, counting those inside the window separately."""
        cutoff = datetime.now() - window
        recent = [entry for entry in self._error_history if entry[0] > cutoff]

        return {
            "total_errors": len(self._error_history),
            "recent_errors": len(recent),
            "critical_errors": sum(
                1 for _, _, severity in recent if severity is ErrorSeverity.CRITICAL
            ),
            "error_types": dict(self._error_counts),
        }


# Global error tracker instance
error_tracker = ErrorTracker()


def classify_exception(error: BaseException) -> tuple[ErrorCategory, ErrorSeverity]:
    """Return the category and severity of an exception."""
    if isinstance(error, TTBotError):
        return error.category, error.severity
    return ErrorCategory.UNKNOWN, ErrorSeverity.HIGH


def log_error_with_context(
    error: BaseException,
    context: ErrorContext | None = None,
    severity: ErrorSeverity | None = None,
) -> None:
    """Log an error with its category and interaction context."""
    category, default_severity = classify_exception(error)
    if severity is None:
        severity = default_severity

    error_info: dict[str, object] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        "category": category.value,
        "severity": severity.value,
    }
    if error.__cause__ is not None:
        error_info["cause"] = repr(error.__cause__)
    if context:
        error_info.update(context.to_dict())

    # Errors outside the known hierarchy are bugs; keep their traceback
    exc_info = error if category is ErrorCategory.UNKNOWN else None

    if severity == ErrorSeverity.CRITICAL:
        logger.critical(f"Critical error occurred: {error_info}", exc_info=exc_info)
    elif severity == ErrorSeverity.HIGH:
        logger.error(f"High severity error: {error_info}", exc_info=exc_info)
    elif severity == ErrorSeverity.MEDIUM:
        logger.warning(f"Medium severity error: {error_info}")
    else:
        logger.info(f"Low severity error: {error_info}")
