"""Rendering of Discord timestamp badges (``<t:SECONDS:MARKER>``)."""

from __future__ import annotations

from datetime import datetime

from .formats import TimestampFormat


def format_badge(timestamp: int, fmt: TimestampFormat) -> str:
    """
    Render a Discord timestamp badge.

    Args:
        timestamp: Seconds since the Unix epoch
        fmt: Display format of the badge

    Returns:
        The badge token, e.g. ``<t:1700000000:R>``

    Examples:
        >>> format_badge(1700000000, TimestampFormat.RELATIVE)
        '<t:1700000000:R>'
    """
    return f"<t:{int(timestamp)}:{fmt.marker}>"


def format_badge_for_datetime(dt: datetime, fmt: TimestampFormat) -> str:
    """Render a badge for a timezone-aware datetime."""
    if dt.tzinfo is None:
        raise ValueError("Badges can only be rendered for timezone-aware datetimes")
    return format_badge(int(dt.timestamp()), fmt)


def format_badge_preview(badge: str) -> str:
    """Show a badge twice: as copyable raw markup and as its live rendering."""
    return f"`{badge}` => {badge}"
