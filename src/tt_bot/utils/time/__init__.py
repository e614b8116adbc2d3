"""
Time utilities for TT Bot.

This package provides the timestamp display formats, badge rendering and
timezone descriptor resolution used by the /timestamp command.
"""

from .badges import format_badge, format_badge_for_datetime, format_badge_preview
from .formats import (
    FORMAT_LEGEND,
    MARKER_ALPHABET,
    TimestampFormat,
    TimestampStyle,
    from_marker,
    to_marker,
)
from .timezone import get_local_now, localize, parse_timezone

__all__ = [
    "format_badge",
    "format_badge_for_datetime",
    "format_badge_preview",
    "FORMAT_LEGEND",
    "MARKER_ALPHABET",
    "TimestampFormat",
    "TimestampStyle",
    "from_marker",
    "to_marker",
    "get_local_now",
    "localize",
    "parse_timezone",
]
