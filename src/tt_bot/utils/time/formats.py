"""
Discord timestamp display formats.

Each format is identified inside a timestamp badge by a single-character
marker. The mapping between formats and markers is a bijection over the
alphabet ``RtTdDfF``; anything else is rejected with InvalidFormatMarker.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal

from ..core.exceptions import InvalidFormatMarker

# Type alias for Discord timestamp styles
TimestampStyle = Literal["t", "T", "d", "D", "f", "F", "R"]

MARKER_ALPHABET = "RtTdDfF"

FORMAT_LEGEND = (
    "__Other options:__\n"
    "**R**elative, short **t**ime, long **T**ime, short **d**ate, long **D**ate, "
    "**f**ull datetime, **F**ull datetime with Day-of-Week"
)


class TimestampFormat(Enum):
    """Display format variants understood by the Discord client."""

    RELATIVE = "R"
    SHORT_TIME = "t"
    LONG_TIME = "T"
    SHORT_DATE = "d"
    LONG_DATE = "D"
    FULL = "f"
    FULL_WITH_DAY_OF_WEEK = "F"

    @property
    def marker(self) -> TimestampStyle:
        """The single-character marker used in badges."""
        return self.value  # pyright: ignore[reportReturnType]

    @property
    def label(self) -> str:
        """Human readable name, as offered in the command choices."""
        return _LABELS[self]

    @classmethod
    def from_marker(cls, marker: object) -> TimestampFormat:
        """
        Look up the format for a marker.

        Args:
            marker: A single character from ``RtTdDfF``

        Returns:
            The matching TimestampFormat

        Raises:
            InvalidFormatMarker: If the marker is not exactly one supported character
        """
        if not isinstance(marker, str) or len(marker) != 1:
            raise InvalidFormatMarker(marker)
        try:
            return cls(marker)
        except ValueError as e:
            raise InvalidFormatMarker(marker) from e


_LABELS: dict[TimestampFormat, str] = {
    TimestampFormat.RELATIVE: "relative",
    TimestampFormat.SHORT_TIME: "short time",
    TimestampFormat.LONG_TIME: "long time",
    TimestampFormat.SHORT_DATE: "short date",
    TimestampFormat.LONG_DATE: "long date",
    TimestampFormat.FULL: "long date with short time",
    TimestampFormat.FULL_WITH_DAY_OF_WEEK: "long date with day of week and short time",
}


def to_marker(fmt: TimestampFormat) -> TimestampStyle:
    """Return the badge marker for a format."""
    return fmt.marker


def from_marker(marker: object) -> TimestampFormat:
    """Return the format for a badge marker, raising InvalidFormatMarker if unknown."""
    return TimestampFormat.from_marker(marker)
