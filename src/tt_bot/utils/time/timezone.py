"""
Timezone descriptor resolution for TT Bot.

Users describe the timezone of a timestamp request with short free-text
descriptors such as ``"utc+3"``, ``"-4"``, ``"default+11"`` or ``"pt"``.
This module turns those descriptors into tzinfo objects relative to the
server-wide default offset, and attaches them to naive local times.
"""

import logging
import re
from datetime import datetime, timedelta, timezone, tzinfo
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from ..core.exceptions import AmbiguousOrInvalidLocalTime, UnrecognizedTimezone

logger = logging.getLogger(__name__)

DEFAULT_KEYWORD = "default"
UTC_KEYWORDS = ("utc", "gmt")

_SIGNED_OFFSET = re.compile(
    r"^(?P<sign>[+-])(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$"
)
_OPTIONALLY_SIGNED_OFFSET = re.compile(
    r"^(?P<sign>[+-])?(?P<hours>\d{1,2})(?::?(?P<minutes>\d{2}))?$"
)

# Abbreviations that always denote the same offset from UTC
FIXED_ZONE_ABBREVIATIONS: dict[str, timedelta] = {
    "z": timedelta(0),
    "est": timedelta(hours=-5),
    "edt": timedelta(hours=-4),
    "cst": timedelta(hours=-6),
    "cdt": timedelta(hours=-5),
    "mst": timedelta(hours=-7),
    "mdt": timedelta(hours=-6),
    "pst": timedelta(hours=-8),
    "pdt": timedelta(hours=-7),
    "akst": timedelta(hours=-9),
    "akdt": timedelta(hours=-8),
    "hst": timedelta(hours=-10),
    "bst": timedelta(hours=1),
    "cet": timedelta(hours=1),
    "cest": timedelta(hours=2),
    "eet": timedelta(hours=2),
    "eest": timedelta(hours=3),
    "ist": timedelta(hours=5, minutes=30),
    "jst": timedelta(hours=9),
    "aest": timedelta(hours=10),
    "aedt": timedelta(hours=11),
}

# Abbreviations for regions that observe daylight saving time
REGION_ZONE_ABBREVIATIONS: dict[str, str] = {
    "pt": "America/Los_Angeles",
    "mt": "America/Denver",
    "ct": "America/Chicago",
    "et": "America/New_York",
    "uk": "Europe/London",
}


def get_local_now() -> datetime:
    """Get the current wall-clock time of the host as a naive datetime."""
    return datetime.now()


def _parse_offset(text: str, pattern: re.Pattern[str]) -> timedelta | None:
    """Parse ``[+-]H[[:]MM]`` into a timedelta, or None if it doesn't match."""
    match = pattern.match(text)
    if match is None:
        return None

    hours = int(match.group("hours"))
    minutes = int(match.group("minutes") or 0)
    if hours > 23 or minutes > 59:
        return None

    offset = timedelta(hours=hours, minutes=minutes)
    return -offset if match.group("sign") == "-" else offset


def _fixed(offset: timedelta, descriptor: str) -> timezone:
    try:
        return timezone(offset)
    except ValueError as e:
        # Offsets must lie strictly between -24h and +24h
        raise UnrecognizedTimezone(descriptor) from e


def parse_timezone(descriptor: str, default: timezone) -> tzinfo:
    """
    Parse a timezone descriptor relative to the server-wide default.

    Supported descriptors (case-insensitive):
        - ``default`` and ``default+H``/``default-H[:MM]`` (shifted default)
        - ``utc``, ``gmt``, ``utc+H``/``gmt-H[:MM]``
        - bare offsets such as ``+3``, ``-4``, ``5:30``, ``+0530``
        - fixed abbreviations such as ``est`` or ``jst``
        - region abbreviations such as ``pt`` or ``et`` (daylight saving aware)

    Args:
        descriptor: The user supplied descriptor
        default: The configured default offset

    Returns:
        A fixed ``datetime.timezone`` or, for region abbreviations, a ZoneInfo

    Raises:
        UnrecognizedTimezone: If the descriptor cannot be parsed

    Examples:
        >>> parse_timezone("utc+3", timezone.utc)
        datetime.timezone(datetime.timedelta(seconds=10800))
    """
    text = descriptor.strip().lower()

    if text.startswith(DEFAULT_KEYWORD):
        rest = text[len(DEFAULT_KEYWORD) :].strip()
        if not rest:
            return default
        shift = _parse_offset(rest, _SIGNED_OFFSET)
        if shift is None:
            raise UnrecognizedTimezone(descriptor)
        base = default.utcoffset(None)
        return _fixed(base + shift, descriptor)

    for keyword in UTC_KEYWORDS:
        if text.startswith(keyword):
            rest = text[len(keyword) :].strip()
            if not rest:
                return timezone.utc
            offset = _parse_offset(rest, _SIGNED_OFFSET)
            if offset is None:
                raise UnrecognizedTimezone(descriptor)
            return _fixed(offset, descriptor)

    if text in FIXED_ZONE_ABBREVIATIONS:
        return _fixed(FIXED_ZONE_ABBREVIATIONS[text], descriptor)

    if text in REGION_ZONE_ABBREVIATIONS:
        try:
            return ZoneInfo(REGION_ZONE_ABBREVIATIONS[text])
        except ZoneInfoNotFoundError as e:
            logger.error(f"Timezone database has no entry for {text!r}: {e}")
            raise UnrecognizedTimezone(descriptor) from e

    offset = _parse_offset(text, _OPTIONALLY_SIGNED_OFFSET)
    if offset is None:
        raise UnrecognizedTimezone(descriptor)
    return _fixed(offset, descriptor)


def localize(naive: datetime, tz: tzinfo) -> datetime:
    """
    Attach a timezone to a naive local time.

    Args:
        naive: Wall-clock time without timezone information
        tz: The timezone the wall-clock time is expressed in

    Returns:
        The timezone-aware datetime

    Raises:
        AmbiguousOrInvalidLocalTime: If the wall-clock time is skipped or
            repeated in ``tz`` (daylight saving gap or fold)
    """
    if naive.tzinfo is not None:
        raise ValueError("localize() expects a naive datetime")

    earlier = naive.replace(tzinfo=tz, fold=0)
    later = naive.replace(tzinfo=tz, fold=1)
    # Both folds agree everywhere except inside a gap or a repeated hour
    if earlier.utcoffset() != later.utcoffset():
        logger.debug(f"Local time {naive} is not unique in timezone {tz}")
        raise AmbiguousOrInvalidLocalTime(naive, tz)
    return earlier
