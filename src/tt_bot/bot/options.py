"""
Command option extraction for TT Bot.

Discord delivers the options of an application command as an unordered list
of ``{"name", "type", "value"}`` entries. This module reads that list into a
mapping of recognized option names to values, applying defaults for options
the user did not supply.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import NamedTuple

logger = logging.getLogger(__name__)

QUOTE_CHARACTERS = "\"'"


class CommandOption(NamedTuple):
    """A single option value as supplied by Discord."""

    name: str
    value: object = None


class OptionSpec(NamedTuple):
    """
    Expected shape of a command option.

    Attributes:
        kind: The Python type a supplied value must have to be accepted
        default: Value used when the option is absent; None means no default
    """

    kind: type
    default: object = None


class CommandRequest(NamedTuple):
    """The command name and raw options carried by an interaction."""

    name: str | None
    options: tuple[CommandOption, ...]


def parse_command_request(data: Mapping[str, object] | None) -> CommandRequest:
    """
    Read the command name and option list from raw interaction data.

    Entries that are not mappings or have no string name are skipped.

    Args:
        data: The ``interaction.data`` payload of an application command

    Returns:
        CommandRequest with the name (None if absent) and the options in order
    """
    if not data:
        return CommandRequest(None, ())

    raw_name = data.get("name")
    name = raw_name if isinstance(raw_name, str) else None

    raw_options = data.get("options")
    options: list[CommandOption] = []
    if isinstance(raw_options, list):
        for entry in raw_options:  # pyright: ignore[reportUnknownVariableType]
            if not isinstance(entry, Mapping):
                continue
            option_name = entry.get("name")  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
            if isinstance(option_name, str):
                options.append(CommandOption(option_name, entry.get("value")))  # pyright: ignore[reportUnknownMemberType,reportUnknownArgumentType]

    return CommandRequest(name, tuple(options))


def extract_options(
    options: Iterable[CommandOption], specs: Mapping[str, OptionSpec]
) -> dict[str, object]:
    """
    Resolve supplied options against the recognized option table.

    Later occurrences of the same name override earlier ones, but a null
    value (or one of the wrong type) never overwrites a value that was
    already captured. Unrecognized names are ignored.

    Args:
        options: Options as supplied by Discord, in delivery order
        specs: Recognized option names mapped to their specs

    Returns:
        Mapping of every recognized name to its supplied value or default.
        Names with neither a supplied value nor a default are absent.

    Examples:
        >>> specs = {"format": OptionSpec(str, "R")}
        >>> extract_options([CommandOption("format", None), CommandOption("format", "T")], specs)
        {'format': 'T'}
    """
    values: dict[str, object] = {
        name: spec.default for name, spec in specs.items() if spec.default is not None
    }

    for option in options:
        spec = specs.get(option.name)
        if spec is None:
            logger.debug(f"Ignoring unrecognized option: {option.name}")
            continue
        if option.value is None:
            continue
        if not isinstance(option.value, spec.kind):
            logger.debug(
                f"Ignoring option {option.name} with unexpected type "
                f"{type(option.value).__name__}"
            )
            continue
        values[option.name] = option.value

    return values


def strip_enclosing_quotes(value: str) -> str:
    """
    Remove one pair of matching quote characters around a value.

    Examples:
        >>> strip_enclosing_quotes('"R"')
        'R'
        >>> strip_enclosing_quotes("R")
        'R'
    """
    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTE_CHARACTERS:
        return value[1:-1]
    return value
