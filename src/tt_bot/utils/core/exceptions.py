"""
Exception classes for TT Bot.

This module contains the exception hierarchy raised while turning an
interaction into a response. Every class carries a category and severity
so the dispatcher can log it appropriately without inspecting messages.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    VALIDATION = "validation"
    RESOLUTION = "resolution"
    DISPATCH = "dispatch"
    TRANSPORT = "transport"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class TTBotError(Exception):
    """Base exception class for TT Bot specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        user_message: str | None = None,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.user_message: str = user_message or message
        self.context: object | None = context
        self.recoverable: bool = recoverable


class ValidationError(TTBotError):
    """Malformed or missing command input."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.MEDIUM,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class MissingRequiredOption(ValidationError):
    """A required command option was not supplied."""

    def __init__(self, option_name: str, context: object | None = None) -> None:
        super().__init__(
            f"Required option '{option_name}' is missing",
            context=context,
        )
        self.option_name: str = option_name


class InvalidFormatMarker(ValidationError):
    """A format marker outside of the supported alphabet."""

    def __init__(self, marker: object, context: object | None = None) -> None:
        super().__init__(
            f"Format choice returned invalid value: {marker!r}",
            context=context,
        )
        self.marker: object = marker


class ResolutionError(TTBotError):
    """A timezone or local time that cannot be turned into an instant."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.RESOLUTION,
            severity=ErrorSeverity.MEDIUM,
            recoverable=False,
            user_message=user_message,
            context=context,
        )


class UnrecognizedTimezone(ResolutionError):
    """The timezone descriptor could not be parsed."""

    def __init__(self, descriptor: str, context: object | None = None) -> None:
        super().__init__(
            f"Unrecognized timezone descriptor: {descriptor!r}",
            context=context,
        )
        self.descriptor: str = descriptor


class AmbiguousOrInvalidLocalTime(ResolutionError):
    """A local time that maps to zero or two instants in its timezone."""

    def __init__(
        self, local_time: object, timezone: object, context: object | None = None
    ) -> None:
        super().__init__(
            f"Local time {local_time} has no unique instant in timezone {timezone}",
            context=context,
        )
        self.local_time: object = local_time
        self.timezone: object = timezone


class DispatchError(TTBotError):
    """An interaction named a command that is not registered."""

    def __init__(self, command_name: str | None, context: object | None = None) -> None:
        super().__init__(
            f"Unexpected interaction name from discord: {command_name!r}",
            category=ErrorCategory.DISPATCH,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            context=context,
        )
        self.command_name: str | None = command_name


class TransportError(TTBotError):
    """Sending a response to Discord failed."""

    def __init__(
        self,
        message: str,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.TRANSPORT,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recoverable=recoverable,
        )


class ConfigurationError(TTBotError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        user_message: str | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            user_message=user_message,
            context=context,
        )
