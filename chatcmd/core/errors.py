"""Error taxonomy for command parsing and dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..commands.arguments import Argument


class CommandError(Exception):
    """Base class for every error raised by the command system."""


class ParseError(CommandError):
    """An argument constraint rejected the input."""

    def __init__(self, message: str, argument: Argument) -> None:
        super().__init__(message)
        self.argument = argument


class TooManyArgumentsError(CommandError):
    """Input was left over after every argument was consumed."""

    def __init__(self, message: str, parse_error: ParseError | None = None) -> None:
        super().__init__(message)
        self.parse_error = parse_error


class CommandPermissionError(CommandError):
    """A permission predicate rejected the author."""


class CommandRegistrationError(CommandError, ValueError):
    """A command name is invalid or already taken."""


class CommandConfigurationError(CommandError):
    """A command was configured after the collector was frozen."""


class ArgumentConfigurationError(CommandError, ValueError):
    """An argument was built with an unknown type or an unsupported constraint."""
