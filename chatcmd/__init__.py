"""Prefix command dispatch for hikari bots."""

from .commands import Argument, Command, CommandCollector, DispatchOutcome, create_argument, render_manual
from .core import (
    CommandContext,
    CommandPermissionError,
    InboundMessage,
    ParseError,
    PrefixResolver,
    TelemetrySink,
    TooManyArgumentsError,
    Transport,
)
from .core.dispatcher import Dispatcher

__all__ = [
    "Argument",
    "Command",
    "CommandCollector",
    "DispatchOutcome",
    "create_argument",
    "render_manual",
    "CommandContext",
    "CommandPermissionError",
    "InboundMessage",
    "ParseError",
    "PrefixResolver",
    "TelemetrySink",
    "TooManyArgumentsError",
    "Transport",
    "Dispatcher",
]
