"""Command system: arguments, commands, the collector and the built-in help."""

from .arguments import Argument, ArgumentKind, ParseResult, argument_types, create_argument
from .collector import CommandCollector
from .command import ArgumentChain, Command, DispatchOutcome, validate_command_name
from .help import build_manual_embed, register_help_command, render_manual

__all__ = [
    "Argument",
    "ArgumentKind",
    "ParseResult",
    "argument_types",
    "create_argument",
    "CommandCollector",
    "ArgumentChain",
    "Command",
    "DispatchOutcome",
    "validate_command_name",
    "build_manual_embed",
    "register_help_command",
    "render_manual",
]
