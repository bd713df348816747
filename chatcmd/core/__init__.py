from .errors import (
    ArgumentConfigurationError,
    CommandConfigurationError,
    CommandError,
    CommandPermissionError,
    CommandRegistrationError,
    ParseError,
    TooManyArgumentsError,
)
from .message import CommandContext, InboundMessage
from .prefix import PrefixResolver
from .telemetry import COMMAND_EXCEPTION, TelemetrySink, log_command_exception
from .transport import HikariTransport, Transport

__all__ = [
    "ArgumentConfigurationError",
    "CommandConfigurationError",
    "CommandError",
    "CommandPermissionError",
    "CommandRegistrationError",
    "ParseError",
    "TooManyArgumentsError",
    "CommandContext",
    "InboundMessage",
    "PrefixResolver",
    "COMMAND_EXCEPTION",
    "TelemetrySink",
    "log_command_exception",
    "HikariTransport",
    "Transport",
]
