"""Commands: argument chains, permission predicates and the dispatch guard."""

from __future__ import annotations

import asyncio
import enum
import logging
import re
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import hikari

from ..core.errors import (
    ArgumentConfigurationError,
    CommandConfigurationError,
    CommandPermissionError,
    CommandRegistrationError,
    ParseError,
    TooManyArgumentsError,
)
from ..core.message import CommandContext, InboundMessage
from ..core.utils import call_maybe_async, format_permissions
from .arguments import Argument, argument_types

if TYPE_CHECKING:
    from ..core.dispatcher import Dispatcher
    from ..core.transport import Transport
    from .collector import CommandCollector

logger = logging.getLogger(__name__)

ERROR_COLOR = hikari.Color(0xFF0000)

PermissionCheck = Callable[[InboundMessage], bool | Awaitable[bool]]
Handler = Callable[[CommandContext], Awaitable[None] | None]


class DispatchOutcome(enum.Enum):
    EXECUTED = "executed"
    MISSING_CAPABILITY = "missing_capability"
    PERMISSION_DENIED = "permission_denied"
    INVALID_USAGE = "invalid_usage"
    FAILED = "failed"


def validate_command_name(name: str) -> str:
    """Return the lower-cased command name, raising if it cannot be registered."""
    if not isinstance(name, str):
        raise CommandRegistrationError("Command name should be a string")
    if len(name) < 1:
        raise CommandRegistrationError("Command name must be at least 1 char long")
    if re.search(r"\s", name):
        raise CommandRegistrationError(f'Command "{name}" should not contain whitespace')
    return name.lower()


@dataclass(slots=True)
class ArgumentChain:
    """Values consumed by a command's arguments plus what was left over."""

    values: dict[str, Any] = field(default_factory=dict)
    remaining: str = ""
    errors: list[ParseError] = field(default_factory=list)


class Command:
    """A named action. Configure it with the chained builder methods before the bot starts."""

    def __init__(self, name: str, collector: CommandCollector) -> None:
        self.name = name
        self._collector = collector
        self._aliases: list[str] = []
        self._arguments: list[Argument] = []
        self._help = ""
        self._manual: list[str] = []
        self._permission_checks: list[PermissionCheck] = []
        self._handlers: list[Handler] = []
        self._capabilities = hikari.Permissions.NONE
        self._frozen = False

    def __repr__(self) -> str:
        return f"<Command {self.name!r} aliases={self._aliases!r}>"

    @property
    def aliases(self) -> tuple[str, ...]:
        return tuple(self._aliases)

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name, *self._aliases)

    @property
    def arguments(self) -> tuple[Argument, ...]:
        return tuple(self._arguments)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return tuple(self._handlers)

    @property
    def required_capabilities(self) -> hikari.Permissions:
        return self._capabilities

    @property
    def help_text(self) -> str:
        return self._help

    @property
    def has_help(self) -> bool:
        return self._help != ""

    @property
    def manual_text(self) -> str:
        return "\n".join(self._manual)

    @property
    def has_manual(self) -> bool:
        return len(self._manual) > 0

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        self._frozen = True

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise CommandConfigurationError(f"Command '{self.name}' can not be changed after the bot started")

    # Builder

    def alias(self, *aliases: str) -> Command:
        """Add aliases. An alias already used by any command is skipped."""
        self._ensure_mutable()
        for alias in aliases:
            alias = validate_command_name(alias)
            if self._collector.resolve(alias):
                logger.debug(f"Skipped alias '{alias}' for command {self.name}: name already taken")
                continue
            self._aliases.append(alias)
        return self

    def help(self, text: str) -> Command:
        self._ensure_mutable()
        self._help = text
        return self

    def manual(self, text: str) -> Command:
        self._ensure_mutable()
        self._manual.append(text)
        return self

    def clear_manual(self) -> Command:
        self._ensure_mutable()
        self._manual = []
        return self

    def check_permission(self, check: PermissionCheck) -> Command:
        """Add a predicate; every predicate must return true for the author to run the command."""
        self._ensure_mutable()
        self._permission_checks.append(check)
        return self

    def add_argument(self, argument: Argument | Callable[[dict[str, Argument]], Argument]) -> Command:
        """Append an argument, or a callable that builds one from ``{"string": ..., "number": ..., "rest": ...}``."""
        self._ensure_mutable()
        if callable(argument) and not isinstance(argument, Argument):
            argument = argument(argument_types())
        if not isinstance(argument, Argument):
            raise ArgumentConfigurationError("Argument type not found")
        if any(existing.name == argument.name for existing in self._arguments):
            raise ArgumentConfigurationError(f"Command '{self.name}' already has an argument named '{argument.name}'")
        self._arguments.append(argument)
        return self

    def require_capability(self, permissions: hikari.Permissions) -> Command:
        """Require the bot itself to hold ``permissions`` in the channel."""
        self._ensure_mutable()
        self._capabilities |= permissions
        return self

    def exec(self, handler: Handler) -> Command:
        self._ensure_mutable()
        self._handlers.append(handler)
        return self

    def handler(self, func: Handler) -> Handler:
        """Decorator form of :meth:`exec`."""
        self.exec(func)
        return func

    # Usage

    def usage(self) -> str:
        return " ".join([self.name, *(argument.manual() for argument in self._arguments)])

    def alias_usages(self) -> list[str]:
        return [" ".join([alias, *(argument.manual() for argument in self._arguments)]) for alias in self._aliases]

    # Validation

    async def is_allowed(self, message: InboundMessage) -> bool:
        if not self._permission_checks:
            return True
        results = await asyncio.gather(*(call_maybe_async(check, message) for check in self._permission_checks))
        return all(results)

    def validate_arguments(self, text: str) -> ArgumentChain:
        """Consume ``text`` argument by argument.

        Required arguments must match in order. An optional argument that fails
        takes its default and leaves the input untouched for the next argument.

        Raises:
            ParseError: A required argument rejected the input.
        """
        chain = ArgumentChain(remaining=text.strip())
        for argument in self._arguments:
            result = argument.validate(chain.remaining)
            if result.ok:
                chain.values[argument.name] = result.value
                chain.remaining = result.rest.strip()
            elif argument.is_optional:
                chain.values[argument.name] = argument.default
                chain.errors.append(result.error)
            else:
                raise result.error
        return chain

    def validate(self, text: str) -> dict[str, Any]:
        """Validate the full argument text and return the parsed values.

        Raises:
            ParseError: A required argument rejected the input.
            TooManyArgumentsError: Input was left after the last argument.
        """
        chain = self.validate_arguments(text)
        if chain.remaining:
            raise TooManyArgumentsError("Too many arguments!", chain.errors[0] if chain.errors else None)
        return chain.values

    # Dispatch

    async def dispatch(self, raw_arguments: str, message: InboundMessage, dispatcher: Dispatcher) -> DispatchOutcome:
        """Run the permission, argument and capability gates, then every handler.

        Handlers run concurrently. A failing handler does not cancel the others;
        the first failure is raised once all of them have settled.
        """
        if not await self.is_allowed(message):
            raise CommandPermissionError("no permission to execute this command")

        arguments = self.validate(raw_arguments)

        if not await self._check_capabilities(message, dispatcher.transport):
            return DispatchOutcome.MISSING_CAPABILITY

        context = CommandContext(command=self, message=message, arguments=arguments, dispatcher=dispatcher)
        results = await asyncio.gather(
            *(call_maybe_async(handler, context) for handler in self._handlers), return_exceptions=True
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        return DispatchOutcome.EXECUTED

    async def _check_capabilities(self, message: InboundMessage, transport: Transport) -> bool:
        if not self._capabilities:
            return True

        granted = await transport.capabilities_in(message)
        missing = self._capabilities & ~granted
        if not missing:
            return True

        logger.info(f"Command {self.name} aborted, bot is missing {format_permissions(missing)}")

        if missing & hikari.Permissions.SEND_MESSAGES:
            embed = hikari.Embed(
                title="Error! Missing Bot Permission",
                description=(
                    f"I don't have permission to send messages on server **{message.guild_name or message.guild_id}** "
                    f"channel **#{message.channel_name or message.channel_id}**\n"
                    "Please ask the server owner to give me permission"
                ),
                color=ERROR_COLOR,
            )
            await transport.send_direct(message.author_id, embeds=[embed])
            return False

        embed = hikari.Embed(
            title="Error! Missing Bot Permission",
            description="I need the following permissions on this server/channel to perform the command",
            color=ERROR_COLOR,
        )
        embed.add_field("Missing Permission", "\n".join(format_permissions(missing)))
        await transport.send(message.channel_id, embeds=[embed])
        return False
