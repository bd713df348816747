"""Command registry."""

import asyncio
import logging
from collections.abc import Iterable, Iterator

from ..core.errors import CommandConfigurationError, CommandRegistrationError
from ..core.message import InboundMessage
from .command import Command, validate_command_name

logger = logging.getLogger(__name__)


class CommandCollector:
    """Owns every registered command.

    Names and aliases are unique across the collector. Registering a taken name
    raises, while :meth:`Command.alias` silently skips a taken alias.
    """

    def __init__(self) -> None:
        self._commands: list[Command] = []
        self._frozen = False

    def __len__(self) -> int:
        return len(self._commands)

    def __iter__(self) -> Iterator[Command]:
        return iter(tuple(self._commands))

    @property
    def commands(self) -> tuple[Command, ...]:
        return tuple(self._commands)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def can_register(self, name: str) -> bool:
        name = validate_command_name(name)
        return not self.resolve(name)

    def register_command(self, name: str) -> Command:
        if self._frozen:
            raise CommandConfigurationError(f"Can not register command '{name}' after the bot started")
        if not self.can_register(name):
            raise CommandRegistrationError(f"Command '{name}' already exists")

        command = Command(validate_command_name(name), self)
        self._commands.append(command)
        logger.debug(f"Registered command: {command.name}")
        return command

    def resolve(self, name: str) -> list[Command]:
        """Every command whose name or alias matches ``name``, ignoring case."""
        name = name.lower()
        return [command for command in self._commands if name in command.names]

    async def permitted(
        self, message: InboundMessage, commands: Iterable[Command] | None = None
    ) -> list[Command]:
        """Filter ``commands`` (default: all) down to those the author may run."""
        candidates = list(self._commands if commands is None else commands)
        allowed = await asyncio.gather(*(command.is_allowed(message) for command in candidates))
        return [command for command, ok in zip(candidates, allowed) if ok]

    def freeze(self) -> None:
        """Lock every command's configuration."""
        for command in self._commands:
            command.freeze()
        self._frozen = True
        logger.info(f"Command collector frozen with {len(self._commands)} commands")
