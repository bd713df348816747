"""Message dispatch pipeline: prefix, command lookup and error reporting."""

import asyncio
import logging
import re
import time

from config.settings import settings

from ..commands.collector import CommandCollector
from ..commands.command import Command, DispatchOutcome
from ..commands.help import register_help_command
from .errors import CommandPermissionError, ParseError, TooManyArgumentsError
from .message import InboundMessage
from .prefix import PrefixResolver
from .telemetry import COMMAND_EXCEPTION, TelemetrySink
from .transport import Transport

logger = logging.getLogger(__name__)

COMMAND_PATTERN = re.compile(r"^(?P<command>\S*)\s*(?P<args>.*?)\s*$", re.DOTALL)


class Dispatcher:
    """Routes inbound messages to the commands registered on its collector."""

    def __init__(
        self,
        transport: Transport,
        *,
        prefixes: PrefixResolver | None = None,
        collector: CommandCollector | None = None,
        telemetry: TelemetrySink | None = None,
        help_command: bool = True,
        ignore_bots: bool | None = None,
        dispatch_timeout: float | None = None,
    ) -> None:
        self.transport = transport
        self.prefixes = prefixes or PrefixResolver()
        self.collector = collector or CommandCollector()
        self.telemetry = telemetry or TelemetrySink()
        self.ignore_bots = settings.ignore_bots if ignore_bots is None else ignore_bots
        self.dispatch_timeout = settings.dispatch_timeout if dispatch_timeout is None else dispatch_timeout
        if self.dispatch_timeout is not None and self.dispatch_timeout <= 0:
            raise ValueError("dispatch_timeout must be positive")

        if help_command:
            register_help_command(self)

    def register_command(self, name: str) -> Command:
        return self.collector.register_command(name)

    def freeze(self) -> None:
        self.collector.freeze()

    async def dispatch_message(self, message: InboundMessage) -> list[DispatchOutcome]:
        """Handle one inbound message. Returns one outcome per matched command."""
        if message.author_id is None:
            return []
        if message.author_id == self.transport.current_actor_id:
            return []
        if self.ignore_bots and message.author_is_bot:
            return []
        if not message.is_guild_message:
            return []

        prefix = await self.prefixes.get_prefix(message.guild_id)

        if self._mentions_only_bot(message):
            await self.transport.send(
                message.channel_id,
                f"Command prefix is: **{prefix}**\nUse **{prefix}help** to get all available commands",
            )
            return []

        if not message.content.startswith(prefix):
            return []

        return await self._dispatch_content(message.content, message, prefix)

    async def execute_command(self, text: str, message: InboundMessage) -> list[DispatchOutcome]:
        """Dispatch ``text`` (without prefix) as if the message's author had sent it."""
        if not message.is_guild_message:
            return []
        prefix = await self.prefixes.get_prefix(message.guild_id)
        return await self._dispatch_content(prefix + text, message, prefix)

    def _mentions_only_bot(self, message: InboundMessage) -> bool:
        actor_id = self.transport.current_actor_id
        if actor_id is None or actor_id not in message.user_mention_ids:
            return False
        return not (message.mentions_roles or message.mentions_everyone or message.mentions_channels)

    async def _dispatch_content(self, content: str, message: InboundMessage, prefix: str) -> list[DispatchOutcome]:
        match = COMMAND_PATTERN.match(content)
        if match is None:
            return []

        name = match.group("command")[len(prefix):]
        commands = self.collector.resolve(name)
        if not commands:
            return []

        logger.info(f"Prefix command called: {prefix}{name} by {message.author_id} in {message.guild_id}")
        outcomes = await asyncio.gather(
            *(self._run_command(command, match.group("args"), message, prefix) for command in commands)
        )
        return list(outcomes)

    async def _run_command(
        self, command: Command, raw_arguments: str, message: InboundMessage, prefix: str
    ) -> DispatchOutcome:
        try:
            if self.dispatch_timeout is not None:
                return await asyncio.wait_for(
                    command.dispatch(raw_arguments, message, self), self.dispatch_timeout
                )
            return await command.dispatch(raw_arguments, message, self)

        except CommandPermissionError:
            logger.debug(f"Permission denied for {message.author_id} on command {command.name}")
            await self._reply(
                message,
                f"You don't have permission to use this command\nFor available command type **{prefix}help**",
            )
            return DispatchOutcome.PERMISSION_DENIED

        except (ParseError, TooManyArgumentsError) as e:
            logger.debug(f"Invalid usage of command {command.name}: {e}")
            await self._reply(
                message,
                f"Invalid command usage!\nFor usage detail type **{prefix}help {command.name}**",
            )
            return DispatchOutcome.INVALID_USAGE

        except Exception as e:
            timestamp_ms = int(time.time() * 1000)
            await self.telemetry.emit(COMMAND_EXCEPTION, e, timestamp_ms)
            await self._reply(
                message,
                f"``ErrorId: {timestamp_ms}``\n"
                "Unexpected error occurred, the bot developer has been notified.\n"
                "Please try again later.",
            )
            return DispatchOutcome.FAILED

    async def _reply(self, message: InboundMessage, content: str) -> None:
        try:
            await self.transport.reply(message, content)
        except Exception as e:
            await self.telemetry.emit(COMMAND_EXCEPTION, e, int(time.time() * 1000))
