"""Transport-neutral message and handler context types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import hikari

if TYPE_CHECKING:
    from ..commands.command import Command
    from .dispatcher import Dispatcher
    from .prefix import PrefixResolver
    from .transport import Transport


@dataclass(slots=True)
class InboundMessage:
    """A chat message as seen by the dispatch pipeline."""

    content: str
    author_id: int | None
    channel_id: int
    guild_id: int | None = None
    message_id: int | None = None
    author_is_bot: bool = False
    author_role_ids: tuple[int, ...] = ()
    author_permissions: hikari.Permissions = hikari.Permissions.NONE
    user_mention_ids: tuple[int, ...] = ()
    mentions_roles: bool = False
    mentions_channels: bool = False
    mentions_everyone: bool = False
    guild_name: str | None = None
    channel_name: str | None = None
    event: Any = None

    @property
    def is_guild_message(self) -> bool:
        return self.guild_id is not None

    @classmethod
    def from_event(
        cls,
        event: hikari.GuildMessageCreateEvent,
        author_permissions: hikari.Permissions = hikari.Permissions.NONE,
    ) -> InboundMessage:
        message = event.message
        member = event.member
        guild = event.get_guild()
        channel = event.get_channel()

        return cls(
            content=event.content or "",
            author_id=int(event.author_id) if event.author_id else None,
            channel_id=int(event.channel_id),
            guild_id=int(event.guild_id) if event.guild_id else None,
            message_id=int(event.message_id),
            author_is_bot=event.author.is_bot,
            author_role_ids=tuple(int(role_id) for role_id in member.role_ids) if member else (),
            author_permissions=author_permissions,
            user_mention_ids=tuple(int(user_id) for user_id in (message.user_mentions_ids or ())),
            mentions_roles=bool(message.role_mention_ids),
            mentions_channels=bool(message.channel_mention_ids),
            mentions_everyone=bool(message.mentions_everyone),
            guild_name=guild.name if guild else None,
            channel_name=getattr(channel, "name", None),
            event=event,
        )


@dataclass(slots=True)
class CommandContext:
    """Passed to every execution handler of a dispatched command."""

    command: Command
    message: InboundMessage
    arguments: dict[str, Any]
    dispatcher: Dispatcher

    @property
    def transport(self) -> Transport:
        return self.dispatcher.transport

    @property
    def prefixes(self) -> PrefixResolver:
        return self.dispatcher.prefixes

    @property
    def author_id(self) -> int | None:
        return self.message.author_id

    @property
    def guild_id(self) -> int | None:
        return self.message.guild_id

    @property
    def channel_id(self) -> int:
        return self.message.channel_id

    async def respond(self, content: str | None = None, *, embeds: list[hikari.Embed] | None = None) -> None:
        await self.transport.send(self.channel_id, content, embeds=embeds)

    async def reply(self, content: str | None = None, *, embeds: list[hikari.Embed] | None = None) -> None:
        await self.transport.reply(self.message, content, embeds=embeds)

    async def get_prefix(self) -> str:
        return await self.prefixes.get_prefix(self.guild_id)

    async def set_prefix(self, prefix: str) -> None:
        await self.prefixes.set_prefix(self.guild_id, prefix)

    async def execute(self, text: str) -> list:
        """Run ``text`` as a command on behalf of this message's author."""
        return await self.dispatcher.execute_command(text, self.message)
