"""Chat transport interface and its hikari implementation."""

import logging
from abc import ABC, abstractmethod

import hikari

from .message import InboundMessage
from .utils import calculate_member_permissions

logger = logging.getLogger(__name__)


class Transport(ABC):
    """What the dispatch pipeline needs from the chat client."""

    @property
    @abstractmethod
    def current_actor_id(self) -> int | None:
        """ID of the account the bot is logged in as."""

    @abstractmethod
    async def reply(
        self, message: InboundMessage, content: str | None = None, *, embeds: list[hikari.Embed] | None = None
    ) -> None:
        """Reply to ``message`` in its channel."""

    @abstractmethod
    async def send(
        self, channel_id: int, content: str | None = None, *, embeds: list[hikari.Embed] | None = None
    ) -> None:
        """Send a message to a channel."""

    @abstractmethod
    async def send_direct(
        self, user_id: int, content: str | None = None, *, embeds: list[hikari.Embed] | None = None
    ) -> None:
        """Send a private message to a user."""

    @abstractmethod
    async def capabilities_in(self, message: InboundMessage) -> hikari.Permissions:
        """Permissions the bot currently holds in the message's channel."""


class HikariTransport(Transport):
    def __init__(self, gateway: hikari.GatewayBot) -> None:
        self.gateway = gateway

    @property
    def current_actor_id(self) -> int | None:
        me = self.gateway.get_me()
        return int(me.id) if me else None

    async def reply(
        self, message: InboundMessage, content: str | None = None, *, embeds: list[hikari.Embed] | None = None
    ) -> None:
        await self.gateway.rest.create_message(
            message.channel_id,
            content if content is not None else hikari.UNDEFINED,
            embeds=embeds or hikari.UNDEFINED,
            reply=message.message_id or hikari.UNDEFINED,
        )

    async def send(
        self, channel_id: int, content: str | None = None, *, embeds: list[hikari.Embed] | None = None
    ) -> None:
        await self.gateway.rest.create_message(
            channel_id,
            content if content is not None else hikari.UNDEFINED,
            embeds=embeds or hikari.UNDEFINED,
        )

    async def send_direct(
        self, user_id: int, content: str | None = None, *, embeds: list[hikari.Embed] | None = None
    ) -> None:
        channel = await self.gateway.rest.create_dm_channel(user_id)
        await self.send(channel.id, content, embeds=embeds)

    async def capabilities_in(self, message: InboundMessage) -> hikari.Permissions:
        me = self.gateway.get_me()
        if me is None or message.guild_id is None:
            return hikari.Permissions.NONE

        cache = self.gateway.cache
        guild = cache.get_guild(message.guild_id)
        if guild is None:
            guild = await self.gateway.rest.fetch_guild(message.guild_id)
        member = cache.get_member(message.guild_id, me.id)
        if member is None:
            member = await self.gateway.rest.fetch_member(message.guild_id, me.id)
        channel = cache.get_guild_channel(message.channel_id)

        return calculate_member_permissions(member, guild, channel)

    def build_message(self, event: hikari.GuildMessageCreateEvent) -> InboundMessage:
        """Convert a gateway event, resolving the author's permissions from the cache when possible."""
        permissions = hikari.Permissions.NONE
        guild = event.get_guild()
        if event.member is not None and guild is not None:
            permissions = calculate_member_permissions(event.member, guild, event.get_channel())
        else:
            logger.debug(f"Author permissions for message {event.message_id} not cached")
        return InboundMessage.from_event(event, permissions)
