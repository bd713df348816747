"""SQL-backed persistence callbacks for :class:`~chatcmd.core.prefix.PrefixResolver`."""

import logging

from sqlalchemy import select

from .manager import DatabaseManager
from .models import GuildPrefix

logger = logging.getLogger(__name__)


class GuildPrefixStore:
    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def read_prefix(self, guild_id: int) -> str | None:
        async with self.db.session() as session:
            result = await session.execute(select(GuildPrefix).where(GuildPrefix.guild_id == guild_id))
            row = result.scalar_one_or_none()
            return row.prefix if row else None

    async def write_prefix(self, guild_id: int, prefix: str) -> None:
        async with self.db.session() as session:
            await session.merge(GuildPrefix(guild_id=guild_id, prefix=prefix))
        logger.debug(f"Stored prefix '{prefix}' for guild {guild_id}")
