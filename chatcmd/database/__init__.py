from .manager import DatabaseManager
from .models import Base, GuildPrefix
from .prefix_store import GuildPrefixStore

__all__ = ["DatabaseManager", "Base", "GuildPrefix", "GuildPrefixStore"]
