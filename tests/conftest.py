"""Pytest configuration and shared fixtures."""

import logging
from unittest.mock import AsyncMock, MagicMock

import hikari
import pytest

from chatcmd.commands.collector import CommandCollector
from chatcmd.core.dispatcher import Dispatcher
from chatcmd.core.message import InboundMessage
from chatcmd.core.prefix import PrefixResolver
from chatcmd.core.telemetry import TelemetrySink
from chatcmd.core.transport import Transport

# Disable logging during tests
logging.disable(logging.CRITICAL)

BOT_ID = 12345
USER_ID = 111111111
GUILD_ID = 123456789
CHANNEL_ID = 444444444


@pytest.fixture
def mock_transport():
    """Mock chat transport; the bot holds every permission by default."""
    transport = MagicMock(spec=Transport)
    transport.current_actor_id = BOT_ID
    transport.reply = AsyncMock()
    transport.send = AsyncMock()
    transport.send_direct = AsyncMock()
    transport.capabilities_in = AsyncMock(return_value=~hikari.Permissions.NONE)
    return transport


@pytest.fixture
def make_message():
    """Factory for guild messages written by a regular user."""

    def factory(content: str = "!test", **overrides) -> InboundMessage:
        fields = {
            "content": content,
            "author_id": USER_ID,
            "channel_id": CHANNEL_ID,
            "guild_id": GUILD_ID,
            "message_id": 999,
            "guild_name": "Test Guild",
            "channel_name": "test-channel",
        }
        fields.update(overrides)
        return InboundMessage(**fields)

    return factory


@pytest.fixture
def collector():
    return CommandCollector()


@pytest.fixture
def telemetry():
    return TelemetrySink()


@pytest.fixture
def dispatcher(mock_transport, telemetry):
    """Dispatcher with the default ``!`` prefix and no built-in help command."""
    return Dispatcher(
        mock_transport,
        prefixes=PrefixResolver("!"),
        telemetry=telemetry,
        help_command=False,
    )


@pytest.fixture
def help_dispatcher(mock_transport, telemetry):
    """Dispatcher with the built-in help command registered."""
    return Dispatcher(mock_transport, prefixes=PrefixResolver("!"), telemetry=telemetry)


class AsyncContextManager:
    """Helper for mocking async context managers."""

    def __init__(self, return_value=None):
        self.return_value = return_value

    async def __aenter__(self):
        return self.return_value

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


@pytest.fixture
def async_context_manager():
    """Factory for creating async context managers."""
    return AsyncContextManager
