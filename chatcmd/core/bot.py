import logging

import hikari

from config.settings import settings

from ..commands.command import Command
from ..database import DatabaseManager, GuildPrefixStore
from .dispatcher import Dispatcher
from .prefix import PrefixResolver
from .telemetry import COMMAND_EXCEPTION, TelemetrySink, log_command_exception
from .transport import HikariTransport

logger = logging.getLogger(__name__)


class ChatBot:
    """Wires the dispatcher to a hikari gateway and a prefix database."""

    def __init__(self, token: str | None = None, *, database_url: str | None = None) -> None:
        token = token or settings.discord_token
        if not token:
            raise ValueError("DISCORD_TOKEN is not configured")

        intents = (
            hikari.Intents.GUILDS
            | hikari.Intents.GUILD_MEMBERS
            | hikari.Intents.GUILD_MESSAGES
            | hikari.Intents.MESSAGE_CONTENT
        )
        self.hikari_bot = hikari.GatewayBot(token=token, intents=intents)

        self.db = DatabaseManager(database_url)
        self.prefix_store = GuildPrefixStore(self.db)

        self.telemetry = TelemetrySink()
        self.telemetry.add_listener(COMMAND_EXCEPTION, log_command_exception)

        self.transport = HikariTransport(self.hikari_bot)
        self.dispatcher = Dispatcher(
            self.transport,
            prefixes=PrefixResolver(
                settings.bot_prefix,
                reader=self.prefix_store.read_prefix,
                writer=self.prefix_store.write_prefix,
            ),
            telemetry=self.telemetry,
        )

        self._setup_event_listeners()

    def register_command(self, name: str) -> Command:
        return self.dispatcher.register_command(name)

    def _setup_event_listeners(self) -> None:
        self.hikari_bot.subscribe(hikari.StartedEvent, self.on_started)
        self.hikari_bot.subscribe(hikari.StoppingEvent, self.on_stopping)
        self.hikari_bot.subscribe(hikari.GuildMessageCreateEvent, self.on_message_create)

    async def on_started(self, event: hikari.StartedEvent) -> None:
        await self.db.create_tables()
        self.dispatcher.freeze()
        logger.info(f"Bot is ready with {len(self.dispatcher.collector)} commands")

    async def on_stopping(self, event: hikari.StoppingEvent) -> None:
        logger.info("Bot is stopping...")
        await self.db.close()

    async def on_message_create(self, event: hikari.GuildMessageCreateEvent) -> None:
        message = self.transport.build_message(event)
        try:
            await self.dispatcher.dispatch_message(message)
        except Exception as e:
            # Failures outside a command (e.g. prefix lookup) end up here
            logger.error(f"Error dispatching message {event.message_id}: {e}")

    def run(self) -> None:
        try:
            logger.info("Starting bot...")
            self.hikari_bot.run()
        except KeyboardInterrupt:
            logger.info("Bot stopped by user")
        except Exception as e:
            logger.error(f"Bot crashed: {e}")
            raise
