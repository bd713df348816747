import asyncio
import logging
import os
from pathlib import Path
from typing import Optional

import typer

from config.settings import settings
from chatcmd.core.bot import ChatBot
from chatcmd.database import DatabaseManager

app = typer.Typer(
    name="chatcmd",
    help="Prefix command bot for Discord",
    add_completion=False,
)


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


@app.command()
def run(
    dev: bool = typer.Option(False, "--dev", help="Run in development mode"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Set log level"),
) -> None:
    """Run the bot."""
    if dev:
        os.environ["ENVIRONMENT"] = "development"

    setup_logging(log_level or ("DEBUG" if dev else settings.log_level))

    bot = ChatBot()
    bot.run()


@app.command()
def init(
    directory: Optional[str] = typer.Option(None, help="Directory to initialize")
) -> None:
    """Initialize a new bot project."""
    target_dir = Path(directory) if directory else Path.cwd()

    if not target_dir.exists():
        target_dir.mkdir(parents=True)

    (target_dir / "data").mkdir(exist_ok=True)

    env_file = target_dir / ".env"
    if not env_file.exists():
        env_content = """# Bot Configuration
DISCORD_TOKEN=your_discord_bot_token_here
BOT_PREFIX=!
DATABASE_URL=sqlite:///data/bot.db
ENVIRONMENT=development
LOG_LEVEL=INFO
HELP_PAGE_SIZE=25
"""
        env_file.write_text(env_content)

    typer.echo(f"✅ Bot project initialized in {target_dir}")


@app.command()
def db(
    action: str = typer.Argument(help="Action: create, reset"),
) -> None:
    """Database management commands."""
    async def run_db_command() -> None:
        db_manager = DatabaseManager()
        try:
            if action == "create":
                await db_manager.create_tables()
                typer.echo("✅ Database tables created")
            elif action == "reset":
                confirm = typer.confirm("⚠️  This will delete all stored prefixes. Continue?")
                if confirm:
                    await db_manager.drop_tables()
                    await db_manager.create_tables()
                    typer.echo("✅ Database reset completed")
            else:
                typer.echo(f"Unknown action: {action}")
        finally:
            await db_manager.close()

    asyncio.run(run_db_command())


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
