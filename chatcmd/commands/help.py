"""Built-in ``help`` command and manual rendering."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import hikari

from config.settings import settings

from ..core.message import CommandContext
from .arguments import create_argument
from .command import Command

if TYPE_CHECKING:
    from ..core.dispatcher import Dispatcher
    from .collector import CommandCollector

logger = logging.getLogger(__name__)

HELP_COLOR = hikari.Color(0x4A90E2)
NO_MANUAL = "No Manual available"
# Discord rejects messages carrying more embeds than this
MAX_EMBEDS_PER_MESSAGE = 10


def manual_for(command: Command) -> str:
    if command.has_manual:
        return command.manual_text
    if command.has_help:
        return command.help_text
    return NO_MANUAL


def build_manual_embed(command: Command, prefix: str) -> hikari.Embed:
    embed = hikari.Embed(title=f"How to use **{prefix}{command.name}**", color=HELP_COLOR)
    embed.add_field("Usage", f"```\n{prefix}{command.usage()}\n```")

    alias_usages = command.alias_usages()
    if alias_usages:
        short = "\n".join(f"{prefix}{usage}" for usage in alias_usages)
        embed.add_field("Short Version", f"```\n{short}\n```")

    embed.add_field("Explain", f"```\n{manual_for(command)}\n```")
    return embed


def render_manual(collector: CommandCollector, name: str, prefix: str) -> list[hikari.Embed] | None:
    """Manual embeds for every command matching ``name``, or ``None`` if nothing matches."""
    commands = collector.resolve(name)
    if not commands:
        return None
    return [build_manual_embed(command, prefix) for command in commands]


def build_command_pages(commands: list[Command], prefix: str, page_size: int) -> list[hikari.Embed]:
    pages = []
    for start in range(0, len(commands), page_size):
        embed = hikari.Embed(
            title="Available Commands",
            description=f"Type ``{prefix}help <command name>`` for more details",
            color=HELP_COLOR,
        )
        for command in commands[start:start + page_size]:
            embed.add_field(f"**{prefix}{command.name}**", command.help_text, inline=False)
        pages.append(embed)
    return pages


def register_help_command(dispatcher: Dispatcher, page_size: int | None = None) -> Command:
    page_size = page_size or settings.help_page_size

    async def show_help(ctx: CommandContext) -> None:
        prefix = await ctx.get_prefix()
        collector = ctx.dispatcher.collector
        name = ctx.arguments.get("command")

        if not name:
            commands = [command for command in await collector.permitted(ctx.message) if command.has_help]
            pages = build_command_pages(commands, prefix, page_size)
            content: str | None = f"**{len(commands)}** commands available"
            if not pages:
                await ctx.reply(content)
                return
            for start in range(0, len(pages), MAX_EMBEDS_PER_MESSAGE):
                await ctx.reply(content, embeds=pages[start:start + MAX_EMBEDS_PER_MESSAGE])
                content = None
            return

        commands = await collector.permitted(ctx.message, collector.resolve(name))
        if not commands:
            await ctx.reply(f"Command **{name}** not found")
            return

        for command in commands:
            await ctx.reply(embeds=[build_manual_embed(command, prefix)])

    return (
        dispatcher.register_command("help")
        .help("Use 'help <command>' to get more details")
        .manual("Display list of usable commands")
        .manual("You can specify a command name to view how to use it (eg. help <command name>)")
        .add_argument(create_argument("string").set_name("command").lower().optional("", display_default=False))
        .exec(show_help)
    )
