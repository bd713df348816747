"""Tests for the built-in help command and manual rendering."""

from unittest.mock import AsyncMock

import pytest

from chatcmd.commands.arguments import create_argument
from chatcmd.commands.command import DispatchOutcome
from chatcmd.commands.help import (
    NO_MANUAL,
    build_command_pages,
    build_manual_embed,
    manual_for,
    register_help_command,
    render_manual,
)


class TestManualRendering:
    """Test manual text and embeds."""

    def test_manual_fallbacks(self, collector):
        """Test manual text falls back to help text, then a placeholder."""
        bare = collector.register_command("bare")
        helped = collector.register_command("helped").help("Short help")
        documented = collector.register_command("documented").help("Short help").manual("Long").manual("text")

        assert manual_for(bare) == NO_MANUAL
        assert manual_for(helped) == "Short help"
        assert manual_for(documented) == "Long\ntext"

    def test_manual_embed(self, collector):
        """Test usage and explanation fields."""
        command = (
            collector.register_command("ban")
            .manual("Ban a member")
            .add_argument(create_argument("string").set_name("user"))
        )

        embed = build_manual_embed(command, "?")

        assert embed.title == "How to use **?ban**"
        assert [field.name for field in embed.fields] == ["Usage", "Explain"]
        assert embed.fields[0].value == "```\n?ban <user>\n```"
        assert embed.fields[1].value == "```\nBan a member\n```"

    def test_manual_embed_with_aliases(self, collector):
        """Test aliases are listed as the short version."""
        command = collector.register_command("purge").alias("p", "clean")

        embed = build_manual_embed(command, "!")

        assert [field.name for field in embed.fields] == ["Usage", "Short Version", "Explain"]
        assert embed.fields[1].value == "```\n!p\n!clean\n```"

    def test_render_manual(self, collector):
        """Test lookup by name or alias."""
        collector.register_command("ping").alias("p")

        embeds = render_manual(collector, "P", "!")

        assert len(embeds) == 1
        assert embeds[0].title == "How to use **!ping**"
        assert render_manual(collector, "pong", "!") is None

    def test_command_pages(self, collector):
        """Test commands are split into pages of the requested size."""
        commands = [collector.register_command(f"cmd{i}").help(f"help {i}") for i in range(5)]

        pages = build_command_pages(commands, "!", 2)

        assert [len(page.fields) for page in pages] == [2, 2, 1]
        assert pages[0].title == "Available Commands"
        assert pages[0].fields[0].name == "**!cmd0**"
        assert pages[0].fields[0].value == "help 0"

    def test_no_pages_without_commands(self):
        """Test an empty listing has no pages."""
        assert build_command_pages([], "!", 25) == []


class TestHelpCommand:
    """Test the help command end to end."""

    @pytest.mark.asyncio
    async def test_help_lists_commands(self, help_dispatcher, mock_transport, make_message):
        """Test the listing only contains commands with help text."""
        help_dispatcher.register_command("ping").help("Check latency").exec(AsyncMock())
        help_dispatcher.register_command("hidden").exec(AsyncMock())
        message = make_message("!help")

        outcomes = await help_dispatcher.dispatch_message(message)

        assert outcomes == [DispatchOutcome.EXECUTED]
        mock_transport.reply.assert_awaited_once()
        args, kwargs = mock_transport.reply.call_args
        assert args == (message, "**2** commands available")
        names = [field.name for field in kwargs["embeds"][0].fields]
        assert names == ["**!help**", "**!ping**"]

    @pytest.mark.asyncio
    async def test_help_paginates(self, help_dispatcher, mock_transport, make_message):
        """Test 31 documented commands produce two pages of 25 and 6."""
        for i in range(30):
            help_dispatcher.register_command(f"cmd{i}").help(f"Command {i}")

        await help_dispatcher.dispatch_message(make_message("!help"))

        args, kwargs = mock_transport.reply.call_args
        assert args[1] == "**31** commands available"
        assert [len(page.fields) for page in kwargs["embeds"]] == [25, 6]

    @pytest.mark.asyncio
    async def test_help_splits_many_pages(self, dispatcher, mock_transport, make_message):
        """Test at most ten pages are sent per message."""
        register_help_command(dispatcher, page_size=1)
        for i in range(11):
            dispatcher.register_command(f"cmd{i}").help(f"Command {i}")

        await dispatcher.dispatch_message(make_message("!help"))

        assert mock_transport.reply.await_count == 2
        first, second = mock_transport.reply.call_args_list
        assert first[0][1] == "**12** commands available"
        assert len(first[1]["embeds"]) == 10
        assert second[0][1] is None
        assert len(second[1]["embeds"]) == 2

    @pytest.mark.asyncio
    async def test_help_hides_denied_commands(self, help_dispatcher, mock_transport, make_message):
        """Test commands the author cannot run are not listed."""
        help_dispatcher.register_command("admin").help("Admin only").check_permission(lambda message: False)

        await help_dispatcher.dispatch_message(make_message("!help"))

        args, kwargs = mock_transport.reply.call_args
        assert args[1] == "**1** commands available"
        assert [field.name for field in kwargs["embeds"][0].fields] == ["**!help**"]

    @pytest.mark.asyncio
    async def test_help_for_command(self, help_dispatcher, mock_transport, make_message):
        """Test the manual of a single command is shown."""
        help_dispatcher.register_command("ping").help("Check latency").exec(AsyncMock())

        await help_dispatcher.dispatch_message(make_message("!help PING"))

        kwargs = mock_transport.reply.call_args[1]
        assert kwargs["embeds"][0].title == "How to use **!ping**"

    @pytest.mark.asyncio
    async def test_help_for_unknown_command(self, help_dispatcher, mock_transport, make_message):
        """Test unknown names are reported."""
        message = make_message("!help nope")

        await help_dispatcher.dispatch_message(message)

        assert mock_transport.reply.call_args[0] == (message, "Command **nope** not found")

    @pytest.mark.asyncio
    async def test_help_for_denied_command(self, help_dispatcher, mock_transport, make_message):
        """Test commands the author cannot run are reported as not found."""
        help_dispatcher.register_command("admin").check_permission(lambda message: False)

        await help_dispatcher.dispatch_message(make_message("!help admin"))

        assert mock_transport.reply.call_args[0][1] == "Command **admin** not found"

    @pytest.mark.asyncio
    async def test_help_uses_guild_prefix(self, help_dispatcher, mock_transport, make_message):
        """Test listings use the guild's prefix."""
        message = make_message("?help")
        await help_dispatcher.prefixes.set_prefix(message.guild_id, "?")

        await help_dispatcher.dispatch_message(message)

        kwargs = mock_transport.reply.call_args[1]
        assert kwargs["embeds"][0].fields[0].name == "**?help**"
        assert kwargs["embeds"][0].description == "Type ``?help <command name>`` for more details"

    def test_help_usage(self, help_dispatcher):
        """Test the optional argument hides its empty default."""
        command = help_dispatcher.collector.resolve("help")[0]

        assert command.usage() == "help [command]"
