"""Tests for the command collector."""

from unittest.mock import AsyncMock

import pytest

from chatcmd.core.errors import CommandConfigurationError, CommandRegistrationError


class TestRegistration:
    """Test command registration rules."""

    def test_register_lowercases_name(self, collector):
        """Test names are stored lower-case."""
        command = collector.register_command("PING")

        assert command.name == "ping"
        assert len(collector) == 1
        assert list(collector) == [command]

    def test_register_duplicate_name(self, collector):
        """Test registering a taken name raises."""
        collector.register_command("ping")

        with pytest.raises(CommandRegistrationError, match="already exists"):
            collector.register_command("Ping")

    def test_register_name_taken_by_alias(self, collector):
        """Test aliases block registration of the same name."""
        collector.register_command("purge").alias("clean")

        with pytest.raises(CommandRegistrationError):
            collector.register_command("clean")

    @pytest.mark.parametrize("name", ["", "two words", "tab\tname", "new\nline"])
    def test_register_invalid_name(self, collector, name):
        """Test empty names and names with whitespace are rejected."""
        with pytest.raises(CommandRegistrationError):
            collector.register_command(name)

    def test_register_non_string(self, collector):
        """Test non-string names are rejected."""
        with pytest.raises(CommandRegistrationError):
            collector.register_command(42)

    def test_registration_error_is_value_error(self, collector):
        """Test registration errors can be caught as ValueError."""
        with pytest.raises(ValueError):
            collector.register_command("")

    def test_can_register(self, collector):
        """Test can_register reflects taken names and aliases."""
        collector.register_command("ping").alias("p")

        assert not collector.can_register("PING")
        assert not collector.can_register("p")
        assert collector.can_register("pong")


class TestResolve:
    """Test name lookup."""

    def test_resolve_case_insensitive(self, collector):
        """Test lookup by name and alias ignores case."""
        command = collector.register_command("ping").alias("p")

        assert collector.resolve("PiNg") == [command]
        assert collector.resolve("P") == [command]

    def test_resolve_unknown(self, collector):
        """Test unknown names resolve to nothing."""
        collector.register_command("ping")

        assert collector.resolve("pong") == []
        assert collector.resolve("") == []


class TestFreeze:
    """Test the configuration lock."""

    def test_freeze_locks_commands(self, collector):
        """Test freezing locks the collector and every command."""
        command = collector.register_command("ping")

        collector.freeze()

        assert collector.frozen
        assert command.frozen

    def test_register_after_freeze(self, collector):
        """Test registration is rejected once frozen."""
        collector.freeze()

        with pytest.raises(CommandConfigurationError):
            collector.register_command("late")


class TestPermitted:
    """Test filtering commands by the author's permissions."""

    @pytest.mark.asyncio
    async def test_permitted_filters_denied(self, collector, make_message):
        """Test only commands whose predicates pass are returned."""
        public = collector.register_command("public")
        collector.register_command("secret").check_permission(lambda message: False)
        mixed = collector.register_command("mixed").check_permission(AsyncMock(return_value=True))

        assert await collector.permitted(make_message()) == [public, mixed]

    @pytest.mark.asyncio
    async def test_permitted_subset(self, collector, make_message):
        """Test an explicit candidate list is respected."""
        first = collector.register_command("first")
        collector.register_command("second")

        assert await collector.permitted(make_message(), [first]) == [first]
