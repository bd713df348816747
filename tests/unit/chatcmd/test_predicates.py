"""Tests for the ready-made permission predicates."""

from unittest.mock import AsyncMock

import hikari
import pytest

from chatcmd.commands.command import DispatchOutcome
from chatcmd.permissions import requires_member_permissions, requires_role, requires_user


class TestRequiresRole:
    """Test role based predicates."""

    def test_single_role(self, make_message):
        """Test a single role id."""
        check = requires_role(10)

        assert check(make_message(author_role_ids=(5, 10)))
        assert not check(make_message(author_role_ids=(5,)))

    def test_any_of_roles(self, make_message):
        """Test holding one of several roles is enough."""
        check = requires_role([10, 20])

        assert check(make_message(author_role_ids=(20,)))
        assert not check(make_message())
        assert check._required_roles == {10, 20}


class TestRequiresUser:
    """Test user allow-lists."""

    def test_allowed_users(self, make_message):
        """Test only listed authors pass."""
        check = requires_user([1, 2])

        assert check(make_message(author_id=1))
        assert not check(make_message(author_id=3))

    def test_single_user(self, make_message):
        """Test a single user id."""
        assert requires_user(7)(make_message(author_id=7))


class TestRequiresMemberPermissions:
    """Test guild permission predicates."""

    def test_has_permissions(self, make_message):
        """Test every requested permission must be held."""
        check = requires_member_permissions(hikari.Permissions.KICK_MEMBERS | hikari.Permissions.BAN_MEMBERS)

        assert check(
            make_message(author_permissions=hikari.Permissions.KICK_MEMBERS | hikari.Permissions.BAN_MEMBERS)
        )
        assert not check(make_message(author_permissions=hikari.Permissions.KICK_MEMBERS))
        assert not check(make_message())

    def test_administrator_passes(self, make_message):
        """Test administrators pass every permission check."""
        check = requires_member_permissions(hikari.Permissions.MANAGE_GUILD)

        assert check(make_message(author_permissions=hikari.Permissions.ADMINISTRATOR))

    @pytest.mark.asyncio
    async def test_with_command(self, dispatcher, mock_transport, make_message):
        """Test predicates plug into command dispatch."""
        handler = AsyncMock()
        dispatcher.register_command("kick").check_permission(
            requires_member_permissions(hikari.Permissions.KICK_MEMBERS)
        ).exec(handler)

        denied = await dispatcher.dispatch_message(make_message("!kick"))
        allowed = await dispatcher.dispatch_message(
            make_message("!kick", author_permissions=hikari.Permissions.KICK_MEMBERS)
        )

        assert denied == [DispatchOutcome.PERMISSION_DENIED]
        assert allowed == [DispatchOutcome.EXECUTED]
        handler.assert_awaited_once()
