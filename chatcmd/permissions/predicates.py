"""Ready-made predicates for :meth:`Command.check_permission`."""

import logging
from collections.abc import Callable, Iterable

import hikari

from ..core.message import InboundMessage

logger = logging.getLogger(__name__)


def requires_role(role_ids: int | Iterable[int]) -> Callable[[InboundMessage], bool]:
    """Allow authors holding any of ``role_ids``."""
    required = {role_ids} if isinstance(role_ids, int) else set(role_ids)

    def check(message: InboundMessage) -> bool:
        return any(role_id in required for role_id in message.author_role_ids)

    # Store metadata for introspection
    check._required_roles = required
    return check


def requires_user(user_ids: int | Iterable[int]) -> Callable[[InboundMessage], bool]:
    """Allow only the listed authors, e.g. the bot owner."""
    allowed = {user_ids} if isinstance(user_ids, int) else set(user_ids)

    def check(message: InboundMessage) -> bool:
        return message.author_id in allowed

    check._allowed_users = allowed
    return check


def requires_member_permissions(permissions: hikari.Permissions) -> Callable[[InboundMessage], bool]:
    """Allow authors whose resolved guild permissions include ``permissions``."""

    def check(message: InboundMessage) -> bool:
        granted = message.author_permissions
        if granted & hikari.Permissions.ADMINISTRATOR:
            return True
        has_all = (granted & permissions) == permissions
        if not has_all:
            logger.debug(f"Author {message.author_id} lacks {permissions & ~granted}")
        return has_all

    check._required_permissions = permissions
    return check
