"""Utility functions shared by the dispatch core and the hikari adapter."""

import inspect
from collections.abc import Callable
from typing import Any

import hikari


async def call_maybe_async(func: Callable, *args: Any, **kwargs: Any) -> Any:
    """Call ``func`` and await the result when it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result


def calculate_member_permissions(
    member: hikari.Member, guild: hikari.Guild, channel: hikari.GuildChannel | None = None
) -> hikari.Permissions:
    """
    Calculate the effective permissions for a member in a guild or channel.

    Args:
        member: The guild member to calculate permissions for
        guild: The guild the member belongs to
        channel: Optional channel to include channel overwrites

    Returns:
        The calculated permissions for the member
    """
    if member.id == guild.owner_id:
        return ~hikari.Permissions.NONE

    # @everyone role has the same ID as the guild
    everyone_role = guild.get_role(guild.id)
    permissions = everyone_role.permissions if everyone_role else hikari.Permissions.NONE

    for role_id in member.role_ids:
        role = guild.get_role(role_id)
        if role:
            permissions |= role.permissions

    if permissions & hikari.Permissions.ADMINISTRATOR:
        return ~hikari.Permissions.NONE

    if channel is None or not hasattr(channel, "permission_overwrites"):
        return permissions

    overwrites = channel.permission_overwrites

    everyone_overwrite = overwrites.get(guild.id)
    if everyone_overwrite:
        permissions &= ~everyone_overwrite.deny
        permissions |= everyone_overwrite.allow

    # Role overwrites are merged before they are applied
    allow = deny = hikari.Permissions.NONE
    for role_id in member.role_ids:
        role_overwrite = overwrites.get(role_id)
        if role_overwrite:
            allow |= role_overwrite.allow
            deny |= role_overwrite.deny
    permissions &= ~deny
    permissions |= allow

    member_overwrite = overwrites.get(member.id)
    if member_overwrite:
        permissions &= ~member_overwrite.deny
        permissions |= member_overwrite.allow

    return permissions


def format_permissions(permissions: hikari.Permissions) -> list[str]:
    """
    Format permissions into a list of human-readable names, e.g. ``"Send Messages"``.

    Args:
        permissions: The permissions to format

    Returns:
        One name per permission bit set, lowest bit first
    """
    flags = sorted(permissions.split(), key=lambda flag: flag.value)
    return [flag.name.replace("_", " ").title() for flag in flags if flag.name]
