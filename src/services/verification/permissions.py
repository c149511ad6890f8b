"""
Gatekeep - Reviewer Permissions
===============================

Who may press the Accept / Reject buttons.

Policy:
    - If reviewer roles are configured, the actor must hold at least one.
    - Otherwise the actor needs Kick Members or Manage Roles.
"""

from typing import AbstractSet, Any, Iterable

import discord

from src.core.config import Config


FALLBACK_PERMISSIONS_TEXT = "`Kick Members` or `Manage Roles` permission"


def has_verification_permission(
    role_ids: Iterable[int],
    permissions: Any,
    allowed_role_ids: AbstractSet[int],
) -> bool:
    """
    Decide whether an actor may use the decision buttons.

    Args:
        role_ids: Role ids held by the actor.
        permissions: The actor's guild permissions (discord.Permissions or
            anything exposing kick_members / manage_roles).
        allowed_role_ids: Configured reviewer roles; empty means fallback.

    Returns:
        True if allowed. Never raises.
    """
    if allowed_role_ids:
        return any(role_id in allowed_role_ids for role_id in role_ids)

    return bool(
        getattr(permissions, "kick_members", False)
        or getattr(permissions, "manage_roles", False)
    )


def member_has_verification_permission(actor: Any, config: Config) -> bool:
    """
    Apply has_verification_permission() to an interaction user.

    Users outside a guild (plain discord.User) are never allowed.
    """
    if not isinstance(actor, discord.Member):
        return False
    return has_verification_permission(
        [role.id for role in actor.roles],
        actor.guild_permissions,
        config.reviewer_role_ids,
    )


def required_roles_text(allowed_role_ids: AbstractSet[int]) -> str:
    """Human-readable requirement for denial messages and cards."""
    if allowed_role_ids:
        return ", ".join(f"<@&{role_id}>" for role_id in sorted(allowed_role_ids))
    return FALLBACK_PERMISSIONS_TEXT


__all__ = [
    "FALLBACK_PERMISSIONS_TEXT",
    "has_verification_permission",
    "member_has_verification_permission",
    "required_roles_text",
]
