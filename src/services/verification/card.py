"""
Gatekeep - Review Card Builder
==============================

Turns a joining member into the review embed posted for moderators.

DESIGN:
    Everything here is pure: the builder takes a MemberSnapshot and a
    reference time and returns an embed, so account-age and badge logic
    can be tested without a Discord connection. The Accept / Reject
    buttons live in views.py.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

import discord

from src.core.config import Config, EmbedColors
from src.core.constants import (
    BADGE_GLYPHS,
    FOOTER_TEXT,
    NEW_ACCOUNT_DAYS,
    NO_BADGES_TEXT,
    SECONDS_PER_DAY,
    UNKNOWN_BADGE_GLYPH,
)
from .permissions import required_roles_text


# =============================================================================
# Member Snapshot
# =============================================================================

@dataclass(frozen=True)
class MemberSnapshot:
    """
    The parts of a member shown on a review card.

    Attributes:
        id: Discord user id.
        tag: Display tag (``str(member)``).
        mention: Mention string.
        created_at: Account creation time (timezone-aware).
        badges: Public flag names, e.g. ("hypesquad_bravery",).
        avatar_url: Avatar URL for the thumbnail.
    """

    id: int
    tag: str
    mention: str
    created_at: datetime
    badges: Tuple[str, ...]
    avatar_url: str

    @classmethod
    def from_member(cls, member: discord.Member) -> "MemberSnapshot":
        return cls(
            id=member.id,
            tag=str(member),
            mention=member.mention,
            created_at=member.created_at,
            badges=tuple(flag.name for flag in member.public_flags.all()),
            avatar_url=member.display_avatar.url,
        )


# =============================================================================
# Account Age
# =============================================================================

def account_age_days(created_at: datetime, now: datetime) -> int:
    """Whole days between account creation and ``now`` (never negative)."""
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    seconds = (now - created_at).total_seconds()
    return max(0, int(seconds // SECONDS_PER_DAY))


def is_new_account(age_days: int) -> bool:
    return age_days < NEW_ACCOUNT_DAYS


def accent_color(age_days: int) -> int:
    """Orange for new accounts, blue for established ones."""
    if is_new_account(age_days):
        return EmbedColors.NEW_ACCOUNT
    return EmbedColors.ESTABLISHED_ACCOUNT


def format_age(age_days: int) -> str:
    return f"{age_days} day{'s' if age_days != 1 else ''}"


# =============================================================================
# Badges
# =============================================================================

def render_badges(badges: Iterable[str]) -> str:
    """
    Render badge names as a glyph line.

    Unknown badges render as a placeholder glyph; no badges renders the
    "None" text.
    """
    glyphs = [BADGE_GLYPHS.get(name, UNKNOWN_BADGE_GLYPH) for name in badges]
    return " ".join(glyphs) or NO_BADGES_TEXT


# =============================================================================
# Embed Builder
# =============================================================================

def build_review_embed(
    snapshot: MemberSnapshot,
    config: Config,
    now: Optional[datetime] = None,
) -> discord.Embed:
    """
    Build the review card embed for a joining member.

    Args:
        snapshot: Member data to display.
        config: Bot configuration (for the reviewer requirement line).
        now: Reference time, defaults to the current UTC time.

    Returns:
        The review embed.
    """
    now = now or discord.utils.utcnow()
    age_days = account_age_days(snapshot.created_at, now)

    embed = discord.Embed(
        title="🔍 New Member Verification",
        description=f"**Member:** {snapshot.mention}\n**Tag:** {snapshot.tag}",
        color=accent_color(age_days),
        timestamp=now,
    )
    embed.add_field(name="Discord ID", value=f"`{snapshot.id}`", inline=True)
    embed.add_field(
        name="Account Created",
        value=(
            f"{discord.utils.format_dt(snapshot.created_at, 'F')}\n"
            f"({discord.utils.format_dt(snapshot.created_at, 'R')})"
        ),
        inline=True,
    )
    embed.add_field(name="Account Age", value=format_age(age_days), inline=True)
    embed.add_field(name="Discord Badges", value=render_badges(snapshot.badges), inline=False)
    embed.add_field(
        name="🔐 Required Permissions",
        value=f"Only members with {required_roles_text(config.reviewer_role_ids)} can use these buttons.",
        inline=False,
    )
    embed.set_thumbnail(url=snapshot.avatar_url)
    embed.set_footer(text=FOOTER_TEXT)
    return embed


__all__ = [
    "MemberSnapshot",
    "account_age_days",
    "is_new_account",
    "accent_color",
    "format_age",
    "render_badges",
    "build_review_embed",
]
