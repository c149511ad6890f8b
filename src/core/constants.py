"""
Gatekeep - Centralized Constants
================================

Delays, thresholds and user-facing strings for the verification flow.
Import from this module instead of hardcoding values.
"""

from types import MappingProxyType
from typing import Mapping

# =============================================================================
# Time Constants (in seconds)
# =============================================================================

SECONDS_PER_DAY = 86400
MS_PER_SECOND = 1000

REJECT_KICK_DELAY = 5.0               # Lets the rejected member read the DM
CONFIRMATION_DELETE_DELAY = 10.0      # Lifetime of the public confirmation
SHUTDOWN_DRAIN_TIMEOUT = 15.0         # Longest wait for delayed work on close

# =============================================================================
# Account Age
# =============================================================================

NEW_ACCOUNT_DAYS = 7                  # Accounts younger than this are "new"

# =============================================================================
# Badges
# =============================================================================

BADGE_GLYPHS: Mapping[str, str] = MappingProxyType({
    "staff": "👨‍💼",
    "partner": "🤝",
    "hypesquad": "💎",
    "bug_hunter": "🐛",
    "bug_hunter_level_2": "🐛",
    "hypesquad_bravery": "🏠",
    "hypesquad_brilliance": "🏠",
    "hypesquad_balance": "🏠",
    "early_supporter": "👑",
    "team_user": "👥",
    "verified_bot": "🤖",
    "verified_bot_developer": "👨‍💻",
    "discord_certified_moderator": "🛡️",
    "bot_http_interactions": "🔗",
    "active_developer": "⚡",
})
"""Public user flag name -> glyph shown on the review card."""

UNKNOWN_BADGE_GLYPH = "❓"
NO_BADGES_TEXT = "None"

# =============================================================================
# Moderation
# =============================================================================

KICK_REASON = "Rejected at verification"
ACCEPT_REASON = "Accepted at verification"

# =============================================================================
# Display
# =============================================================================

FOOTER_TEXT = "Gatekeep • Member Verification"
STATUS_MESSAGE = "Discord verification bot operational"

# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "SECONDS_PER_DAY",
    "MS_PER_SECOND",
    "REJECT_KICK_DELAY",
    "CONFIRMATION_DELETE_DELAY",
    "SHUTDOWN_DRAIN_TIMEOUT",
    "NEW_ACCOUNT_DAYS",
    "BADGE_GLYPHS",
    "UNKNOWN_BADGE_GLYPH",
    "NO_BADGES_TEXT",
    "KICK_REASON",
    "ACCEPT_REASON",
    "FOOTER_TEXT",
    "STATUS_MESSAGE",
]
