"""
Gatekeep - Events Package
=========================

Event handler Cogs, loaded dynamically by the bot with load_extension().

Event routing:
    - members.py: Member join -> review card
"""

# =============================================================================
# Event Cog Registry
# =============================================================================

EVENT_COGS = [
    "src.events.members",
]
"""Event cog module paths loaded in setup_hook."""


__all__ = [
    "EVENT_COGS",
]
