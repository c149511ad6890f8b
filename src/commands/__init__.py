"""
Gatekeep - Commands Package
===========================

Slash command Cogs, loaded dynamically by the bot with load_extension().

Available Commands:
    /verifperms: Check whether you may use the verification buttons
"""

# =============================================================================
# Command Cog Registry
# =============================================================================

COMMAND_COGS = [
    "src.commands.verifperms",
]
"""Command cog module paths loaded in setup_hook."""


__all__ = [
    "COMMAND_COGS",
]
