"""
Gatekeep - Source Package
=========================

A member verification bot: every new member gets a review card with
Accept / Reject buttons, and reviewers decide who stays.

Package Structure:
- bot.py: Main Discord bot class
- commands/: Slash commands (/verifperms)
- core/: Configuration, logging, constants, status server
- events/: Event cogs (member join)
- services/: Verification service
- utils/: Async and interaction helpers
"""
