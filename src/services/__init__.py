"""
Gatekeep - Services Package
===========================

Services are standalone classes holding the bot's behaviour. They:
- Receive the immutable Config explicitly
- Handle their own Discord errors
- Are created in bot.py and reached by cogs and views through the bot

Available Services:
    VerificationService: review cards and Accept / Reject decisions
"""

from .verification import VerificationService


__all__ = [
    "VerificationService",
]
