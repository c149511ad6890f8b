"""
Gatekeep - Member Events
========================

Posts a review card whenever a member joins.
"""

from typing import TYPE_CHECKING

import discord
from discord.ext import commands

from src.core.logger import logger

if TYPE_CHECKING:
    from src.bot import GatekeepBot


class MemberEvents(commands.Cog):
    """Member event handlers."""

    def __init__(self, bot: "GatekeepBot") -> None:
        self.bot = bot

    @commands.Cog.listener()
    async def on_member_join(self, member: discord.Member) -> None:
        """Send the new member's review card to the review channel."""
        logger.tree("Member Joined", [
            ("Member", f"{member} ({member.id})"),
            ("Guild", f"{member.guild.name} ({member.guild.id})"),
        ], emoji="📥")

        if self.bot.verification_service is None:
            logger.warning("Review Card Skipped: verification service not ready")
            return

        await self.bot.verification_service.post_review_card(member)


async def setup(bot: "GatekeepBot") -> None:
    """Add the member events cog to the bot."""
    await bot.add_cog(MemberEvents(bot))
    logger.debug("Member Events Loaded")
