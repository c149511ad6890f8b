"""
Gatekeep - Verification Permissions Command
===========================================

/verifperms: shows the caller whether they may use the Accept / Reject
buttons, what is required, and which roles they hold.
"""

from typing import TYPE_CHECKING, Optional

import discord
from discord import app_commands
from discord.ext import commands

from src.core.config import Config, EmbedColors
from src.core.logger import logger
from src.services.verification.permissions import (
    member_has_verification_permission,
    required_roles_text,
)

if TYPE_CHECKING:
    from src.bot import GatekeepBot


NO_ROLES_TEXT = "No roles"


def build_permission_status_embed(
    member: discord.abc.User,
    config: Config,
    allowed: Optional[bool] = None,
) -> discord.Embed:
    """
    Build the ephemeral permission status embed for ``member``.

    ``allowed`` is computed from ``config`` when not given.
    """
    if allowed is None:
        allowed = member_has_verification_permission(member, config)

    roles = [
        role.mention for role in getattr(member, "roles", [])
        if not role.is_default()
    ]

    embed = discord.Embed(
        title="🔐 Verification Permissions",
        description=f"**Your status:** {'✅ Authorized' if allowed else '❌ Not authorized'}",
        color=EmbedColors.AUTHORIZED if allowed else EmbedColors.UNAUTHORIZED,
        timestamp=discord.utils.utcnow(),
    )
    embed.add_field(name="Required", value=required_roles_text(config.reviewer_role_ids), inline=False)
    embed.add_field(name="Your Roles", value=", ".join(roles) or NO_ROLES_TEXT, inline=False)
    return embed


class VerifPermsCog(commands.Cog):
    """Cog for the /verifperms command."""

    def __init__(self, bot: "GatekeepBot") -> None:
        self.bot = bot
        self.config = bot.config

    @app_commands.command(name="verifperms", description="Check your verification permissions")
    @app_commands.guild_only()
    async def verifperms(self, interaction: discord.Interaction) -> None:
        """Reply privately with the caller's verification permission status."""
        allowed = member_has_verification_permission(interaction.user, self.config)
        embed = build_permission_status_embed(interaction.user, self.config, allowed)
        await interaction.response.send_message(embed=embed, ephemeral=True)

        logger.tree("Verification Permissions Checked", [
            ("User", f"{interaction.user} ({interaction.user.id})"),
            ("Authorized", "Yes" if allowed else "No"),
        ], emoji="🔐")


async def setup(bot: "GatekeepBot") -> None:
    """Load the VerifPerms cog."""
    await bot.add_cog(VerifPermsCog(bot))
    logger.debug("VerifPerms Cog Loaded")


__all__ = ["VerifPermsCog", "build_permission_status_embed", "setup"]
