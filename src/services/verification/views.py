"""
Gatekeep - Verification Views
=============================

Persistent Accept / Reject buttons attached to review cards.

DESIGN:
    DecisionButton is a DynamicItem keyed on the decision token, so cards
    posted before a restart keep working once the item is registered with
    bot.add_dynamic_items(). The button itself does nothing but hand the
    decoded token to the VerificationService.
"""

from typing import TYPE_CHECKING

import discord

from src.core.logger import logger
from .tokens import DecisionAction, DecisionToken, TOKEN_TEMPLATE

if TYPE_CHECKING:
    from src.bot import GatekeepBot


# =============================================================================
# Button Styles
# =============================================================================

_BUTTON_STYLE = {
    DecisionAction.ACCEPT: ("Accept", discord.ButtonStyle.success),
    DecisionAction.REJECT: ("Reject", discord.ButtonStyle.danger),
}


# =============================================================================
# Decision Button (Persistent)
# =============================================================================

class DecisionButton(discord.ui.DynamicItem[discord.ui.Button], template=TOKEN_TEMPLATE):
    """Persistent Accept or Reject button bound to one member."""

    def __init__(self, action: DecisionAction, member_id: int) -> None:
        label, style = _BUTTON_STYLE[action]
        self.token = DecisionToken(action, member_id)
        super().__init__(
            discord.ui.Button(
                label=label,
                style=style,
                custom_id=self.token.encode(),
            )
        )

    @classmethod
    async def from_custom_id(
        cls,
        interaction: discord.Interaction,
        item: discord.ui.Button,
        match,
    ) -> "DecisionButton":
        return cls(DecisionAction(match["action"]), int(match["member_id"]))

    async def callback(self, interaction: discord.Interaction) -> None:
        """Route the click to the verification service."""
        bot: "GatekeepBot" = interaction.client
        service = getattr(bot, "verification_service", None)
        if service is None:
            logger.warning("Decision Ignored: verification service not ready", [
                ("Custom ID", self.token.encode()),
            ])
            return
        await service.handle_decision(interaction, self.custom_id)


# =============================================================================
# Review Card View
# =============================================================================

class ReviewCardView(discord.ui.View):
    """Accept / Reject controls for a single review card."""

    def __init__(self, member_id: int) -> None:
        super().__init__(timeout=None)
        self.member_id = member_id
        self.add_item(DecisionButton(DecisionAction.ACCEPT, member_id))
        self.add_item(DecisionButton(DecisionAction.REJECT, member_id))


def setup_verification_views(bot: "GatekeepBot") -> None:
    """Register persistent decision buttons with the bot."""
    bot.add_dynamic_items(DecisionButton)
    logger.tree("Verification Views Registered", [
        ("Dynamic Items", "DecisionButton"),
        ("Template", TOKEN_TEMPLATE),
    ], emoji="🔘")


__all__ = [
    "DecisionButton",
    "ReviewCardView",
    "setup_verification_views",
]
