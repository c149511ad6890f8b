"""
Gatekeep - Interaction Utilities
================================

Shared helpers for Discord interaction handling.

InteractionReplier guarantees at most one reply per interaction: the first
call to reply() picks response.send_message() or followup.send() depending
on whether the interaction was already acknowledged, and every later call
is a no-op.
"""

from typing import Optional, Union

import discord

from src.core.logger import logger


class InteractionReplier:
    """
    At-most-one-reply wrapper around a discord.Interaction.

    Attributes:
        interaction: The wrapped interaction.
        replied: Whether a reply has been attempted.
    """

    def __init__(self, interaction: discord.Interaction) -> None:
        self.interaction = interaction
        self.replied = False

    def _response_done(self) -> bool:
        try:
            return self.interaction.response.is_done()
        except discord.HTTPException:
            # If we can't check, assume done and use followup
            return True

    async def acknowledge(self) -> bool:
        """
        Acknowledge a component interaction without replying.

        A deferred update keeps the interaction token valid for follow-ups
        while the handler does slow work.

        Returns:
            True if deferred, False if the response was already used.
        """
        if self._response_done():
            return False
        await self.interaction.response.defer()
        return True

    async def reply(
        self,
        content: str,
        *,
        ephemeral: bool = True,
        embed: Optional[discord.Embed] = None,
    ) -> Optional[Union[discord.InteractionMessage, discord.WebhookMessage]]:
        """
        Send the single reply for this interaction.

        Args:
            content: Message content.
            ephemeral: Whether only the actor sees the reply.
            embed: Optional embed.

        Returns:
            The sent message, or None if a reply was already attempted.

        Raises:
            discord.HTTPException: If Discord rejects the reply.
        """
        if self.replied:
            logger.debug(f"Reply suppressed (already replied): {content[:50]}")
            return None
        self.replied = True

        kwargs = {"content": content, "ephemeral": ephemeral}
        if embed is not None:
            kwargs["embed"] = embed

        if not self._response_done():
            await self.interaction.response.send_message(**kwargs)
            return await self.interaction.original_response()
        return await self.interaction.followup.send(wait=True, **kwargs)

    async def safe_reply(self, content: str, *, ephemeral: bool = True) -> bool:
        """
        reply() that logs instead of raising.

        Returns:
            True if a message was sent.
        """
        try:
            return await self.reply(content, ephemeral=ephemeral) is not None
        except discord.HTTPException as e:
            logger.debug(f"safe_reply failed: {e.status} - {str(e)[:50]}")
            return False


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["InteractionReplier"]
