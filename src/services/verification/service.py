"""
Gatekeep - Verification Service
===============================

Posts review cards for joining members and applies reviewer decisions.

DESIGN:
    A decision walks through fixed states:

        RECEIVED -> AUTHORIZED -> TARGET_RESOLVED -> APPLIED
                 -> NOTIFIED -> LOGGED -> CONFIRMED

    and may stop early as IGNORED (not our button), DENIED (actor lacks
    permission) or FAILED (target/role missing, Discord call failed, or an
    unexpected error). Discord is the only source of truth: nothing is
    stored between clicks, everything is fetched again per decision.

    Replies go through InteractionReplier so each click produces at most
    one reply. Welcome posts, audit logs, the rejection DM and cleanup are
    best-effort: failures are logged and never abort the decision.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

import discord

from src.core.config import Config, EmbedColors
from src.core.constants import (
    ACCEPT_REASON,
    CONFIRMATION_DELETE_DELAY,
    KICK_REASON,
    REJECT_KICK_DELAY,
    SHUTDOWN_DRAIN_TIMEOUT,
)
from src.core.logger import logger
from src.utils.async_utils import TaskScheduler, safe_async_operation
from src.utils.interaction import InteractionReplier
from .card import MemberSnapshot, account_age_days, build_review_embed, format_age
from .permissions import member_has_verification_permission, required_roles_text
from .tokens import DecisionAction, decode_token
from .views import ReviewCardView

if TYPE_CHECKING:
    from src.bot import GatekeepBot


# =============================================================================
# Decision State
# =============================================================================

class DecisionState(str, Enum):
    """Progress of a single decision click."""

    RECEIVED = "received"
    AUTHORIZED = "authorized"
    TARGET_RESOLVED = "target-resolved"
    APPLIED = "applied"
    NOTIFIED = "notified"
    LOGGED = "logged"
    CONFIRMED = "confirmed"

    IGNORED = "ignored"
    DENIED = "denied"
    FAILED = "failed"


@dataclass
class DecisionOutcome:
    """What an applied decision did, for the audit log and confirmation."""

    action: DecisionAction
    target: discord.Member
    actor: discord.abc.User
    role_name: Optional[str] = None
    dm_sent: bool = False


@dataclass
class DecisionProgress:
    """Last state a decision reached, for failure logs."""

    state: DecisionState = DecisionState.RECEIVED


# =============================================================================
# Messages
# =============================================================================

DENIED_MESSAGE = (
    "❌ **Access denied**: you are not allowed to use the verification buttons.\n\n"
    "**Required:** {required}"
)
TARGET_NOT_FOUND_MESSAGE = "The targeted member could not be found (they may have left)."
ROLE_NOT_FOUND_MESSAGE = "Verification role not found. Check VERIFIED_ROLE_ID."
ROLE_ADD_FAILED_MESSAGE = "Error while adding the role: {error}"
KICK_FAILED_MESSAGE = "Error while kicking the member: {error}"
KICK_CANCELLED_MESSAGE = "The kick was cancelled before it ran."
UNEXPECTED_ERROR_MESSAGE = "Error: {error}"

REJECTION_DM = "You have been rejected from the server and are about to be removed."
REJECTION_NOTICE = "**REJECTED:** {tag} will be removed from the server."
WELCOME_MESSAGE = "**Welcome** {mention}!"

ACCEPT_CONFIRMATION = "**{mention} was accepted and received the role.**"
REJECT_CONFIRMATION = "{mention} was rejected and kicked.{dm_status}"
DM_STATUS_SENT = " (DM + message sent)"
DM_STATUS_FAILED = " (channel message only)"


# =============================================================================
# Verification Service
# =============================================================================

class VerificationService:
    """
    Review card posting and decision handling.

    Attributes:
        bot: The bot, used to resolve channels.
        config: Immutable bot configuration.
        scheduler: Runs the pre-kick wait and confirmation cleanup.
    """

    def __init__(
        self,
        bot: "GatekeepBot",
        config: Config,
        scheduler: Optional[TaskScheduler] = None,
    ) -> None:
        self.bot = bot
        self.config = config
        self.scheduler = scheduler or TaskScheduler()

    # =========================================================================
    # Channel Resolution
    # =========================================================================

    async def _get_channel(self, channel_id: Optional[int]) -> Optional[discord.abc.Messageable]:
        """Resolve a messageable channel by id from cache, then the API."""
        if not channel_id:
            return None

        channel = self.bot.get_channel(channel_id)
        if channel is None:
            try:
                channel = await self.bot.fetch_channel(channel_id)
            except discord.HTTPException as e:
                logger.warning("Channel Fetch Failed", [
                    ("Channel ID", str(channel_id)),
                    ("Error", str(e)[:100]),
                ])
                return None

        if not isinstance(channel, discord.abc.Messageable):
            logger.warning("Channel Not Messageable", [
                ("Channel ID", str(channel_id)),
                ("Type", type(channel).__name__),
            ])
            return None
        return channel

    # =========================================================================
    # Review Card
    # =========================================================================

    async def post_review_card(self, member: discord.Member) -> Optional[discord.Message]:
        """
        Post the review card for a member who just joined.

        Returns:
            The posted message, or None if the review channel is unavailable
            or the post failed.
        """
        channel = await safe_async_operation(
            "Review Channel Lookup",
            self._get_channel(self.config.review_channel_id),
        )
        if channel is None:
            logger.warning("Review Card Skipped: review channel unavailable", [
                ("Member", f"{member} ({member.id})"),
                ("Channel ID", str(self.config.review_channel_id)),
            ])
            return None

        snapshot = MemberSnapshot.from_member(member)
        now = discord.utils.utcnow()
        embed = build_review_embed(snapshot, self.config, now)

        try:
            message = await channel.send(embed=embed, view=ReviewCardView(member.id))
        except discord.HTTPException as e:
            logger.error("Review Card Post Failed", [
                ("Member", f"{member} ({member.id})"),
                ("Error", str(e)[:100]),
            ])
            return None

        logger.tree("Review Card Posted", [
            ("Member", f"{snapshot.tag} ({snapshot.id})"),
            ("Account Age", format_age(account_age_days(snapshot.created_at, now))),
            ("Message ID", str(message.id)),
        ], emoji="🛂")
        return message

    # =========================================================================
    # Decision Entry Point
    # =========================================================================

    async def handle_decision(
        self,
        interaction: discord.Interaction,
        custom_id: Optional[str],
    ) -> DecisionState:
        """
        Apply the decision encoded in a clicked button.

        Never raises: unexpected errors are logged and answered with a single
        private error reply if the click has not been answered yet.

        Args:
            interaction: The component interaction.
            custom_id: The clicked button's custom id.

        Returns:
            The state the decision ended in.
        """
        replier = InteractionReplier(interaction)
        progress = DecisionProgress()

        try:
            token = decode_token(custom_id)
            if token is None:
                logger.debug(f"Decision ignored: unrecognized custom id {custom_id!r}")
                return DecisionState.IGNORED

            state = await self._run_decision(
                replier, progress, interaction, token.action, token.member_id,
            )

        except Exception as e:
            logger.error("Verification Decision Failed", [
                ("Custom ID", str(custom_id)),
                ("Actor", f"{interaction.user} ({interaction.user.id})"),
                ("Reached", progress.state.value),
                ("Error Type", type(e).__name__),
                ("Error", str(e)[:200]),
            ])
            if not replier.replied:
                await replier.safe_reply(UNEXPECTED_ERROR_MESSAGE.format(error=str(e) or "unknown"))
            state = DecisionState.FAILED

        return state

    async def _run_decision(
        self,
        replier: InteractionReplier,
        progress: DecisionProgress,
        interaction: discord.Interaction,
        action: DecisionAction,
        member_id: int,
    ) -> DecisionState:
        actor = interaction.user
        guild = interaction.guild

        # -----------------------------------------------------------------
        # Authorized
        # -----------------------------------------------------------------
        if guild is None or not member_has_verification_permission(actor, self.config):
            logger.warning("Verification Permission Denied", [
                ("Actor", f"{actor} ({actor.id})"),
                ("Action", action.value),
                ("Target ID", str(member_id)),
            ])
            await replier.reply(DENIED_MESSAGE.format(
                required=required_roles_text(self.config.reviewer_role_ids),
            ))
            return DecisionState.DENIED

        progress.state = DecisionState.AUTHORIZED
        await replier.acknowledge()

        # -----------------------------------------------------------------
        # Target Resolved
        # -----------------------------------------------------------------
        target = await self._fetch_member(guild, member_id)
        if target is None:
            logger.warning("Verification Target Missing", [
                ("Actor", f"{actor} ({actor.id})"),
                ("Target ID", str(member_id)),
            ])
            await replier.reply(TARGET_NOT_FOUND_MESSAGE)
            return DecisionState.FAILED

        progress.state = DecisionState.TARGET_RESOLVED

        # -----------------------------------------------------------------
        # Applied
        # -----------------------------------------------------------------
        if action is DecisionAction.ACCEPT:
            outcome = await self._accept(replier, guild, target, actor)
        else:
            outcome = await self._reject(replier, target, actor)

        if outcome is None:
            return DecisionState.FAILED

        progress.state = DecisionState.APPLIED

        # -----------------------------------------------------------------
        # Notified (reject notifies before the kick)
        # -----------------------------------------------------------------
        if action is DecisionAction.ACCEPT:
            await safe_async_operation("Welcome Message", self._post_welcome(target))

        progress.state = DecisionState.NOTIFIED

        # -----------------------------------------------------------------
        # Logged
        # -----------------------------------------------------------------
        await safe_async_operation("Audit Log", self._post_audit_log(outcome))

        progress.state = DecisionState.LOGGED

        # -----------------------------------------------------------------
        # Confirmed
        # -----------------------------------------------------------------
        await self._confirm(replier, interaction, outcome)

        progress.state = DecisionState.CONFIRMED

        details = [
            ("Action", action.value),
            ("Target", f"{target} ({target.id})"),
            ("Reviewer", f"{actor} ({actor.id})"),
        ]
        if action is DecisionAction.ACCEPT:
            details.append(("Role", str(outcome.role_name)))
            logger.tree("Member Accepted", details, emoji="✅")
        else:
            details.append(("DM Sent", "Yes" if outcome.dm_sent else "No"))
            logger.tree("Member Rejected", details, emoji="👢")
        return DecisionState.CONFIRMED

    # =========================================================================
    # Target / Role Resolution
    # =========================================================================

    async def _fetch_member(self, guild: discord.Guild, member_id: int) -> Optional[discord.Member]:
        try:
            return await guild.fetch_member(member_id)
        except discord.NotFound:
            return None
        except discord.HTTPException as e:
            logger.warning("Member Fetch Failed", [
                ("Member ID", str(member_id)),
                ("Error", str(e)[:100]),
            ])
            return None

    async def _get_verified_role(self, guild: discord.Guild) -> Optional[discord.Role]:
        role = guild.get_role(self.config.verified_role_id)
        if role is not None:
            return role
        try:
            roles = await guild.fetch_roles()
        except discord.HTTPException as e:
            logger.warning("Role Fetch Failed", [
                ("Role ID", str(self.config.verified_role_id)),
                ("Error", str(e)[:100]),
            ])
            return None
        return discord.utils.get(roles, id=self.config.verified_role_id)

    # =========================================================================
    # Accept
    # =========================================================================

    async def _accept(
        self,
        replier: InteractionReplier,
        guild: discord.Guild,
        target: discord.Member,
        actor: discord.abc.User,
    ) -> Optional[DecisionOutcome]:
        role = await self._get_verified_role(guild)
        if role is None:
            logger.error("Verified Role Missing", [
                ("Role ID", str(self.config.verified_role_id)),
                ("Guild", f"{guild.name} ({guild.id})"),
            ])
            await replier.reply(ROLE_NOT_FOUND_MESSAGE)
            return None

        try:
            await target.add_roles(role, reason=ACCEPT_REASON)
        except discord.HTTPException as e:
            logger.error("Verified Role Grant Failed", [
                ("Target", f"{target} ({target.id})"),
                ("Role", f"{role.name} ({role.id})"),
                ("Error", str(e)[:100]),
            ])
            await replier.reply(ROLE_ADD_FAILED_MESSAGE.format(error=e))
            return None

        return DecisionOutcome(DecisionAction.ACCEPT, target, actor, role_name=role.name)

    async def _post_welcome(self, target: discord.Member) -> None:
        if not self.config.welcome_channel_id:
            return
        channel = await self._get_channel(self.config.welcome_channel_id)
        if channel is not None:
            await channel.send(WELCOME_MESSAGE.format(mention=target.mention))

    # =========================================================================
    # Reject
    # =========================================================================

    async def _reject(
        self,
        replier: InteractionReplier,
        target: discord.Member,
        actor: discord.abc.User,
    ) -> Optional[DecisionOutcome]:
        dm_sent = await safe_async_operation(
            "Rejection DM", self._send_rejection_dm(target), default=False,
        )
        await safe_async_operation("Rejection Notice", self._post_rejection_notice(target))

        kick = self.scheduler.schedule(
            REJECT_KICK_DELAY,
            lambda: target.kick(reason=KICK_REASON),
            name=f"Kick {target.id}",
        )
        try:
            await kick.wait()
        except discord.HTTPException as e:
            logger.error("Verification Kick Failed", [
                ("Target", f"{target} ({target.id})"),
                ("Error", str(e)[:100]),
            ])
            await replier.reply(KICK_FAILED_MESSAGE.format(error=e))
            return None
        except asyncio.CancelledError:
            if not kick.cancelled:
                raise
            logger.warning("Verification Kick Cancelled", [
                ("Target", f"{target} ({target.id})"),
            ])
            await replier.reply(KICK_CANCELLED_MESSAGE)
            return None

        return DecisionOutcome(DecisionAction.REJECT, target, actor, dm_sent=dm_sent)

    async def _send_rejection_dm(self, target: discord.Member) -> bool:
        try:
            await target.send(REJECTION_DM)
            return True
        except discord.HTTPException as e:
            logger.debug(f"Rejection DM not delivered to {target.id}: {e}")
            return False

    async def _post_rejection_notice(self, target: discord.Member) -> None:
        channel = await self._get_channel(self.config.review_channel_id)
        if channel is not None:
            await channel.send(REJECTION_NOTICE.format(tag=target))

    # =========================================================================
    # Audit Log
    # =========================================================================

    def build_audit_embed(self, outcome: DecisionOutcome) -> discord.Embed:
        target, actor = outcome.target, outcome.actor
        if outcome.action is DecisionAction.ACCEPT:
            title, verb, color = "Member Accepted", "Accepted by", EmbedColors.ACCEPTED
            extra = f"**Role given:** {outcome.role_name}"
        else:
            title, verb, color = "Member Rejected", "Rejected by", EmbedColors.REJECTED
            extra = f"**DM sent:** {'Yes' if outcome.dm_sent else 'No'}"

        return discord.Embed(
            title=title,
            description=(
                f"**Member:** {target.mention} ({target})\n"
                f"**{verb}:** {actor.mention} ({actor})\n"
                f"{extra}"
            ),
            color=color,
            timestamp=discord.utils.utcnow(),
        )

    async def _post_audit_log(self, outcome: DecisionOutcome) -> None:
        if not self.config.audit_channel_id:
            return
        channel = await self._get_channel(self.config.audit_channel_id)
        if channel is not None:
            await channel.send(embed=self.build_audit_embed(outcome))

    # =========================================================================
    # Confirmation
    # =========================================================================

    async def _confirm(
        self,
        replier: InteractionReplier,
        interaction: discord.Interaction,
        outcome: DecisionOutcome,
    ) -> None:
        try:
            await interaction.edit_original_response(view=None)
        except discord.HTTPException as e:
            # Card already edited or deleted
            logger.debug(f"Review card controls not removed: {e}")

        if outcome.action is DecisionAction.ACCEPT:
            content = ACCEPT_CONFIRMATION.format(mention=outcome.target.mention)
        else:
            content = REJECT_CONFIRMATION.format(
                mention=outcome.target.mention,
                dm_status=DM_STATUS_SENT if outcome.dm_sent else DM_STATUS_FAILED,
            )

        message = await replier.reply(content, ephemeral=False)
        if message is not None:
            self.scheduler.schedule(
                CONFIRMATION_DELETE_DELAY,
                lambda: self._delete_quietly(message),
                name=f"Delete Confirmation {message.id}",
            )

    async def _delete_quietly(self, message: discord.abc.Snowflake) -> None:
        try:
            await message.delete()
        except discord.HTTPException as e:
            logger.debug(f"Confirmation already gone: {e}")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def shutdown(self, timeout: float = SHUTDOWN_DRAIN_TIMEOUT) -> int:
        """
        Let pending kicks and confirmation deletions run before closing.

        Returns:
            Number of delayed actions still pending after ``timeout``.
        """
        pending = await self.scheduler.drain(timeout=timeout)
        if pending:
            logger.warning("Delayed Work Still Pending At Shutdown", [
                ("Pending", str(pending)),
                ("Waited", f"{timeout}s"),
            ])
        return pending


__all__ = [
    "DecisionState",
    "DecisionOutcome",
    "DecisionProgress",
    "VerificationService",
]
