"""
Gatekeep - Cog Tests
====================

Tests for the member-join listener and the /verifperms command.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import discord
import pytest

from src.commands.verifperms import NO_ROLES_TEXT, VerifPermsCog, build_permission_status_embed
from src.core.config import EmbedColors
from src.events.members import MemberEvents
from src.services.verification.permissions import member_has_verification_permission

from tests.conftest import REVIEWER_ROLE_ID, make_member, make_role


def _field(embed, name):
    return next(f for f in embed.fields if f.name == name)


# =============================================================================
# Member Events
# =============================================================================

class TestMemberEvents:
    """Tests for on_member_join."""

    @pytest.mark.asyncio
    async def test_join_posts_review_card(self, target):
        bot = MagicMock()
        bot.verification_service.post_review_card = AsyncMock()

        await MemberEvents(bot).on_member_join(target)

        bot.verification_service.post_review_card.assert_awaited_once_with(target)

    @pytest.mark.asyncio
    async def test_join_before_service_ready(self, target):
        bot = MagicMock()
        bot.verification_service = None

        await MemberEvents(bot).on_member_join(target)


# =============================================================================
# /verifperms
# =============================================================================

class TestPermissionStatusEmbed:
    """Tests for build_permission_status_embed()."""

    def test_authorized_member(self, config, reviewer):
        embed = build_permission_status_embed(reviewer, config)

        assert "Authorized" in embed.description
        assert "Not authorized" not in embed.description
        assert embed.colour.value == EmbedColors.AUTHORIZED
        assert _field(embed, "Required").value == f"<@&{REVIEWER_ROLE_ID}>"
        assert _field(embed, "Your Roles").value == f"<@&{REVIEWER_ROLE_ID}>"

    def test_unauthorized_member_without_roles(self, config):
        embed = build_permission_status_embed(make_member(member_id=7), config)

        assert "Not authorized" in embed.description
        assert embed.colour.value == EmbedColors.UNAUTHORIZED
        assert _field(embed, "Your Roles").value == NO_ROLES_TEXT

    def test_everyone_role_is_hidden(self, config):
        everyone = make_role(1, "@everyone")
        everyone.is_default.return_value = True
        member = make_member(member_id=7, roles=[everyone, make_role(2)])

        assert _field(build_permission_status_embed(member, config), "Your Roles").value == "<@&2>"

    def test_fallback_requirement(self, minimal_config):
        member = make_member(member_id=7, permissions=discord.Permissions(kick_members=True))

        embed = build_permission_status_embed(member, minimal_config)

        assert "Kick Members" in _field(embed, "Required").value
        assert embed.colour.value == EmbedColors.AUTHORIZED


class TestVerifPermsCommand:
    """Tests for the /verifperms slash command."""

    @pytest.mark.asyncio
    async def test_replies_privately(self, config, reviewer):
        bot = MagicMock()
        bot.config = config
        cog = VerifPermsCog(bot)
        interaction = MagicMock()
        interaction.user = reviewer
        interaction.response.send_message = AsyncMock()

        await cog.verifperms.callback(cog, interaction)

        interaction.response.send_message.assert_awaited_once()
        kwargs = interaction.response.send_message.call_args.kwargs
        assert kwargs["ephemeral"] is True
        assert isinstance(kwargs["embed"], discord.Embed)

    @pytest.mark.asyncio
    async def test_permission_checked_once(self, config, reviewer):
        bot = MagicMock()
        bot.config = config
        cog = VerifPermsCog(bot)
        interaction = MagicMock()
        interaction.user = reviewer
        interaction.response.send_message = AsyncMock()

        with patch(
            "src.commands.verifperms.member_has_verification_permission",
            wraps=member_has_verification_permission,
        ) as check:
            await cog.verifperms.callback(cog, interaction)

        check.assert_called_once_with(reviewer, config)
        embed = interaction.response.send_message.call_args.kwargs["embed"]
        assert "✅ Authorized" in embed.description
