"""
Gatekeep - Test Fixtures
========================

Shared fixtures for all tests.

Discord objects are MagicMock/AsyncMock stand-ins built with
``spec=`` so isinstance checks against discord.py classes still pass;
embeds, enums and permissions are the real discord.py types.
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

# Keep test log output out of the working tree
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="gatekeep-logs-"))

import discord

from src.core.config import Config
from src.utils.async_utils import TaskScheduler


# =============================================================================
# Constants
# =============================================================================

REVIEW_CHANNEL_ID = 100000000000000001
WELCOME_CHANNEL_ID = 100000000000000002
AUDIT_CHANNEL_ID = 100000000000000003
VERIFIED_ROLE_ID = 200000000000000001
REVIEWER_ROLE_ID = 200000000000000002
TARGET_ID = 300000000000000001
REVIEWER_ID = 300000000000000002

NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


# =============================================================================
# Helpers
# =============================================================================

def make_http_error(cls=discord.HTTPException, status=500, message="Something broke"):
    """Build a discord.py HTTP exception without a real response."""
    response = MagicMock()
    response.status = status
    response.reason = "Error"
    return cls(response, message)


def make_role(role_id, name="Role"):
    role = MagicMock(spec=discord.Role)
    role.id = role_id
    role.name = name
    role.mention = f"<@&{role_id}>"
    role.is_default.return_value = False
    return role


def make_member(
    member_id=TARGET_ID,
    tag="newbie",
    created_at=None,
    roles=None,
    permissions=None,
    flags=(),
):
    """Create a spec'd discord.Member mock."""
    member = MagicMock(spec=discord.Member)
    member.id = member_id
    member.mention = f"<@{member_id}>"
    member.__str__.return_value = tag
    member.created_at = created_at or NOW - timedelta(days=30)
    member.roles = roles or []
    member.guild_permissions = permissions or discord.Permissions.none()
    member.public_flags.all.return_value = list(flags)
    member.display_avatar.url = f"https://cdn.example.com/avatars/{member_id}.png"
    member.guild.id = 987654321
    member.guild.name = "Test Server"
    member.add_roles = AsyncMock()
    member.kick = AsyncMock()
    member.send = AsyncMock()
    return member


def make_channel(channel_id):
    channel = MagicMock(spec=discord.TextChannel)
    channel.id = channel_id
    channel.send = AsyncMock(return_value=MagicMock(id=channel_id + 1000))
    return channel


class FakeResponse:
    """InteractionResponse stand-in that tracks whether it was used."""

    def __init__(self):
        self._done = False
        self.send_message = AsyncMock(side_effect=self._mark_done)
        self.defer = AsyncMock(side_effect=self._mark_done)

    def is_done(self):
        return self._done

    def _mark_done(self, *args, **kwargs):
        self._done = True


def reply_count(interaction):
    """Total replies and follow-ups sent on an interaction."""
    return interaction.response.send_message.await_count + interaction.followup.send.await_count


# =============================================================================
# Config
# =============================================================================

@pytest.fixture
def config():
    return Config(
        discord_token="token",
        review_channel_id=REVIEW_CHANNEL_ID,
        verified_role_id=VERIFIED_ROLE_ID,
        welcome_channel_id=WELCOME_CHANNEL_ID,
        audit_channel_id=AUDIT_CHANNEL_ID,
        reviewer_role_ids=frozenset({REVIEWER_ROLE_ID}),
    )


@pytest.fixture
def minimal_config():
    """Config with no optional channels and no reviewer roles."""
    return Config(
        discord_token="token",
        review_channel_id=REVIEW_CHANNEL_ID,
        verified_role_id=VERIFIED_ROLE_ID,
    )


# =============================================================================
# Discord Objects
# =============================================================================

@pytest.fixture
def channels():
    return {
        REVIEW_CHANNEL_ID: make_channel(REVIEW_CHANNEL_ID),
        WELCOME_CHANNEL_ID: make_channel(WELCOME_CHANNEL_ID),
        AUDIT_CHANNEL_ID: make_channel(AUDIT_CHANNEL_ID),
    }


@pytest.fixture
def mock_bot(channels):
    bot = MagicMock()
    bot.get_channel = MagicMock(side_effect=channels.get)
    bot.fetch_channel = AsyncMock(side_effect=lambda cid: channels[cid])
    return bot


@pytest.fixture
def verified_role():
    return make_role(VERIFIED_ROLE_ID, "Verified")


@pytest.fixture
def target():
    return make_member()


@pytest.fixture
def reviewer():
    return make_member(
        member_id=REVIEWER_ID,
        tag="reviewer",
        roles=[make_role(REVIEWER_ROLE_ID, "Reviewer")],
    )


@pytest.fixture
def guild(target, verified_role):
    guild = MagicMock(spec=discord.Guild)
    guild.id = 987654321
    guild.name = "Test Server"
    guild.fetch_member = AsyncMock(return_value=target)
    guild.get_role = MagicMock(return_value=verified_role)
    guild.fetch_roles = AsyncMock(return_value=[verified_role])
    return guild


@pytest.fixture
def confirmation_message():
    message = MagicMock()
    message.id = 555000
    message.delete = AsyncMock()
    return message


@pytest.fixture
def make_interaction(reviewer, guild, confirmation_message):
    """Factory for button interactions clicked by ``reviewer`` by default."""
    def _create(user=None, interaction_guild=guild):
        interaction = MagicMock()
        interaction.user = user or reviewer
        interaction.guild = interaction_guild
        interaction.response = FakeResponse()
        interaction.followup = MagicMock()
        interaction.followup.send = AsyncMock(return_value=confirmation_message)
        interaction.original_response = AsyncMock(return_value=MagicMock())
        interaction.edit_original_response = AsyncMock()
        return interaction
    return _create


# =============================================================================
# Services
# =============================================================================

@pytest.fixture
def fake_sleep():
    return AsyncMock()


@pytest.fixture
def scheduler(fake_sleep):
    return TaskScheduler(sleep=fake_sleep)


@pytest.fixture
def service(mock_bot, config, scheduler):
    from src.services.verification.service import VerificationService
    return VerificationService(mock_bot, config, scheduler=scheduler)
