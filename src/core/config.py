"""
Gatekeep - Configuration Module
===============================

Configuration loaded from environment variables at startup.

DESIGN:
    load_config() reads the environment exactly once and returns a frozen
    Config. The bot, the services and the cogs receive that instance
    explicitly, so nothing in the verification logic reads os.environ.

    Required variables missing or malformed raise ConfigValidationError,
    which main.py turns into a fatal exit.
"""

import os
from dataclasses import dataclass, field
from typing import FrozenSet, Mapping, Optional


# =============================================================================
# Defaults
# =============================================================================

DEFAULT_PORT = 3000
"""Port for the status web server when PORT is unset."""


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Bot configuration loaded from environment variables.

    Attributes:
        discord_token: Discord bot authentication token.
        review_channel_id: Channel where review cards are posted.
        verified_role_id: Role granted when a member is accepted.
        welcome_channel_id: Channel for welcome messages after acceptance.
        audit_channel_id: Channel for verification audit logs.
        reviewer_role_ids: Roles allowed to use the decision buttons.
            Empty means "fall back to Kick Members / Manage Roles".
        port: Port for the status web server.
        error_webhook_url: Discord webhook receiving logger error alerts.
    """

    # -------------------------------------------------------------------------
    # Required
    # -------------------------------------------------------------------------

    discord_token: str
    review_channel_id: int
    verified_role_id: int

    # -------------------------------------------------------------------------
    # Optional: Channels
    # -------------------------------------------------------------------------

    welcome_channel_id: Optional[int] = None
    audit_channel_id: Optional[int] = None

    # -------------------------------------------------------------------------
    # Optional: Permissions
    # -------------------------------------------------------------------------

    reviewer_role_ids: FrozenSet[int] = field(default_factory=frozenset)

    # -------------------------------------------------------------------------
    # Optional: Web / Alerts
    # -------------------------------------------------------------------------

    port: int = DEFAULT_PORT
    error_webhook_url: Optional[str] = None


# =============================================================================
# Embed Colors
# =============================================================================

class EmbedColors:
    """Color palette for verification embeds."""

    NEW_ACCOUNT = 0xFF6B35          # Orange - account younger than a week
    ESTABLISHED_ACCOUNT = 0x0099FF  # Blue - established account

    ACCEPTED = 0x00FF00
    REJECTED = 0xFF0000

    AUTHORIZED = ACCEPTED
    UNAUTHORIZED = REJECTED


# =============================================================================
# Validation
# =============================================================================

class ConfigValidationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


def _parse_int(value: Optional[str], name: str) -> int:
    """
    Parse string to integer with descriptive error handling.

    Raises:
        ConfigValidationError: If value is missing or not a valid integer.
    """
    if not value:
        raise ConfigValidationError(f"Missing required: {name}")
    try:
        return int(value.strip())
    except ValueError:
        raise ConfigValidationError(f"Invalid integer for {name}: {value}")


def _parse_int_optional(value: Optional[str], name: str) -> Optional[int]:
    """
    Parse optional string to integer.

    Unset or blank values yield None; a value that is set but not an
    integer is a configuration error.
    """
    if not value or not value.strip():
        return None
    return _parse_int(value, name)


def _parse_int_set(value: Optional[str], name: str) -> FrozenSet[int]:
    """
    Parse comma-separated string to a frozen set of integers.

    Args:
        value: Comma-separated string of integers (e.g., "123,456,789").
        name: Variable name for error messages.

    Returns:
        Frozen set of parsed integers, empty if input is None or empty.
    """
    if not value:
        return frozenset()
    result = set()
    for part in value.split(","):
        part = part.strip()
        if part:
            result.add(_parse_int(part, name))
    return frozenset(result)


def _validate_url(value: Optional[str], name: str) -> Optional[str]:
    """Validate webhook URL format, ignoring invalid values with a warning."""
    if not value:
        return None
    if not value.startswith(("https://", "http://")):
        from src.core.logger import logger
        logger.warning(f"Config {name} invalid URL format, ignoring")
        return None
    return value


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """
    Load and validate configuration from environment variables.

    DESIGN:
        All required variables are collected before failing so the error
        names every missing one at once.

    Args:
        env: Mapping to read from. Defaults to os.environ.

    Returns:
        Validated, immutable Config.

    Raises:
        ConfigValidationError: If any required variable is missing or invalid.
    """
    if env is None:
        env = os.environ

    missing = [
        name for name in ("DISCORD_TOKEN", "VERIFY_CHANNEL_ID", "VERIFIED_ROLE_ID")
        if not env.get(name)
    ]
    if missing:
        raise ConfigValidationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    port = _parse_int_optional(env.get("PORT"), "PORT")
    if port is None:
        port = DEFAULT_PORT
    elif not 0 < port < 65536:
        raise ConfigValidationError(f"PORT out of range: {port}")

    return Config(
        discord_token=env["DISCORD_TOKEN"],
        review_channel_id=_parse_int(env.get("VERIFY_CHANNEL_ID"), "VERIFY_CHANNEL_ID"),
        verified_role_id=_parse_int(env.get("VERIFIED_ROLE_ID"), "VERIFIED_ROLE_ID"),
        welcome_channel_id=_parse_int_optional(env.get("WELCOME_CHANNEL_ID"), "WELCOME_CHANNEL_ID"),
        audit_channel_id=_parse_int_optional(env.get("LOG_CHANNEL_ID"), "LOG_CHANNEL_ID"),
        reviewer_role_ids=_parse_int_set(env.get("PERM_BOT"), "PERM_BOT"),
        port=port,
        error_webhook_url=_validate_url(env.get("ERROR_WEBHOOK_URL"), "ERROR_WEBHOOK_URL"),
    )


def log_config(config: Config) -> None:
    """Log a startup summary of the loaded configuration."""
    from src.core.logger import logger

    optional_features = []
    if config.welcome_channel_id:
        optional_features.append("Welcome Messages")
    if config.audit_channel_id:
        optional_features.append("Audit Log")
    if config.error_webhook_url:
        optional_features.append("Webhook Alerts")

    logger.tree("Configuration Validated", [
        ("Review Channel", str(config.review_channel_id)),
        ("Verified Role", str(config.verified_role_id)),
        ("Reviewer Roles", ", ".join(str(r) for r in sorted(config.reviewer_role_ids)) or "Kick Members / Manage Roles"),
        ("Optional Features", ", ".join(optional_features) if optional_features else "None"),
        ("Status Port", str(config.port)),
    ], emoji="⚙️")


# =============================================================================
# Module Export
# =============================================================================

__all__ = [
    "Config",
    "ConfigValidationError",
    "EmbedColors",
    "DEFAULT_PORT",
    "load_config",
    "log_config",
]
