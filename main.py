#!/usr/bin/env python3
"""
Gatekeep - Entry Point
======================

Member verification bot: review cards on join, Accept / Reject buttons
for reviewers, and a small HTTP status endpoint.

Environment (see .env.example):
    DISCORD_TOKEN, VERIFY_CHANNEL_ID, VERIFIED_ROLE_ID      required
    WELCOME_CHANNEL_ID, LOG_CHANNEL_ID, PERM_BOT, PORT       optional
"""

import asyncio
import sys

from dotenv import load_dotenv

from src.core.config import ConfigValidationError, load_config, log_config
from src.core.logger import logger


async def main() -> None:
    """
    Load configuration and run the bot until it disconnects.

    Raises:
        SystemExit: If configuration is missing or invalid.
    """
    load_dotenv()

    try:
        config = load_config()
    except ConfigValidationError as e:
        logger.critical(f"[CONFIG] {e}")
        logger.critical("   Set DISCORD_TOKEN, VERIFY_CHANNEL_ID and VERIFIED_ROLE_ID in .env")
        sys.exit(1)

    # Before the bot exists so setup_hook failures reach the webhook
    if config.error_webhook_url:
        logger.set_webhook(config.error_webhook_url)

    log_config(config)

    from src.bot import GatekeepBot

    bot = GatekeepBot(config)
    async with bot:
        await bot.start(config.discord_token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("🛑 Bot stopped by user (Ctrl+C)")
    except Exception as e:
        logger.error("Bot Crashed", [
            ("Location", "main.__main__"),
            ("Error Type", type(e).__name__),
            ("Error", str(e)[:200]),
        ])
        sys.exit(1)
