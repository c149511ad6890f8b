"""
Gatekeep - Main Bot Class
=========================

Discord client for member verification.

Features:
- Review card with Accept / Reject buttons for every joining member
- Persistent decision buttons that survive restarts
- /verifperms permission self-check
- HTTP status endpoint
"""

from datetime import datetime, timezone
from typing import Optional

import discord
from discord.ext import commands

from src.core.config import Config
from src.core.health import StatusServer
from src.core.logger import logger
from src.services.verification import VerificationService


# =============================================================================
# GatekeepBot Class
# =============================================================================

class GatekeepBot(commands.Bot):
    """
    Main Discord bot class.

    DESIGN: Central orchestrator that:
    - Holds the immutable Config and hands it to every service and cog
    - Routes member joins and button clicks to the VerificationService
    - Owns the status server lifecycle

    SERVICE INITIALIZATION ORDER:
    1. __init__: VerificationService, StatusServer
    2. setup_hook (before on_ready):
       - Status server start
       - Command / event cog loading
       - Persistent button registration
       - Command tree syncing
    3. on_ready: ready timestamp for uptime reporting
    """

    # =========================================================================
    # Initialization
    # =========================================================================

    def __init__(self, config: Config) -> None:
        self.config = config

        intents = discord.Intents.default()
        intents.members = True

        super().__init__(
            command_prefix=commands.when_mentioned,
            intents=intents,
            help_command=None,
        )

        self.ready_at: Optional[datetime] = None
        self.verification_service: Optional[VerificationService] = VerificationService(self, config)
        self.status_server: StatusServer = StatusServer(self, config.port)

        self._ready_initialized: bool = False

        logger.info("Bot Instance Created")

    # =========================================================================
    # Setup Hook
    # =========================================================================

    async def setup_hook(self) -> None:
        """Start the status server, load cogs and sync commands before on_ready."""
        await self.status_server.start()

        from src.commands import COMMAND_COGS
        for cog in COMMAND_COGS:
            try:
                await self.load_extension(cog)
                logger.info(f"Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Cog", [("Cog", cog), ("Error", str(e))])

        from src.events import EVENT_COGS
        for cog in EVENT_COGS:
            try:
                await self.load_extension(cog)
                logger.debug(f"Event Cog Loaded: {cog.split('.')[-1]}")
            except commands.ExtensionError as e:
                logger.error("Failed to Load Event Cog", [("Cog", cog), ("Error", str(e))])

        from src.services.verification.views import setup_verification_views
        setup_verification_views(self)

        try:
            synced = await self.tree.sync()
            logger.tree("Commands Synced", [("Count", str(len(synced)))], emoji="✅")
        except discord.HTTPException as e:
            logger.error("Command Sync Failed", [("Error", str(e))])

    # =========================================================================
    # On Ready
    # =========================================================================

    async def on_ready(self) -> None:
        """Record the ready time once; reconnects keep the original uptime."""
        if self._ready_initialized:
            logger.info("Bot Reconnected (skipping re-initialization)")
            return

        self._ready_initialized = True
        self.ready_at = datetime.now(timezone.utc)

        if not self.user:
            return

        logger.tree("BOT ONLINE", [
            ("Name", str(self.user)),
            ("ID", str(self.user.id)),
            ("Guilds", str(len(self.guilds))),
            ("Review Channel", str(self.config.review_channel_id)),
            ("Status Server", f"port {self.config.port}"),
        ], emoji="🚀")

    # =========================================================================
    # Shutdown
    # =========================================================================

    async def close(self) -> None:
        """Let pending kicks and deletions finish, then stop the status server."""
        logger.info("Shutting down...")

        if self.verification_service is not None:
            await self.verification_service.shutdown()

        await self.status_server.stop()
        await super().close()
        logger.info("Bot closed")


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["GatekeepBot"]
