"""
Gatekeep - Status Server
========================

HTTP status endpoints for uptime monitors.

DESIGN:
    A small aiohttp application served from the bot's own event loop.
    It reports whether the Discord client is connected without exposing
    anything sensitive:

    - GET /        -> status, bot tag, uptime (ms), message
    - GET /health  -> {"status": "healthy", "timestamp": ...}
"""

from datetime import datetime, timezone
from typing import Optional, TYPE_CHECKING

from aiohttp import web

from src.core.logger import logger
from src.core.constants import MS_PER_SECOND, STATUS_MESSAGE

if TYPE_CHECKING:
    from src.bot import GatekeepBot


# =============================================================================
# Status Server
# =============================================================================

class StatusServer:
    """
    HTTP status server for monitoring.

    Attributes:
        bot: Bot instance queried for tag and uptime.
        port: Port number for the HTTP server.
        app: aiohttp Application instance.
        runner: aiohttp AppRunner, set once started.
    """

    def __init__(self, bot: "GatekeepBot", port: int) -> None:
        self.bot = bot
        self.port = port
        self.app = web.Application()
        self.runner: Optional[web.AppRunner] = None

        self.app.router.add_get("/", self.status_handler)
        self.app.router.add_get("/health", self.health_handler)

    # =========================================================================
    # Request Handlers
    # =========================================================================

    def _uptime_ms(self) -> int:
        ready_at = getattr(self.bot, "ready_at", None)
        if ready_at is None:
            return 0
        elapsed = datetime.now(timezone.utc) - ready_at
        return int(elapsed.total_seconds() * MS_PER_SECOND)

    async def status_handler(self, request: web.Request) -> web.Response:
        """Report bot identity and uptime."""
        user = self.bot.user
        return web.json_response({
            "status": "online",
            "bot": str(user) if user else "Connecting...",
            "uptime": self._uptime_ms(),
            "message": STATUS_MESSAGE,
        })

    async def health_handler(self, request: web.Request) -> web.Response:
        """Liveness check."""
        logger.debug("Health check served")
        return web.json_response({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        })

    # =========================================================================
    # Lifecycle Management
    # =========================================================================

    async def start(self) -> None:
        """
        Start serving on 0.0.0.0.

        Startup failures are logged and do not stop the bot.
        """
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, "0.0.0.0", self.port)
            await site.start()

            logger.tree("Status Server Started", [
                ("Port", str(self.port)),
                ("Endpoints", "/, /health"),
            ], emoji="🏥")

        except OSError as e:
            logger.error("Status Server Startup Failed", [
                ("Port", str(self.port)),
                ("Error", str(e)[:100]),
            ])

    async def stop(self) -> None:
        """Stop the server. Safe to call if it never started."""
        if self.runner:
            await self.runner.cleanup()
            self.runner = None
            logger.info("Status server stopped")


# =============================================================================
# Module Export
# =============================================================================

__all__ = ["StatusServer"]
