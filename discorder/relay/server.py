"""Relay HTTP server using aiohttp."""

from __future__ import annotations

from aiohttp import web

from discorder.config import Settings
from discorder.relay.delivery import DiscordWebhookClient
from discorder.relay.handler import RelayHandler
from discorder.utils.logging import get_logger

log = get_logger(__name__)


class RelayServer:
    """Serves the relay handler on a single path for every HTTP method."""

    def __init__(self, settings: Settings, handler: RelayHandler | None = None) -> None:
        self._settings = settings
        self._handler = handler or RelayHandler(
            settings.relay_config(),
            DiscordWebhookClient(timeout=settings.delivery_timeout),
        )
        self._runner: web.AppRunner | None = None

    @property
    def path(self) -> str:
        path = self._settings.server.path
        return path if path.startswith("/") else f"/{path}"

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> None:
        if not self._settings.discord_webhook_url:
            log.warning(
                "relay_webhook_url_missing",
                msg="DISCORD_WEBHOOK_URL is not set; POST requests will fail with 500.",
            )
        app = self._build_app()
        self._runner = web.AppRunner(app)
        await self._runner.setup()
        server = self._settings.server
        site = web.TCPSite(self._runner, server.bind, server.port)
        await site.start()
        log.info(
            "relay_server_started",
            bind=server.bind,
            port=server.port,
            path=self.path,
        )

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
        await self._handler.close()
        log.info("relay_server_stopped")

    # ------------------------------------------------------------------
    # App construction
    # ------------------------------------------------------------------

    def _build_app(self) -> web.Application:
        app = web.Application(client_max_size=self._settings.server.client_max_size)
        app.router.add_route("*", self.path, self._handler.handle)
        return app
