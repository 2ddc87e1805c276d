"""Outbound delivery to a Discord incoming webhook."""

from __future__ import annotations

import httpx

from discorder.relay.models import DeliveryResult, OutboundMessage
from discorder.utils.logging import get_logger

log = get_logger(__name__)


class DiscordWebhookClient:
    """Posts messages to a Discord incoming webhook. One attempt, no retry."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    def _client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._http_client

    async def send(self, url: str, message: OutboundMessage) -> DeliveryResult:
        log.info("discord_delivery_started")
        try:
            resp = await self._client().post(url, json=message.to_payload())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            detail = str(e) or type(e).__name__
            log.error("discord_delivery_failed", error=detail)
            return DeliveryResult(error=detail)

        if not resp.is_success:
            log.error(
                "discord_delivery_rejected",
                status=resp.status_code,
                body=resp.text[:500],
            )
            return DeliveryResult(
                status_code=resp.status_code,
                error=f"Request failed with status code {resp.status_code}",
            )

        log.info(
            "discord_delivery_succeeded",
            status=resp.status_code,
            reason=resp.reason_phrase,
        )
        return DeliveryResult(status_code=resp.status_code)

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None
