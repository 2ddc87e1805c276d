"""Relay request handler: one inbound GitHub webhook in, one Discord message out."""

from __future__ import annotations

import json
import traceback
from typing import Any

from aiohttp import web

from discorder.config import RelayConfig
from discorder.relay.delivery import DiscordWebhookClient
from discorder.relay.formatting import MESSAGE_RULES, MessageRule, format_message
from discorder.relay.models import ParseResult
from discorder.relay.parsing import (
    extract_event,
    has_required_fields,
    parse_body,
    received_keys,
)
from discorder.utils.logging import get_logger

log = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": (
        "X-CSRF-Token, X-Requested-With, Accept, Accept-Version, Content-Length, "
        "Content-MD5, Content-Type, Date, X-Api-Version"
    ),
}

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


class RelayHandler:
    """Handles every method on the relay endpoint."""

    def __init__(
        self,
        config: RelayConfig,
        client: DiscordWebhookClient | None = None,
        rules: tuple[MessageRule, ...] = MESSAGE_RULES,
    ) -> None:
        self._config = config
        self._client = client or DiscordWebhookClient()
        self._rules = rules

    async def handle(self, request: web.Request) -> web.Response:
        try:
            response = await self._dispatch(request)
        except web.HTTPException as e:
            log.warning("relay_http_error", status=e.status, reason=e.reason)
            response = web.json_response({"error": e.reason}, status=e.status)
        except Exception as e:
            log.exception("relay_unhandled_error", error=str(e))
            response = self._server_error(e)
        response.headers.update(CORS_HEADERS)
        return response

    async def close(self) -> None:
        await self._client.close()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    async def _dispatch(self, request: web.Request) -> web.Response:
        if request.method == "OPTIONS":
            return web.Response(status=200)

        log.info(
            "relay_request_received",
            method=request.method,
            path=request.path,
            headers=sorted(request.headers.keys()),
        )

        if request.method == "GET":
            return self._status()
        if request.method == "POST":
            return await self._relay(request)
        return web.json_response(
            {"error": f"Method {request.method} not allowed"}, status=405
        )

    def _status(self) -> web.Response:
        return web.json_response(
            {
                "message": "Discord webhook endpoint is ready!",
                "usage": (
                    "Send a POST request with GitHub webhook payload "
                    "to trigger a Discord message."
                ),
                "environment": {
                    "nodeEnv": self._config.environment or None,
                    "hasWebhookUrl": self._config.has_webhook_url,
                },
            }
        )

    # ------------------------------------------------------------------
    # POST pipeline
    # ------------------------------------------------------------------

    async def _read_body(self, request: web.Request) -> ParseResult:
        if request.content_type in FORM_CONTENT_TYPES:
            form = await request.post()
            log.debug("relay_body_read", body_type="form")
            return parse_body({key: form[key] for key in form.keys()})
        raw = await request.read()
        log.debug("relay_body_read", body_type="raw", size=len(raw))
        return parse_body(raw)

    async def _relay(self, request: web.Request) -> web.Response:
        parsed = await self._read_body(request)
        if not parsed.ok:
            log.warning("relay_invalid_json", error=parsed.error)
            return web.json_response(
                {"error": "Invalid JSON in request body", "details": parsed.error},
                status=400,
            )

        payload: Any = parsed.payload
        log.debug("relay_payload", preview=json.dumps(payload, default=str)[:500])

        if not has_required_fields(payload):
            log.warning("relay_invalid_payload", keys=received_keys(payload))
            return web.json_response(
                {
                    "error": "Invalid webhook payload. Missing sender or repository data.",
                    "receivedBodyKeys": received_keys(payload),
                },
                status=400,
            )

        event = extract_event(payload, request.headers)
        log.info(
            "relay_event",
            event_kind=event.event_kind,
            username=event.sender_login,
            repo=event.repository_full_name,
        )

        if not self._config.has_webhook_url:
            log.error("relay_webhook_url_missing")
            return web.json_response(
                {"error": "Server configuration error: Discord webhook URL not set"},
                status=500,
            )

        message = format_message(event, self._rules)
        result = await self._client.send(self._config.webhook_url, message)
        if not result.ok:
            return web.json_response(
                {"error": "Failed to send message to Discord", "details": result.error},
                status=500,
            )

        log.info("relay_message_sent", event_kind=event.event_kind)
        return web.Response(status=204)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _server_error(self, exc: Exception) -> web.Response:
        body: dict[str, Any] = {
            "error": "Server error",
            "message": str(exc) or repr(exc),
        }
        if self._config.is_development:
            body["stack"] = "".join(
                traceback.format_exception(type(exc), exc, exc.__traceback__)
            )
        return web.json_response(body, status=500)
