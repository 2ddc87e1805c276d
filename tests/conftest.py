"""Shared fixtures: a fake Discord endpoint behind httpx.MockTransport."""

from __future__ import annotations

import httpx
import pytest

from discorder.relay.delivery import DiscordWebhookClient

WEBHOOK_URL = "https://discord.com/api/webhooks/123/token-abc"


@pytest.fixture
def webhook_url():
    return WEBHOOK_URL


class FakeDiscord:
    """Records outbound requests and answers with a fixed status or error."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.status = 204
        self.error: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, json={} if self.status >= 400 else None)

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def discord():
    return FakeDiscord()


@pytest.fixture
async def discord_client(discord):
    client = DiscordWebhookClient(transport=httpx.MockTransport(discord))
    yield client
    await client.close()
