"""Tests for the Discord webhook client."""

import json

import httpx

from discorder.relay.models import OutboundMessage


MESSAGE = OutboundMessage(content=":taco: hi :taco:", image_url="http://x/a.png")


class TestDiscordWebhookClient:
    async def test_posts_json_payload(self, discord, discord_client, webhook_url):
        result = await discord_client.send(webhook_url, MESSAGE)

        assert result.ok
        assert result.status_code == 204
        assert discord.call_count == 1
        request = discord.requests[0]
        assert request.method == "POST"
        assert str(request.url) == webhook_url
        assert json.loads(request.content) == {
            "content": ":taco: hi :taco:",
            "embeds": [{"image": {"url": "http://x/a.png"}}],
        }

    async def test_any_2xx_is_success(self, discord, discord_client, webhook_url):
        discord.status = 200
        result = await discord_client.send(webhook_url, MESSAGE)
        assert result.ok
        assert result.status_code == 200

    async def test_non_2xx_is_failure(self, discord, discord_client, webhook_url):
        discord.status = 400
        result = await discord_client.send(webhook_url, MESSAGE)
        assert not result.ok
        assert result.status_code == 400
        assert result.error == "Request failed with status code 400"

    async def test_error_does_not_leak_webhook_token(self, discord, discord_client, webhook_url):
        discord.status = 404
        result = await discord_client.send(webhook_url, MESSAGE)
        assert "token-abc" not in result.error

    async def test_network_error(self, discord, discord_client, webhook_url):
        discord.error = httpx.ConnectError("connection refused")
        result = await discord_client.send(webhook_url, MESSAGE)
        assert not result.ok
        assert result.status_code is None
        assert result.error == "connection refused"

    async def test_no_retry(self, discord, discord_client, webhook_url):
        discord.status = 503
        await discord_client.send(webhook_url, MESSAGE)
        assert discord.call_count == 1

    async def test_close_is_idempotent(self, discord_client):
        await discord_client.close()
        await discord_client.close()

    async def test_malformed_url_is_a_delivery_failure(self, discord, discord_client):
        result = await discord_client.send("http://[invalid", MESSAGE)
        assert not result.ok
        assert result.error
        assert discord.call_count == 0
