"""Relay value models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InboundEvent:
    sender_login: str
    sender_avatar_url: str | None
    repository_name: str
    repository_full_name: str
    event_kind: str = "unknown"


@dataclass(frozen=True)
class OutboundMessage:
    content: str
    image_url: str | None

    def to_payload(self) -> dict[str, Any]:
        """Render the Discord incoming-webhook body.

        A missing image URL leaves the image object empty rather than sending
        an empty string.
        """
        image: dict[str, str] = {}
        if self.image_url is not None:
            image["url"] = self.image_url
        return {
            "content": self.content,
            "embeds": [{"image": image}],
        }


@dataclass
class ParseResult:
    payload: Any = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DeliveryResult:
    status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
