"""Inbound payload parsing and field extraction."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from discorder.relay.models import InboundEvent, ParseResult

EVENT_HEADER = "X-GitHub-Event"
UNKNOWN_EVENT = "unknown"
REQUIRED_FIELDS = ("sender", "repository")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unexpected token {name} in JSON")


def parse_body(body: Any) -> ParseResult:
    """Turn a request body into a payload.

    Mappings (e.g. decoded form posts) are used as-is. Text and bytes are
    decoded as JSON; a JSON document that is itself a string is decoded a
    second time, since some senders double-encode. An empty body yields an
    empty payload.
    """
    if isinstance(body, Mapping):
        return ParseResult(payload=dict(body))
    if not body:
        return ParseResult()

    try:
        if isinstance(body, (bytes, bytearray)):
            body = body.decode("utf-8")
        parsed = json.loads(body, parse_constant=_reject_constant)
        if isinstance(parsed, str):
            parsed = json.loads(parsed, parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError) as e:
        return ParseResult(error=str(e))

    if parsed is None:
        parsed = {}
    return ParseResult(payload=parsed)


def _is_present(value: Any) -> bool:
    # Empty objects and lists count as present; empty strings, zero and null do not
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


def has_required_fields(payload: Any) -> bool:
    if not isinstance(payload, dict):
        return False
    return all(_is_present(payload.get(name)) for name in REQUIRED_FIELDS)


def received_keys(payload: Any) -> list[str]:
    if isinstance(payload, dict):
        return list(payload.keys())
    return []


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _optional_text(value: Any) -> str | None:
    return None if value is None else str(value)


def extract_event(payload: dict[str, Any], headers: Mapping[str, str]) -> InboundEvent:
    """Build an InboundEvent from a validated payload and request headers.

    ``headers`` should be case-insensitive (aiohttp's ``CIMultiDictProxy``).
    Raises AttributeError if ``sender`` or ``repository`` is not an object.
    """
    # Missing nested fields render empty; a non-object sender or repository
    # raises here and is answered by the handler's server-error guard.
    sender = payload["sender"]
    repository = payload["repository"]
    return InboundEvent(
        sender_login=_text(sender.get("login")),
        sender_avatar_url=_optional_text(sender.get("avatar_url")),
        repository_name=_text(repository.get("name")),
        repository_full_name=_text(repository.get("full_name")),
        event_kind=headers.get(EVENT_HEADER) or UNKNOWN_EVENT,
    )
