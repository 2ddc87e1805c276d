"""Event kind to chat message formatting."""

from __future__ import annotations

from dataclasses import dataclass

from discorder.relay.models import InboundEvent, OutboundMessage


@dataclass(frozen=True)
class MessageRule:
    event_kind: str | None  # None matches any event
    template: str

    def matches(self, event_kind: str) -> bool:
        return self.event_kind is None or self.event_kind == event_kind


# Evaluated in order, first match wins; the catch-all must stay last.
MESSAGE_RULES: tuple[MessageRule, ...] = (
    MessageRule("push", ":arrow_up: {username} pushed to {full_repo_name}! :code:"),
    MessageRule("issues", ":bookmark: {username} opened an issue on {full_repo_name}! :pencil:"),
    MessageRule(None, ":star: {username} starred {full_repo_name}! :rocket:"),
)

DECORATION = ":taco: {content} :taco:"


def select_rule(
    event_kind: str, rules: tuple[MessageRule, ...] = MESSAGE_RULES
) -> MessageRule:
    for rule in rules:
        if rule.matches(event_kind):
            return rule
    raise LookupError(f"No message rule matches event {event_kind!r}")


def format_message(
    event: InboundEvent, rules: tuple[MessageRule, ...] = MESSAGE_RULES
) -> OutboundMessage:
    """Render the decorated Discord message for an inbound event."""
    rule = select_rule(event.event_kind, rules)
    content = rule.template.format(
        username=event.sender_login,
        full_repo_name=event.repository_full_name,
    )
    return OutboundMessage(
        content=DECORATION.format(content=content),
        image_url=event.sender_avatar_url,
    )
