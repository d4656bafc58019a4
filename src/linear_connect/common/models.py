"""Pydantic domain models shared across the application."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field


# --- Tiers ---

class Tier(StrEnum):
    FREE = "FREE"
    PRO = "PRO"
    ENTERPRISE = "ENTERPRISE"


class AIQuality(StrEnum):
    BASIC = "basic"
    ADVANCED = "advanced"
    PREMIUM = "premium"


class TierDefinition(BaseModel):
    """Limits and AI quality attached to a subscription tier."""

    model_config = ConfigDict(frozen=True)

    ticket_limit: int = Field(ge=0)
    ai_quality: AIQuality


TierTable = Mapping[Tier, TierDefinition]


def build_tier_table(
    free_limit: int = 100,
    pro_limit: int = 1000,
    enterprise_limit: int = 10000,
) -> TierTable:
    """Build the read-only tier → definition table."""
    return MappingProxyType({
        Tier.FREE: TierDefinition(ticket_limit=free_limit, ai_quality=AIQuality.BASIC),
        Tier.PRO: TierDefinition(ticket_limit=pro_limit, ai_quality=AIQuality.ADVANCED),
        Tier.ENTERPRISE: TierDefinition(
            ticket_limit=enterprise_limit, ai_quality=AIQuality.PREMIUM
        ),
    })


DEFAULT_TIERS: TierTable = build_tier_table()


class ChargePolicy(StrEnum):
    """When an event is charged against the account's quota."""

    CHARGE_ON_ATTEMPT = "charge_on_attempt"
    CHARGE_ON_SUCCESS = "charge_on_success"


# --- Account data ---

class IntegrationConfig(BaseModel):
    """Per-account credentials and destination settings."""

    model_config = ConfigDict(frozen=True)

    tracker_token: str
    source_token: str
    destination_team_id: str
    callback_url: str = ""
    display_name: str = ""


class UsageRecord(BaseModel):
    """Usage counter for one account in the current period."""

    count: int = Field(default=0, ge=0)
    tier: Tier = Tier.FREE


# --- Per-event data ---

TOPIC_USER_CREATED = "conversation.user.created"
TOPIC_USER_REPLIED = "conversation.user.replied"

ALLOWED_TOPICS: frozenset[str] = frozenset({TOPIC_USER_CREATED, TOPIC_USER_REPLIED})


class ConversationEvent(BaseModel):
    """An inbound webhook notification from the conversation platform."""

    topic: str
    conversation_id: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping) -> ConversationEvent:
        data = payload.get("data") or {}
        item = (data.get("item") or {}) if isinstance(data, Mapping) else {}
        conversation_id = item.get("id") if isinstance(item, Mapping) else None
        return cls(
            topic=str(payload.get("topic") or ""),
            conversation_id=str(conversation_id) if conversation_id is not None else None,
        )


class ConversationSummary(BaseModel):
    """The structured fields of a fetched conversation used to build a ticket."""

    customer_name: str | None = None
    customer_email: str | None = None
    customer_plan: str | None = None
    subject: str | None = None
    body: str = ""

    @classmethod
    def from_conversation(cls, conversation: Mapping) -> ConversationSummary:
        contacts = (conversation.get("contacts") or {}).get("contacts") or []
        contact = contacts[0] if contacts and isinstance(contacts[0], Mapping) else {}
        attributes = contact.get("custom_attributes")
        if not isinstance(attributes, Mapping):
            attributes = {}
        message = conversation.get("conversation_message") or {}

        return cls(
            customer_name=contact.get("name") or None,
            customer_email=contact.get("email") or None,
            customer_plan=str(attributes["plan"]) if attributes.get("plan") else None,
            subject=message.get("subject") or None,
            body=message.get("body") or "",
        )


class EnhancedTicket(BaseModel):
    """Title and body submitted to the tracker."""

    title: str = Field(max_length=80)
    body: str


class CreatedIssue(BaseModel):
    """The subset of a tracker issue returned to the caller."""

    id: str
    identifier: str
    url: str
    title: str
