"""Webhook event processor.

One call to :meth:`EventProcessor.process` walks a single inbound event
through config lookup, topic filtering, quota admission, conversation
fetch, enhancement, issue creation and the confirmation note.  Rejected
and failed events raise a :class:`RelayError`; every other terminal state
is returned as a :class:`ProcessingResult`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from linear_connect.common.logging import get_logger
from linear_connect.common.models import (
    ALLOWED_TOPICS,
    ChargePolicy,
    ConversationEvent,
    ConversationSummary,
    CreatedIssue,
    EnhancedTicket,
    IntegrationConfig,
    Tier,
)
from linear_connect.integrations import IntegrationError, IntercomClient, LinearClient
from linear_connect.processing.errors import (
    ConfigMissing,
    IssueCreateError,
    QuotaExceeded,
    UpstreamFetchError,
)
from linear_connect.reasoning.enhancer import TicketEnhancer
from linear_connect.store import QuotaDecision, QuotaLedger
from linear_connect.store.registry import IntegrationRegistry

log = get_logger(__name__)

TITLE_MAX_LENGTH = 80


class EventState(StrEnum):
    RECEIVED = "received"
    CONFIGURED = "configured"
    WITHIN_QUOTA = "within_quota"
    FETCHED = "fetched"
    ENHANCED = "enhanced"
    ISSUE_CREATED = "issue_created"
    ANNOTATED = "annotated"
    DONE = "done"
    REJECTED_NO_CONFIG = "rejected_no_config"
    REJECTED_QUOTA = "rejected_quota"
    IGNORED_TOPIC = "ignored_topic"
    FAILED = "failed"


class ProcessingResult(BaseModel):
    """Terminal state of a non-error event plus the body returned to the caller."""

    state: EventState
    body: dict[str, Any] = Field(default_factory=dict)


def build_title(tier: Tier, customer_name: str | None, subject: str | None) -> str:
    """``[TIER] Name - Subject``, cut to the tracker's title ceiling."""
    title = f"[{tier.value}] {customer_name or 'Customer'} - {subject or 'Support Request'}"
    return title[:TITLE_MAX_LENGTH]


def build_note(issue: CreatedIssue, tier: Tier, usage: int, limit: int) -> str:
    """Internal note posted back to the source conversation."""
    return (
        "🤖 **Linear Ticket Created**\n\n"
        f"📋 **Ticket:** {issue.identifier}\n"
        f"🔗 **Link:** {issue.url}\n"
        f"🎯 **AI Enhancement:** {tier.value} tier\n"
        f"📊 **Usage:** {usage}/{limit} tickets this month\n\n"
        "*Automatically generated by Linear Connect*"
    )


class EventProcessor:
    """Relays one conversation event into one tracker issue."""

    def __init__(
        self,
        registry: IntegrationRegistry,
        ledger: QuotaLedger,
        enhancer: TicketEnhancer,
        *,
        charge_policy: ChargePolicy = ChargePolicy.CHARGE_ON_ATTEMPT,
        default_priority: int = 3,
        tracker_factory: Callable[[str], LinearClient] = LinearClient,
        source_factory: Callable[[str], IntercomClient] = IntercomClient,
    ) -> None:
        self.registry = registry
        self.ledger = ledger
        self.enhancer = enhancer
        self.charge_policy = charge_policy
        self.default_priority = default_priority
        self._tracker_factory = tracker_factory
        self._source_factory = source_factory

    async def process(self, account_id: str, payload: Mapping[str, Any]) -> ProcessingResult:
        event = ConversationEvent.from_payload(payload)
        log.info("webhook_received", account_id=account_id, topic=event.topic)

        config = await self.registry.get(account_id)
        if config is None:
            log.warning("integration_not_found", account_id=account_id)
            raise ConfigMissing()

        if event.topic not in ALLOWED_TOPICS:
            log.info("event_ignored", account_id=account_id, topic=event.topic)
            return ProcessingResult(
                state=EventState.IGNORED_TOPIC,
                body={"status": "ignored", "topic": event.topic},
            )

        hold = self.charge_policy is ChargePolicy.CHARGE_ON_SUCCESS
        decision, admitted = await self.ledger.admit(account_id, hold=hold)
        if decision is QuotaDecision.QUOTA_EXCEEDED:
            raise QuotaExceeded()
        tier = admitted.tier

        try:
            issue = await self._relay(config, event, tier)
        except Exception:
            if hold:
                await self.ledger.release(account_id)
            raise

        if hold:
            usage = await self.ledger.commit(account_id)
        else:
            usage = await self.ledger.peek(account_id)
        limit = self.ledger.limit(tier)

        await self._annotate(config, event, issue, tier, usage.count, limit)

        log.info(
            "event_processed",
            account_id=account_id,
            identifier=issue.identifier,
            usage=usage.count,
            limit=limit,
        )
        return ProcessingResult(
            state=EventState.DONE,
            body={
                "success": True,
                "ticket": issue.model_dump(),
                "usage": f"{usage.count}/{limit}",
                "tier": tier.value,
            },
        )

    async def _relay(
        self, config: IntegrationConfig, event: ConversationEvent, tier: Tier
    ) -> CreatedIssue:
        """Fetch → enhance → create under the tier the event was admitted at."""
        conversation = await self._fetch(config, event)
        try:
            summary = ConversationSummary.from_conversation(conversation)
        except (AttributeError, TypeError, ValueError) as exc:
            log.error("conversation_malformed", conversation_id=event.conversation_id)
            raise UpstreamFetchError("Processing failed: malformed conversation payload") from exc

        ticket = EnhancedTicket(
            title=build_title(tier, summary.customer_name, summary.subject),
            body=await self.enhancer.enhance(summary, tier),
        )
        return await self._create_issue(config, ticket)

    async def _fetch(self, config: IntegrationConfig, event: ConversationEvent) -> dict:
        if not event.conversation_id:
            raise UpstreamFetchError("Processing failed: event has no conversation id")

        log.info("conversation_fetching", conversation_id=event.conversation_id)
        try:
            async with self._source_factory(config.source_token) as source:
                return await source.get_conversation(event.conversation_id)
        except IntegrationError as exc:
            log.error(
                "conversation_fetch_failed",
                conversation_id=event.conversation_id,
                status_code=exc.status_code,
                error=exc.detail,
            )
            raise UpstreamFetchError(f"Processing failed: {exc}") from exc

    async def _create_issue(self, config: IntegrationConfig, ticket: EnhancedTicket) -> CreatedIssue:
        try:
            async with self._tracker_factory(config.tracker_token) as tracker:
                raw = await tracker.create_issue(
                    config.destination_team_id,
                    ticket.title,
                    ticket.body,
                    priority=self.default_priority,
                )
        except IntegrationError as exc:
            log.error("issue_create_failed", status_code=exc.status_code, error=exc.detail)
            raise IssueCreateError(f"Processing failed: {exc}") from exc

        issue = CreatedIssue(
            id=str(raw["id"]),
            identifier=str(raw.get("identifier") or ""),
            url=str(raw.get("url") or ""),
            title=str(raw.get("title") or ticket.title),
        )
        log.info("issue_created", identifier=issue.identifier)
        return issue

    async def _annotate(
        self,
        config: IntegrationConfig,
        event: ConversationEvent,
        issue: CreatedIssue,
        tier: Tier,
        usage: int,
        limit: int,
    ) -> None:
        """Best effort: a failed note never changes the outcome."""
        try:
            async with self._source_factory(config.source_token) as source:
                await source.add_note(event.conversation_id, build_note(issue, tier, usage, limit))
        except Exception as exc:
            log.warning(
                "conversation_note_failed",
                conversation_id=event.conversation_id,
                error=str(exc),
            )
            return
        log.info("conversation_note_added", conversation_id=event.conversation_id)


def get_processor() -> EventProcessor:
    """Build a processor over the process-wide stores and settings."""
    from linear_connect.common.settings import get_settings
    from linear_connect.store import get_ledger, get_registry

    settings = get_settings()
    ledger = get_ledger()
    return EventProcessor(
        registry=get_registry(),
        ledger=ledger,
        enhancer=TicketEnhancer(tiers=ledger.tiers),
        charge_policy=settings.charge_policy,
        default_priority=settings.linear_default_priority,
    )
