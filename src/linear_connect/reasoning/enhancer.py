"""Ticket enhancer — turns a support conversation into tracker-ready Markdown.

The completion call is attempted exactly once.  Any failure it raises is
downgraded to a deterministic template built from the same fields, so
callers always receive text.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping

from linear_connect.common.logging import get_logger
from linear_connect.common.models import (
    DEFAULT_TIERS,
    AIQuality,
    ConversationSummary,
    Tier,
    TierTable,
)
from linear_connect.common.settings import get_settings
from linear_connect.reasoning.providers import LLMProvider, get_provider
from linear_connect.reasoning.router import output_budget, select_model

log = get_logger(__name__)

BASIC_SYSTEM = "Create a clear, concise support ticket from this customer conversation."

DETAILED_SYSTEM = (
    "Create a comprehensive, engineer-ready Linear ticket with detailed analysis, "
    "business impact, and specific next steps. Include acceptance criteria and "
    "technical context."
)

USER_TEMPLATE = """CUSTOMER INFO:
Name: {name}
Email: {email}
Plan: {plan}

MESSAGE: {message}

Please create a properly formatted ticket with title, description, and action items."""

FALLBACK_TEMPLATE = """# Customer Issue

**Customer:** {name}
**Email:** {email}

**Issue Description:**
{message}

**Next Steps:**
- [ ] Investigate the issue
- [ ] Contact customer for more details
- [ ] Implement solution
- [ ] Follow up with customer"""


class EnhancementError(Exception):
    """The completion call failed or produced no usable text."""


def _fields(summary: ConversationSummary) -> dict[str, str]:
    return {
        "name": summary.customer_name or "Unknown",
        "email": summary.customer_email or "No email",
        "plan": summary.customer_plan or "Unknown",
        "message": summary.body,
    }


def build_prompt(summary: ConversationSummary, quality: AIQuality) -> tuple[str, str]:
    """Return ``(system, user)`` prompt text for the given quality level."""
    system = BASIC_SYSTEM if quality == AIQuality.BASIC else DETAILED_SYSTEM
    return system, USER_TEMPLATE.format(**_fields(summary))


def fallback_body(summary: ConversationSummary) -> str:
    """Templated ticket body used whenever the completion call fails."""
    return FALLBACK_TEMPLATE.format(**_fields(summary))


class TicketEnhancer:
    """Produces a ticket body for a conversation at a tier's AI quality."""

    def __init__(
        self,
        provider_factory: Callable[[], LLMProvider] = get_provider,
        tiers: TierTable = DEFAULT_TIERS,
    ) -> None:
        self._provider_factory = provider_factory
        self._tiers = tiers

    async def enhance(self, conversation: Mapping | ConversationSummary, tier: Tier) -> str:
        """Return formatted ticket text.  Never raises on completion failures."""
        summary = (
            conversation
            if isinstance(conversation, ConversationSummary)
            else ConversationSummary.from_conversation(conversation)
        )
        quality = self._tiers[tier].ai_quality
        log.info("ticket_enhancing", tier=tier.value, quality=quality.value)

        try:
            return await self._complete(summary, quality)
        except Exception as exc:
            log.warning(
                "ticket_enhancement_failed",
                tier=tier.value,
                error_type=type(exc).__name__,
                error=str(exc)[:200],
            )
            return fallback_body(summary)

    async def _complete(self, summary: ConversationSummary, quality: AIQuality) -> str:
        system, user = build_prompt(summary, quality)
        model = select_model(quality)

        provider = self._provider_factory()
        response = await provider.generate(
            model=model,
            messages=[{"role": "user", "content": user}],
            system=system,
            max_tokens=output_budget(quality),
            temperature=get_settings().openai_temperature,
        )

        text = (response.text or "").strip()
        if not text:
            raise EnhancementError(f"{model} returned an empty completion")

        log.info(
            "ticket_enhanced",
            model=response.model or model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )
        return text
