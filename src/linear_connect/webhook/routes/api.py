"""Dashboard API: integration setup, usage stats, tier changes."""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field

from linear_connect.common.logging import get_logger
from linear_connect.common.models import IntegrationConfig, Tier
from linear_connect.common.settings import get_settings
from linear_connect.integrations import GraphQLError, IntegrationError, LinearClient
from linear_connect.processing.errors import InvalidTierRequest, InvalidTrackerToken, SetupFailed
from linear_connect.store import IntegrationRegistry, QuotaLedger, get_ledger, get_registry
from linear_connect.webhook.guards import require_account

log = get_logger(__name__)

router = APIRouter(tags=["api"])


class SetupRequest(BaseModel):
    linear_token: str = Field(
        validation_alias=AliasChoices("trackerToken", "linearToken"), min_length=1
    )
    intercom_token: str = Field(
        validation_alias=AliasChoices("sourceToken", "intercomToken"), min_length=1
    )
    team_id: str = Field(
        validation_alias=AliasChoices("destinationTeamId", "teamId"), min_length=1
    )


class TierRequest(BaseModel):
    tier: str


def _tracker_client(token: str) -> LinearClient:
    return LinearClient(token)


def _percent(count: int, limit: int) -> int:
    """Usage as a whole percentage, halves rounded up."""
    if limit <= 0:
        return 100
    return (count * 200 + limit) // (2 * limit)


@router.post("/setup")
async def setup_integration(
    body: SetupRequest,
    account_id: str = Depends(require_account),
    registry: IntegrationRegistry = Depends(get_registry),
):
    """Validate the Linear token with a live query, then store the integration."""
    log.info("integration_setup_started", account_id=account_id)

    try:
        async with _tracker_client(body.linear_token) as tracker:
            user = await tracker.viewer()
    except GraphQLError:
        raise InvalidTrackerToken()
    except IntegrationError as exc:
        if exc.status_code in (401, 403):
            raise InvalidTrackerToken() from exc
        log.error("integration_setup_failed", account_id=account_id, error=exc.detail)
        raise SetupFailed(f"Setup failed: {exc.detail}") from exc

    display_name = str(user.get("name") or "")
    webhook_url = f"{get_settings().base_url.rstrip('/')}/webhook/{account_id}"

    await registry.set(
        account_id,
        IntegrationConfig(
            tracker_token=body.linear_token,
            source_token=body.intercom_token,
            destination_team_id=body.team_id,
            callback_url=webhook_url,
            display_name=display_name,
        ),
    )
    log.info("integration_configured", account_id=account_id, linear_user=display_name)

    return {
        "success": True,
        "webhookUrl": webhook_url,
        "accountDisplayName": display_name,
        "message": "Integration configured! Add the webhook URL to your Intercom app settings.",
    }


@router.get("/stats")
async def usage_stats(
    account_id: str = Depends(require_account),
    registry: IntegrationRegistry = Depends(get_registry),
    ledger: QuotaLedger = Depends(get_ledger),
):
    usage = await ledger.peek(account_id)
    config = await registry.get(account_id)
    limit = ledger.limit(usage.tier)

    return {
        "tier": usage.tier.value,
        "usage": usage.count,
        "limit": limit,
        "percentage": _percent(usage.count, limit),
        "hasIntegration": config is not None,
        "displayName": (config.display_name or None) if config else None,
    }


@router.post("/upgrade")
async def change_tier(
    body: TierRequest,
    account_id: str = Depends(require_account),
    ledger: QuotaLedger = Depends(get_ledger),
):
    """Switch the account's tier (usage count is kept)."""
    try:
        tier = Tier(body.tier)
    except ValueError:
        raise InvalidTierRequest()

    await ledger.set_tier(account_id, tier)
    return {"success": True, "tier": tier.value}


@router.get("/test")
async def api_test():
    return {
        "message": f"{get_settings().app_name} API is working!",
        "timestamp": datetime.now(UTC).isoformat(),
        "environment": get_settings().environment,
    }
