"""Health check endpoint."""

from __future__ import annotations

import time
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request

from linear_connect.reasoning.providers import provider_available
from linear_connect.store import IntegrationRegistry, QuotaLedger, get_ledger, get_registry

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(
    request: Request,
    registry: IntegrationRegistry = Depends(get_registry),
    ledger: QuotaLedger = Depends(get_ledger),
):
    """Liveness plus in-memory store totals."""
    started_at = getattr(request.app.state, "started_at", time.monotonic())
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "integrations": await registry.count(),
        "totalTickets": await ledger.total_count(),
        "aiEnabled": provider_available(),
        "uptime": int(time.monotonic() - started_at),
    }
