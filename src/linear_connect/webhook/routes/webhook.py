"""Inbound conversation webhook."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from linear_connect.common.logging import get_logger
from linear_connect.processing import EventProcessor, RelayError, get_processor

log = get_logger(__name__)

router = APIRouter(tags=["webhooks"])


@router.post("/{account_id}")
async def conversation_webhook(
    account_id: str,
    request: Request,
    processor: EventProcessor = Depends(get_processor),
):
    """Relay an Intercom conversation event into a Linear issue."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None
    if not isinstance(payload, dict):
        raise RelayError("Processing failed: body must be a JSON object")

    try:
        result = await processor.process(account_id, payload)
    except RelayError:
        raise
    except Exception as exc:
        log.exception("webhook_processing_error", account_id=account_id)
        raise RelayError(f"Processing failed: {type(exc).__name__}") from exc

    return result.body
