"""Webhook event processing."""

from linear_connect.processing.errors import (
    ConfigMissing,
    InvalidTierRequest,
    InvalidTrackerToken,
    IssueCreateError,
    QuotaExceeded,
    RelayError,
    SetupFailed,
    UpstreamFetchError,
)
from linear_connect.processing.processor import (
    EventProcessor,
    EventState,
    ProcessingResult,
    build_note,
    build_title,
    get_processor,
)

__all__ = [
    "ConfigMissing",
    "EventProcessor",
    "EventState",
    "InvalidTierRequest",
    "InvalidTrackerToken",
    "IssueCreateError",
    "ProcessingResult",
    "QuotaExceeded",
    "RelayError",
    "SetupFailed",
    "UpstreamFetchError",
    "build_note",
    "build_title",
    "get_processor",
]
