"""Account state stores: integration settings and usage counters."""

from linear_connect.store.ledger import (
    InMemoryQuotaLedger,
    QuotaDecision,
    QuotaLedger,
    get_ledger,
)
from linear_connect.store.registry import (
    InMemoryIntegrationRegistry,
    IntegrationRegistry,
    get_registry,
)

__all__ = [
    "InMemoryIntegrationRegistry",
    "InMemoryQuotaLedger",
    "IntegrationRegistry",
    "QuotaDecision",
    "QuotaLedger",
    "get_ledger",
    "get_registry",
    "reset_stores",
]


def reset_stores() -> None:
    """Drop both process-wide stores (for testing)."""
    from linear_connect.store import ledger, registry

    ledger.reset_ledger()
    registry.reset_registry()
