"""Per-account integration settings."""

from __future__ import annotations

from abc import ABC, abstractmethod

from linear_connect.common.logging import get_logger
from linear_connect.common.models import IntegrationConfig

log = get_logger(__name__)


class IntegrationRegistry(ABC):
    """Maps an account id to its integration settings.

    Swap the in-memory implementation for a durable one without touching
    the event processor.
    """

    @abstractmethod
    async def set(self, account_id: str, config: IntegrationConfig) -> bool:
        """Store ``config`` (full overwrite).  Returns True if one existed before."""

    @abstractmethod
    async def get(self, account_id: str) -> IntegrationConfig | None:
        """Return the account's settings, or None when none are stored."""

    @abstractmethod
    async def count(self) -> int:
        """Number of accounts with settings."""


class InMemoryIntegrationRegistry(IntegrationRegistry):
    """Process-lifetime registry; nothing survives a restart."""

    def __init__(self) -> None:
        self._configs: dict[str, IntegrationConfig] = {}

    async def set(self, account_id: str, config: IntegrationConfig) -> bool:
        existed = account_id in self._configs
        self._configs[account_id] = config
        log.info("integration_stored", account_id=account_id, replaced=existed)
        return existed

    async def get(self, account_id: str) -> IntegrationConfig | None:
        return self._configs.get(account_id)

    async def count(self) -> int:
        return len(self._configs)


_registry: IntegrationRegistry | None = None


def get_registry() -> IntegrationRegistry:
    """Get the process-wide registry singleton."""
    global _registry
    if _registry is None:
        _registry = InMemoryIntegrationRegistry()
    return _registry


def reset_registry() -> None:
    global _registry
    _registry = None
