"""Per-account usage counters metered against tier limits.

Admission is check-and-increment under a per-account ``asyncio.Lock``:
concurrent events for one account cannot both observe spare headroom for
the same slot, while unrelated accounts never wait on each other.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from enum import StrEnum

from linear_connect.common.logging import get_logger
from linear_connect.common.models import DEFAULT_TIERS, Tier, TierTable, UsageRecord

log = get_logger(__name__)


class QuotaDecision(StrEnum):
    ALLOWED = "allowed"
    QUOTA_EXCEEDED = "quota_exceeded"


class QuotaLedger(ABC):
    """Usage store.  ``count`` never decreases."""

    def __init__(self, tiers: TierTable = DEFAULT_TIERS) -> None:
        self.tiers = tiers

    def limit(self, tier: Tier) -> int:
        return self.tiers[tier].ticket_limit

    @abstractmethod
    async def peek(self, account_id: str) -> UsageRecord:
        """Current usage; unseen accounts read as FREE with count 0."""

    @abstractmethod
    async def admit(
        self, account_id: str, *, hold: bool = False
    ) -> tuple[QuotaDecision, UsageRecord]:
        """Atomically check the limit and take one slot.

        ``hold=False`` charges the slot immediately; ``hold=True`` reserves it
        for a later ``commit`` or ``release``.  Returns the decision with the
        record as seen under the same lock.
        """

    async def try_consume(self, account_id: str) -> QuotaDecision:
        """Atomically charge one ticket if the account is under its limit."""
        decision, _ = await self.admit(account_id)
        return decision

    async def reserve(self, account_id: str) -> QuotaDecision:
        """Atomically hold one slot without charging it yet."""
        decision, _ = await self.admit(account_id, hold=True)
        return decision

    @abstractmethod
    async def commit(self, account_id: str) -> UsageRecord:
        """Turn a held slot into charged usage."""

    @abstractmethod
    async def release(self, account_id: str) -> None:
        """Drop a held slot without charging it."""

    @abstractmethod
    async def set_tier(self, account_id: str, tier: Tier) -> UsageRecord:
        """Overwrite the account's tier, keeping its count."""

    @abstractmethod
    async def total_count(self) -> int:
        """Usage summed over every account."""


class InMemoryQuotaLedger(QuotaLedger):
    """Process-lifetime ledger with one lock per account.

    Every write is load → check → save on a copy of the record, the same
    shape a durable store would need, so the lock is what keeps it atomic.
    """

    def __init__(self, tiers: TierTable = DEFAULT_TIERS) -> None:
        super().__init__(tiers)
        self._records: dict[str, UsageRecord] = {}
        self._reserved: dict[str, int] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, account_id: str) -> AbstractAsyncContextManager:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = self._locks[account_id] = asyncio.Lock()
        return lock

    async def _load(self, account_id: str) -> UsageRecord:
        record = self._records.get(account_id)
        return record.model_copy() if record is not None else UsageRecord()

    async def _save(self, account_id: str, record: UsageRecord) -> None:
        self._records[account_id] = record.model_copy()

    async def peek(self, account_id: str) -> UsageRecord:
        return await self._load(account_id)

    async def admit(
        self, account_id: str, *, hold: bool = False
    ) -> tuple[QuotaDecision, UsageRecord]:
        async with self._lock(account_id):
            record = await self._load(account_id)
            in_flight = self._reserved.get(account_id, 0)
            if record.count + in_flight >= self.limit(record.tier):
                return self._rejected(account_id, record), record

            if hold:
                self._reserved[account_id] = in_flight + 1
            else:
                record.count += 1
                await self._save(account_id, record)
            return QuotaDecision.ALLOWED, record

    async def commit(self, account_id: str) -> UsageRecord:
        async with self._lock(account_id):
            self._take_reservation(account_id)
            record = await self._load(account_id)
            record.count += 1
            await self._save(account_id, record)
            return record

    async def release(self, account_id: str) -> None:
        async with self._lock(account_id):
            self._take_reservation(account_id)

    async def set_tier(self, account_id: str, tier: Tier) -> UsageRecord:
        async with self._lock(account_id):
            record = await self._load(account_id)
            record.tier = tier
            await self._save(account_id, record)
            log.info("tier_changed", account_id=account_id, tier=tier.value)
            return record

    async def total_count(self) -> int:
        return sum(record.count for record in self._records.values())

    def _take_reservation(self, account_id: str) -> None:
        held = self._reserved.get(account_id, 0)
        if held <= 0:
            raise RuntimeError(f"No quota reservation held for account {account_id}")
        if held == 1:
            del self._reserved[account_id]
        else:
            self._reserved[account_id] = held - 1

    def _rejected(self, account_id: str, record: UsageRecord) -> QuotaDecision:
        log.warning(
            "quota_exceeded",
            account_id=account_id,
            count=record.count,
            limit=self.limit(record.tier),
            tier=record.tier.value,
        )
        return QuotaDecision.QUOTA_EXCEEDED


_ledger: QuotaLedger | None = None


def get_ledger() -> QuotaLedger:
    """Get the process-wide ledger singleton, built from the configured tier limits."""
    global _ledger
    if _ledger is None:
        from linear_connect.common.models import build_tier_table
        from linear_connect.common.settings import get_settings

        settings = get_settings()
        _ledger = InMemoryQuotaLedger(
            build_tier_table(
                settings.tier_limit_free,
                settings.tier_limit_pro,
                settings.tier_limit_enterprise,
            )
        )
    return _ledger


def reset_ledger() -> None:
    global _ledger
    _ledger = None
