"""
Ledger Protocol — Interface for the central stock ledger.

Allocman defines this protocol; adapters implement it on top of a store.
Shipped adapters:
    allocman.adapters.orm.DjangoLedger      (Django ORM, production)
    allocman.adapters.memory.InMemoryLedger (dicts, development/tests)

Write contract:
    - reduce_remaining() and take_from_channel() are conditional: they
      raise LedgerError instead of going below zero.
    - transaction() delimits a composite write; if the block raises,
      every write made inside it is rolled back.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class BatchRecord:
    """Snapshot of a batch as stored in the ledger."""

    id: int
    product_code: str
    quantity_received: int
    remaining_quantity: int
    purchase_price: Decimal
    purchase_date: date
    expiry_date: date | None = None
    supplier: str = ''

    def is_expired(self, today: date) -> bool:
        return self.expiry_date is not None and self.expiry_date < today

    def days_to_expiry(self, today: date) -> int | None:
        if self.expiry_date is None:
            return None
        return (self.expiry_date - today).days

    def with_remaining(self, remaining: int) -> BatchRecord:
        return replace(self, remaining_quantity=remaining)


@dataclass(frozen=True)
class StockTotals:
    """Quantities of one product across the ledger and its channels."""

    product_code: str
    main: int
    physical: int
    online: int

    @property
    def total(self) -> int:
        return self.main + self.physical + self.online


@runtime_checkable
class Ledger(Protocol):
    """
    Protocol for the central stock ledger.

    Quantities are whole units. Channel names are allocman.models.Channel
    values ('physical', 'online').
    """

    # ── Batches ──────────────────────────────────────────────────

    def batches_with_stock(self, product_code: str) -> list[BatchRecord]:
        """Batches of the product with remaining_quantity > 0."""
        ...

    def get_batch(self, batch_id: int) -> BatchRecord | None:
        ...

    def create_batch(
        self,
        product_code: str,
        quantity: int,
        purchase_price: Decimal,
        purchase_date: date,
        expiry_date: date | None = None,
        supplier: str = '',
    ) -> BatchRecord:
        """Create a batch with remaining_quantity == quantity."""
        ...

    def delete_batch(self, batch_id: int) -> None:
        ...

    def restore_batch(self, record: BatchRecord) -> BatchRecord:
        """Recreate a deleted batch with the same identity and values."""
        ...

    # ── Quantities ───────────────────────────────────────────────

    def channel_quantity(self, batch_id: int, channel: str) -> int:
        ...

    def add_to_channel(self, batch_id: int, channel: str, quantity: int) -> None:
        ...

    def take_from_channel(self, batch_id: int, channel: str, quantity: int) -> None:
        """Raises LedgerError if the channel holds less than quantity."""
        ...

    def reduce_remaining(self, batch_id: int, quantity: int) -> None:
        """Raises LedgerError if the batch holds less than quantity."""
        ...

    def restore_remaining(self, batch_id: int, quantity: int) -> None:
        ...

    # ── Removal safety ───────────────────────────────────────────

    def channel_usage(self, batch_id: int, channel: str) -> int:
        """Units of the batch currently held by the channel."""
        ...

    def has_sales(self, batch_id: int) -> bool:
        ...

    # ── Reporting ────────────────────────────────────────────────

    def low_stock(self, threshold: int) -> list[BatchRecord]:
        """Batches with 0 < remaining < threshold, lowest first."""
        ...

    def expiring_before(self, day: date) -> list[BatchRecord]:
        """Batches with stock whose expiry is on or before day, soonest first."""
        ...

    def stock_totals(self, product_code: str) -> StockTotals:
        ...

    # ── Transactions ─────────────────────────────────────────────

    def transaction(self) -> AbstractContextManager:
        ...
