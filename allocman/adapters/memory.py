"""
In-memory Ledger — adapter for development and testing.

Implements the Ledger protocol with plain dicts, honouring the same
write contract as DjangoLedger (guarded decrements, transactional
rollback), so commands and the Allocator can be exercised without a
database.

Usage:
    ledger = InMemoryLedger()
    allocator = Allocator(ledger=ledger)

WARNING: State lives in the process. Do NOT use in production.
"""

from __future__ import annotations

import copy
import itertools
from contextlib import contextmanager
from datetime import date
from decimal import Decimal

from allocman.exceptions import LedgerError
from allocman.models.enums import Channel
from allocman.protocols.ledger import BatchRecord, StockTotals


def _expiry_key(record: BatchRecord):
    return (record.expiry_date is None, record.expiry_date or date.max, record.purchase_date, record.id)


def _key(batch_id: int, channel: str) -> tuple[int, str]:
    return batch_id, Channel(channel).value


class InMemoryLedger:
    """Ledger kept in process memory."""

    def __init__(self):
        self._batches: dict[int, BatchRecord] = {}
        self._channels: dict[tuple[int, str], int] = {}
        self._sales: dict[int, int] = {}
        self._ids = itertools.count(1)

    # ── Batches ──────────────────────────────────────────────────

    def batches_with_stock(self, product_code: str) -> list[BatchRecord]:
        found = [
            b for b in self._batches.values()
            if b.product_code == product_code and b.remaining_quantity > 0
        ]
        return sorted(found, key=_expiry_key)

    def get_batch(self, batch_id: int) -> BatchRecord | None:
        return self._batches.get(batch_id)

    def create_batch(self, product_code: str, quantity: int, purchase_price: Decimal,
                     purchase_date: date, expiry_date: date | None = None,
                     supplier: str = '') -> BatchRecord:
        record = BatchRecord(
            id=next(self._ids),
            product_code=product_code,
            quantity_received=quantity,
            remaining_quantity=quantity,
            purchase_price=purchase_price,
            purchase_date=purchase_date,
            expiry_date=expiry_date,
            supplier=supplier or '',
        )
        self._batches[record.id] = record
        return record

    def delete_batch(self, batch_id: int) -> None:
        if batch_id not in self._batches:
            raise LedgerError(f"Batch {batch_id} not found")
        if self._sales.get(batch_id):
            raise LedgerError(f"Batch {batch_id} is referenced by sales")
        del self._batches[batch_id]
        for channel in Channel.values:
            self._channels.pop(_key(batch_id, channel), None)

    def restore_batch(self, record: BatchRecord) -> BatchRecord:
        if record.id in self._batches:
            raise LedgerError(f"Batch {record.id} already exists")
        self._batches[record.id] = record
        return record

    # ── Quantities ───────────────────────────────────────────────

    def channel_quantity(self, batch_id: int, channel: str) -> int:
        return self._channels.get(_key(batch_id, channel), 0)

    def add_to_channel(self, batch_id: int, channel: str, quantity: int) -> None:
        if batch_id not in self._batches:
            raise LedgerError(f"Batch {batch_id} not found")
        key = _key(batch_id, channel)
        self._channels[key] = self._channels.get(key, 0) + quantity

    def take_from_channel(self, batch_id: int, channel: str, quantity: int) -> None:
        key = _key(batch_id, channel)
        if self._channels.get(key, 0) < quantity:
            raise LedgerError(
                f"Cannot take {quantity} from {channel} stock of batch {batch_id}: "
                f"insufficient quantity or row not found"
            )
        self._channels[key] -= quantity

    def reduce_remaining(self, batch_id: int, quantity: int) -> None:
        record = self._batches.get(batch_id)
        if record is None or record.remaining_quantity < quantity:
            raise LedgerError(
                f"Cannot reduce batch {batch_id} by {quantity}: "
                f"insufficient quantity or batch not found"
            )
        self._batches[batch_id] = record.with_remaining(record.remaining_quantity - quantity)

    def restore_remaining(self, batch_id: int, quantity: int) -> None:
        record = self._batches.get(batch_id)
        if record is None:
            raise LedgerError(f"Batch {batch_id} not found")
        self._batches[batch_id] = record.with_remaining(record.remaining_quantity + quantity)

    # ── Removal safety ───────────────────────────────────────────

    def channel_usage(self, batch_id: int, channel: str) -> int:
        return self.channel_quantity(batch_id, channel)

    def has_sales(self, batch_id: int) -> bool:
        return self._sales.get(batch_id, 0) > 0

    def record_sale(self, batch_id: int, channel: str, quantity: int) -> None:
        """Sell units from a channel (what the order capture side does)."""
        self.take_from_channel(batch_id, channel, quantity)
        self._sales[batch_id] = self._sales.get(batch_id, 0) + 1

    # ── Reporting ────────────────────────────────────────────────

    def low_stock(self, threshold: int) -> list[BatchRecord]:
        found = [b for b in self._batches.values() if 0 < b.remaining_quantity < threshold]
        return sorted(found, key=lambda b: (b.remaining_quantity,) + _expiry_key(b))

    def expiring_before(self, day: date) -> list[BatchRecord]:
        found = [
            b for b in self._batches.values()
            if b.remaining_quantity > 0 and b.expiry_date is not None and b.expiry_date <= day
        ]
        return sorted(found, key=_expiry_key)

    def stock_totals(self, product_code: str) -> StockTotals:
        ids = {b.id for b in self._batches.values() if b.product_code == product_code}

        def channel_total(channel):
            return sum(qty for (bid, ch), qty in self._channels.items() if bid in ids and ch == channel)

        return StockTotals(
            product_code=product_code,
            main=sum(self._batches[i].remaining_quantity for i in ids),
            physical=channel_total(Channel.PHYSICAL),
            online=channel_total(Channel.ONLINE),
        )

    # ── Transactions ─────────────────────────────────────────────

    @contextmanager
    def transaction(self):
        snapshot = copy.deepcopy((self._batches, self._channels, self._sales))
        try:
            yield self
        except BaseException:
            self._batches, self._channels, self._sales = snapshot
            raise
