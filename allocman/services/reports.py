"""
Stock reports — read-only projections over the ledger.

Usage:
    from allocman.services.reports import low_stock_report, expiry_report

    for batch in low_stock_report(ledger):
        ...
    for entry in expiry_report(ledger, days=15):
        print(entry.batch.id, entry.days_left)

Nothing here writes. Thresholds default to ALLOCMAN settings.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta

from allocman.conf import allocman_settings
from allocman.protocols.ledger import BatchRecord, Ledger, StockTotals

logger = logging.getLogger('allocman')


@dataclass(frozen=True)
class ExpiryEntry:
    """A batch with stock close to (or past) its expiry date."""

    batch: BatchRecord
    days_left: int

    @property
    def expired(self) -> bool:
        return self.days_left < 0


@dataclass(frozen=True)
class InventoryStatus:
    """Where one product's units currently are."""

    totals: StockTotals
    batches: list[BatchRecord] = field(default_factory=list)

    @property
    def product_code(self) -> str:
        return self.totals.product_code


def low_stock_report(ledger: Ledger, threshold: int | None = None) -> list[BatchRecord]:
    """
    Batches whose remaining quantity is above zero but below threshold.

    Args:
        ledger: Ledger to read
        threshold: Units (None = ALLOCMAN['LOW_STOCK_THRESHOLD'])

    Returns:
        Batches ordered by remaining quantity, lowest first.
    """
    if threshold is None:
        threshold = allocman_settings.LOW_STOCK_THRESHOLD

    batches = ledger.low_stock(threshold)
    for batch in batches:
        logger.warning(
            "allocation.report.low_stock",
            extra={
                "batch_id": batch.id,
                "product_code": batch.product_code,
                "remaining": batch.remaining_quantity,
                "threshold": threshold,
            },
        )
    return batches


def expiry_report(ledger: Ledger, days: int | None = None,
                  today: date | None = None) -> list[ExpiryEntry]:
    """
    Batches with stock expiring within `days` days (already expired included).

    Args:
        ledger: Ledger to read
        days: Window in days (None = ALLOCMAN['EXPIRY_WINDOW_DAYS'])
        today: Reference date (None = date.today())

    Returns:
        ExpiryEntry list, soonest expiry first.
    """
    if days is None:
        days = allocman_settings.EXPIRY_WINDOW_DAYS
    today = today or date.today()

    entries = [
        ExpiryEntry(batch=batch, days_left=batch.days_to_expiry(today))
        for batch in ledger.expiring_before(today + timedelta(days=days))
    ]
    for entry in entries:
        logger.warning(
            "allocation.report.expiring",
            extra={
                "batch_id": entry.batch.id,
                "product_code": entry.batch.product_code,
                "expiry_date": str(entry.batch.expiry_date),
                "days_left": entry.days_left,
            },
        )
    return entries


def inventory_status(ledger: Ledger, product_code: str) -> InventoryStatus:
    """Totals per location plus the batches that still hold stock."""
    return InventoryStatus(
        totals=ledger.stock_totals(product_code),
        batches=ledger.batches_with_stock(product_code),
    )
