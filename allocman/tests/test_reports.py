"""
Tests for the report projections (in-memory ledger).
"""

import logging
from datetime import date
from decimal import Decimal

import pytest
from django.test import override_settings

from allocman.models.enums import Channel
from allocman.services.reports import expiry_report, inventory_status, low_stock_report


@pytest.fixture
def stocked(ledger):
    """Three batches of BEV-001 and one undated batch of BEV-002."""
    ledger.create_batch('BEV-001', 8, Decimal('2'), date(2024, 10, 1), expiry_date=date(2024, 11, 25))
    ledger.create_batch('BEV-001', 40, Decimal('2'), date(2024, 11, 1), expiry_date=date(2024, 12, 20))
    ledger.create_batch('BEV-001', 3, Decimal('2'), date(2024, 11, 15), expiry_date=date(2025, 6, 1))
    ledger.create_batch('BEV-002', 100, Decimal('9'), date(2024, 11, 20))
    return ledger


class TestLowStock:

    def test_default_threshold(self, stocked):
        assert [b.remaining_quantity for b in low_stock_report(stocked)] == [3, 8]

    def test_explicit_threshold(self, stocked):
        assert [b.remaining_quantity for b in low_stock_report(stocked, 5)] == [3]

    def test_threshold_from_settings(self, stocked):
        with override_settings(ALLOCMAN={'LOW_STOCK_THRESHOLD': 50}):
            assert len(low_stock_report(stocked)) == 3

    def test_logs_each_batch(self, stocked, caplog):
        with caplog.at_level(logging.WARNING, logger='allocman'):
            low_stock_report(stocked, 5)

        assert [r.message for r in caplog.records] == ["allocation.report.low_stock"]
        assert caplog.records[0].remaining == 3


class TestExpiry:

    def test_window(self, stocked, today):
        entries = expiry_report(stocked, days=30, today=today)

        assert [(e.days_left, e.expired) for e in entries] == [(-6, True), (19, False)]

    def test_undated_never_listed(self, stocked, today):
        entries = expiry_report(stocked, days=10000, today=today)

        assert all(e.batch.product_code == 'BEV-001' for e in entries)

    def test_empty_batches_not_listed(self, stocked, today):
        stocked.reduce_remaining(1, 8)

        assert [e.batch.id for e in expiry_report(stocked, days=30, today=today)] == [2]


class TestInventoryStatus:

    def test_totals(self, stocked):
        stocked.reduce_remaining(2, 10)
        stocked.add_to_channel(2, Channel.PHYSICAL, 6)
        stocked.add_to_channel(2, Channel.ONLINE, 4)

        status = inventory_status(stocked, 'BEV-001')

        assert status.totals.main == 41
        assert status.totals.physical == 6
        assert status.totals.online == 4
        assert status.totals.total == 51
        assert [b.id for b in status.batches] == [1, 2, 3]

    def test_unknown_product(self, ledger):
        status = inventory_status(ledger, 'NOPE')

        assert status.totals.total == 0
        assert status.batches == []
