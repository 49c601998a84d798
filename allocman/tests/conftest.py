"""
Pytest fixtures for Allocman tests.

Dates are pinned: "today" is 2024-12-01 everywhere a clock is injected.
"""

from datetime import date
from decimal import Decimal

import pytest

from allocman.adapters.memory import InMemoryLedger
from allocman.adapters.orm import DjangoLedger
from allocman.service import Allocator
from allocman.tests.factories import TODAY


@pytest.fixture
def today():
    """The pinned current date."""
    return TODAY


@pytest.fixture
def ledger():
    """Empty in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def django_ledger(db):
    """ORM ledger on the test database."""
    return DjangoLedger()


@pytest.fixture
def allocator(django_ledger, today):
    """Allocator on the ORM ledger with a pinned clock."""
    return Allocator(ledger=django_ledger, clock=lambda: today)


@pytest.fixture
def memory_allocator(ledger, today):
    """Allocator on the in-memory ledger with a pinned clock."""
    return Allocator(ledger=ledger, clock=lambda: today)


@pytest.fixture
def batch_a(django_ledger):
    """Product X: 20 units, expires 2025-01-10."""
    return django_ledger.create_batch(
        product_code='X',
        quantity=20,
        purchase_price=Decimal('2.50'),
        purchase_date=date(2024, 11, 10),
        expiry_date=date(2025, 1, 10),
        supplier='Fornecedor A',
    )


@pytest.fixture
def batch_b(django_ledger):
    """Product X: 50 units, expires 2025-02-01."""
    return django_ledger.create_batch(
        product_code='X',
        quantity=50,
        purchase_price=Decimal('2.40'),
        purchase_date=date(2024, 11, 5),
        expiry_date=date(2025, 2, 1),
        supplier='Fornecedor B',
    )
