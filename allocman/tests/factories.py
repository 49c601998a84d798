"""
Value factories shared by the test modules.
"""

from datetime import date
from decimal import Decimal

from allocman.protocols.ledger import BatchRecord


TODAY = date(2024, 12, 1)


def make_record(id, remaining, expiry=None, purchase=date(2024, 11, 1),
                product='X', received=None, supplier=''):
    """Build a BatchRecord for selection tests."""
    return BatchRecord(
        id=id,
        product_code=product,
        quantity_received=received if received is not None else max(remaining, 1),
        remaining_quantity=remaining,
        purchase_price=Decimal('2.50'),
        purchase_date=purchase,
        expiry_date=expiry,
        supplier=supplier,
    )
