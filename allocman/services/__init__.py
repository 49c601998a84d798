"""
Allocman services — read-only projections over the ledger.

    from allocman.services import low_stock_report, expiry_report, inventory_status
"""

from allocman.services.reports import (
    ExpiryEntry,
    InventoryStatus,
    expiry_report,
    inventory_status,
    low_stock_report,
)

__all__ = [
    'ExpiryEntry',
    'InventoryStatus',
    'expiry_report',
    'inventory_status',
    'low_stock_report',
]
