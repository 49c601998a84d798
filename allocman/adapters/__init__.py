"""
Allocman Adapters.

Ledger and catalog backends, and the loader that picks them from settings.
The ORM ledger is not imported here: it needs the app registry.
"""

from allocman.adapters.loader import get_ledger, get_sku_validator, reset_sku_validator

__all__ = [
    "get_ledger",
    "get_sku_validator",
    "reset_sku_validator",
]
