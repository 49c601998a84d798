"""
Allocman Protocols.

Defines interfaces for external system integration.
"""

from allocman.protocols.ledger import BatchRecord, Ledger, StockTotals
from allocman.protocols.sku import (
    SkuInfo,
    SkuValidationResult,
    SkuValidator,
)

__all__ = [
    "BatchRecord",
    "Ledger",
    "StockTotals",
    "SkuInfo",
    "SkuValidationResult",
    "SkuValidator",
]
