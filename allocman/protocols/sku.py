"""
SKU Protocol — how allocman asks the product catalog about a code.

Consulted before add/issue when ALLOCMAN['VALIDATE_INPUT_SKUS'] is true.
A rejected code fails the operation with UNKNOWN_PRODUCT and the
validator's message.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SkuValidationResult:
    """Catalog verdict on one product code."""

    valid: bool
    sku: str
    message: str | None = None
    error_code: str | None = None  # "not_found", "inactive", ...

    @classmethod
    def accept(cls, sku: str) -> SkuValidationResult:
        return cls(valid=True, sku=sku)

    @classmethod
    def reject(cls, sku: str, error_code: str, message: str | None = None) -> SkuValidationResult:
        return cls(valid=False, sku=sku, message=message, error_code=error_code)


@dataclass(frozen=True)
class SkuInfo:
    """
    What the catalog knows about a stocked product.

    supplier is the default for batches received without one.
    """

    sku: str
    supplier: str = ''


@runtime_checkable
class SkuValidator(Protocol):
    """Implemented by the catalog; loaded from ALLOCMAN['SKU_VALIDATOR']."""

    def validate_sku(self, sku: str) -> SkuValidationResult:
        ...

    def get_sku_info(self, sku: str) -> SkuInfo | None:
        """None when the catalog has no such code."""
        ...
