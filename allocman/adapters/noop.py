"""
Noop SKU Validator — accepts every product code.

    ALLOCMAN = {
        "SKU_VALIDATOR": "allocman.adapters.noop.NoopSkuValidator",
        "VALIDATE_INPUT_SKUS": True,
    }

Development only: a typo in a product code creates a batch nobody will
ever issue from.
"""

from __future__ import annotations

from allocman.protocols.sku import SkuInfo, SkuValidationResult


class NoopSkuValidator:
    """Every code is valid; no catalog supplier."""

    def validate_sku(self, sku: str) -> SkuValidationResult:
        return SkuValidationResult.accept(sku)

    def get_sku_info(self, sku: str) -> SkuInfo | None:
        return SkuInfo(sku=sku)
