"""
Allocman configuration.

Usage in settings.py:
    ALLOCMAN = {
        "LEDGER": "allocman.adapters.orm.DjangoLedger",
        "SELECTION_STRATEGY": "fifo_expiry",
        "CRITICAL_EXPIRY_DAYS": 30,
        "LOW_STOCK_THRESHOLD": 10,
        "EXPIRY_WINDOW_DAYS": 30,
        "SKU_VALIDATOR": "myshop.catalog.SkuValidator",
        "VALIDATE_INPUT_SKUS": True,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class AllocmanSettings:
    """Allocman configuration settings."""

    # Ledger backend (dotted path)
    LEDGER: str = "allocman.adapters.orm.DjangoLedger"

    # Registered batch selection strategy
    SELECTION_STRATEGY: str = "fifo_expiry"

    # Days before expiry at which a batch is flagged as critical
    CRITICAL_EXPIRY_DAYS: int = 30

    # Default threshold for the low stock report
    LOW_STOCK_THRESHOLD: int = 10

    # Default window (days ahead) for the expiry report
    EXPIRY_WINDOW_DAYS: int = 30

    # SKU validation backend (dotted path)
    SKU_VALIDATOR: str = ""

    # Validate product codes via external backend before add/issue
    VALIDATE_INPUT_SKUS: bool = False


def get_allocman_settings() -> AllocmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "ALLOCMAN", {})
    return AllocmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in AllocmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_allocman_settings(), name)


allocman_settings = _LazySettings()
