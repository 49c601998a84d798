"""
Backend loading — resolves the dotted paths in ALLOCMAN settings.

    ALLOCMAN = {
        "LEDGER": "allocman.adapters.orm.DjangoLedger",
        "SKU_VALIDATOR": "myshop.catalog.adapters.CatalogSkuValidator",
    }

get_ledger() builds a new ledger on every call. get_sku_validator()
keeps one validator per configured path; changing the setting (e.g.
override_settings in tests) loads the new one on the next call.

A missing or unimportable path raises ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from allocman.conf import allocman_settings
from allocman.protocols.ledger import Ledger
from allocman.protocols.sku import SkuValidator

logger = logging.getLogger(__name__)


_lock = threading.Lock()
_sku_validator: tuple[str, SkuValidator] | None = None


def import_backend(setting: str, example: str):
    """
    Import the class named by ALLOCMAN[setting].

    Raises:
        ImproperlyConfigured: If the setting is empty or cannot be imported
    """
    path = getattr(allocman_settings, setting)
    if not path:
        raise ImproperlyConfigured(
            f"ALLOCMAN['{setting}'] must be configured. Example: '{example}'"
        )
    try:
        backend = import_string(path)
    except ImportError as e:
        raise ImproperlyConfigured(
            f"Failed to import ALLOCMAN['{setting}'] '{path}': {e}"
        ) from e
    logger.debug("Loaded %s: %s", setting, path)
    return backend


def get_ledger() -> Ledger:
    """Return a new instance of the configured ledger."""
    ledger_class = import_backend('LEDGER', 'allocman.adapters.orm.DjangoLedger')
    return ledger_class()


def get_sku_validator() -> SkuValidator:
    """Return the configured SKU validator (cached per dotted path)."""
    global _sku_validator

    path = allocman_settings.SKU_VALIDATOR
    cached = _sku_validator
    if cached is not None and cached[0] == path:
        return cached[1]

    with _lock:
        if _sku_validator is None or _sku_validator[0] != path:
            validator_class = import_backend(
                'SKU_VALIDATOR', 'allocman.adapters.noop.NoopSkuValidator',
            )
            _sku_validator = (path, validator_class())
        return _sku_validator[1]


def reset_sku_validator() -> None:
    """Drop the cached validator."""
    global _sku_validator
    _sku_validator = None
