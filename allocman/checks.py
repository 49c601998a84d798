"""
System checks for ALLOCMAN settings.

Run by `manage.py check` (and before runserver/migrate) so a bad dotted
path or an unregistered strategy shows up at startup rather than on the
first issue.
"""

from django.core import checks
from django.core.exceptions import ImproperlyConfigured

from allocman.conf import allocman_settings


@checks.register()
def check_allocman_settings(app_configs=None, **kwargs):
    from allocman.adapters.loader import import_backend
    from allocman.selection import STRATEGIES

    errors = []

    try:
        import_backend('LEDGER', 'allocman.adapters.orm.DjangoLedger')
    except ImproperlyConfigured as e:
        errors.append(checks.Error(str(e), id='allocman.E001'))

    strategy = allocman_settings.SELECTION_STRATEGY
    if strategy not in STRATEGIES:
        errors.append(checks.Error(
            f"ALLOCMAN['SELECTION_STRATEGY'] {strategy!r} is not registered.",
            hint=f"Registered: {', '.join(sorted(STRATEGIES))}",
            id='allocman.E002',
        ))

    if allocman_settings.VALIDATE_INPUT_SKUS:
        try:
            import_backend('SKU_VALIDATOR', 'allocman.adapters.noop.NoopSkuValidator')
        except ImproperlyConfigured as e:
            errors.append(checks.Error(
                str(e),
                hint="VALIDATE_INPUT_SKUS is on and needs a SKU_VALIDATOR.",
                id='allocman.E003',
            ))

    return errors
