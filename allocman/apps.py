"""Django app configuration for Allocman."""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class AllocmanConfig(AppConfig):
    """
    Batch allocation: central ledger, physical and online store channels.

    Settings are validated by the system checks in allocman.checks.
    """

    default_auto_field = "django.db.models.BigAutoField"
    name = "allocman"
    verbose_name = _("Alocação de Estoque")

    def ready(self):
        """Register the ALLOCMAN settings checks."""
        import allocman.checks  # noqa: F401
