"""
Enums for Allocman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Channel(models.TextChoices):
    """
    Distribution channel downstream of the central ledger.

    PHYSICAL: Shelf stock in the physical store.
    ONLINE:   Fulfillment pool of the online store.
    """
    PHYSICAL = 'physical', _('Loja física')
    ONLINE = 'online', _('Loja online')


class CommandStatus(models.TextChoices):
    """
    Command lifecycle status.

        CREATED ──execute()──► EXECUTED ──undo()──► UNDONE
           │
           └──execute() fails──► FAILED
    """
    CREATED = 'created', _('Criado')
    EXECUTED = 'executed', _('Executado')
    UNDONE = 'undone', _('Desfeito')
    FAILED = 'failed', _('Falhou')
