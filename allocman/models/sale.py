"""
Sale model — historical sale line drawn from a batch.

Sales are written by the order capture side (billing, online checkout).
Allocman only reads them: a batch with any sale can never be removed.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from allocman.models.enums import Channel


class Sale(models.Model):
    """Immutable record of units sold from a batch through a channel."""

    batch = models.ForeignKey(
        'allocman.Batch',
        on_delete=models.PROTECT,
        related_name='sales',
        verbose_name=_('Lote'),
    )
    channel = models.CharField(
        max_length=20,
        choices=Channel.choices,
        verbose_name=_('Canal'),
    )
    quantity = models.PositiveIntegerField(verbose_name=_('Quantidade'))
    reference = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Referência'),
        help_text=_('Ex: número da nota, id do pedido'),
    )
    sold_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Vendido em'))

    class Meta:
        verbose_name = _('Venda')
        verbose_name_plural = _('Vendas')
        ordering = ['sold_at']

    def __str__(self) -> str:
        return f"{self.quantity} x lote #{self.batch_id} ({self.channel})"
