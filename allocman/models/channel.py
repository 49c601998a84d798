"""
ChannelStock model — quantity of a batch held by a distribution channel.
"""

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from allocman.models.enums import Channel


class ChannelStockQuerySet(models.QuerySet):
    """Custom QuerySet for ChannelStock."""

    def for_batch(self, batch_id: int):
        return self.filter(batch_id=batch_id)

    def in_channel(self, channel: str):
        return self.filter(channel=channel)

    def for_product(self, product_code: str):
        return self.filter(batch__product_code=product_code)


class ChannelStock(models.Model):
    """
    Stock of one batch in one channel.

    One row per (batch, channel). Rows are created together with the
    batch at quantity zero, so issuing is always a conditional UPDATE
    on an existing row.
    """

    batch = models.ForeignKey(
        'allocman.Batch',
        on_delete=models.CASCADE,
        related_name='channel_stock',
        verbose_name=_('Lote'),
    )
    channel = models.CharField(
        max_length=20,
        choices=Channel.choices,
        verbose_name=_('Canal'),
    )
    quantity = models.PositiveIntegerField(
        default=0,
        verbose_name=_('Quantidade'),
    )
    restocked_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_('Reabastecido em'),
    )

    objects = ChannelStockQuerySet.as_manager()

    class Meta:
        verbose_name = _('Estoque do Canal')
        verbose_name_plural = _('Estoques dos Canais')
        ordering = ['batch', 'channel']
        constraints = [
            models.UniqueConstraint(
                fields=['batch', 'channel'],
                name='unique_channel_stock_per_batch',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='channel_stock_not_negative',
            ),
        ]

    def __str__(self) -> str:
        return f"Lote #{self.batch_id} [{self.channel}]: {self.quantity}"
