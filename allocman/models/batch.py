"""
Batch model — one received quantity of a product.

Each batch has its own price, purchase date, optional expiry and supplier.
Stock is drawn from batches by the selection strategy and issued into
channels (see ChannelStock).

Usage:
    batch = Batch.objects.create(
        product_code="BEV-001",
        quantity_received=50,
        remaining_quantity=50,
        purchase_price=Decimal("2.40"),
        purchase_date=date.today(),
        expiry_date=date.today() + timedelta(days=90),
        supplier="Distribuidora ABC",
    )
"""

from datetime import date

from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _


class BatchQuerySet(models.QuerySet):
    """Custom QuerySet for Batch with convenience filters."""

    def for_product(self, product_code: str):
        """Filter batches for a specific product code."""
        return self.filter(product_code=product_code)

    def with_stock(self):
        """Batches with remaining stock in the central ledger."""
        return self.filter(remaining_quantity__gt=0)

    def expiring_before(self, day: date):
        """Batches expiring on or before the given date."""
        return self.filter(expiry_date__lte=day, expiry_date__isnull=False)

    def low_stock(self, threshold: int):
        """Batches with some stock left, but less than threshold."""
        return self.filter(remaining_quantity__gt=0, remaining_quantity__lt=threshold)


class Batch(models.Model):
    """
    Batch of a product in the central ledger.

    remaining_quantity is decremented when stock is issued to a channel
    and never goes below zero (check constraint).
    """

    product_code = models.CharField(
        max_length=50,
        db_index=True,
        verbose_name=_('Código do Produto'),
    )
    quantity_received = models.PositiveIntegerField(
        verbose_name=_('Quantidade Recebida'),
    )
    remaining_quantity = models.PositiveIntegerField(
        verbose_name=_('Quantidade Restante'),
        help_text=_('Saldo ainda não enviado para os canais'),
    )
    purchase_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Preço de Compra'),
    )
    purchase_date = models.DateField(
        verbose_name=_('Data de Compra'),
    )
    expiry_date = models.DateField(
        null=True,
        blank=True,
        db_index=True,
        verbose_name=_('Data de Validade'),
        help_text=_('Último dia em que o lote pode ser vendido'),
    )
    supplier = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Fornecedor'),
    )

    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Criado em'))

    objects = BatchQuerySet.as_manager()

    class Meta:
        verbose_name = _('Lote')
        verbose_name_plural = _('Lotes')
        ordering = ['expiry_date', 'purchase_date']
        constraints = [
            models.CheckConstraint(
                condition=Q(remaining_quantity__lte=F('quantity_received')),
                name='batch_remaining_within_received',
            ),
            models.CheckConstraint(
                condition=Q(expiry_date__isnull=True) | Q(expiry_date__gte=F('purchase_date')),
                name='batch_expiry_not_before_purchase',
            ),
        ]
        indexes = [
            models.Index(fields=['product_code', 'remaining_quantity'], name='batch_product_stock_idx'),
        ]

    @property
    def is_expired(self) -> bool:
        """Is this batch past its expiry date?"""
        if self.expiry_date is None:
            return False
        return date.today() > self.expiry_date

    def __str__(self) -> str:
        expiry = f" (val:{self.expiry_date})" if self.expiry_date else ""
        return f"Lote #{self.pk} {self.product_code}{expiry}"
