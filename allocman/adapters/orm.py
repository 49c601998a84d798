"""
Django ORM Ledger.

Implements the Ledger protocol on top of allocman.models.

Concurrency:
    - Every quantity change is a single UPDATE with F() expressions
    - Decrements carry a guard in the WHERE clause (qty >= n); zero rows
      updated means the guard failed and LedgerError is raised
    - Channel rows are created together with the batch, so issuing never
      needs a check-then-insert
    - transaction() is django.db.transaction.atomic()
"""

import logging
from datetime import date
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import F, ProtectedError, Sum
from django.utils import timezone

from allocman.exceptions import LedgerError
from allocman.models.batch import Batch
from allocman.models.channel import ChannelStock
from allocman.models.enums import Channel
from allocman.models.sale import Sale
from allocman.protocols.ledger import BatchRecord, StockTotals

logger = logging.getLogger('allocman')


def _to_record(batch: Batch) -> BatchRecord:
    return BatchRecord(
        id=batch.pk,
        product_code=batch.product_code,
        quantity_received=batch.quantity_received,
        remaining_quantity=batch.remaining_quantity,
        purchase_price=batch.purchase_price,
        purchase_date=batch.purchase_date,
        expiry_date=batch.expiry_date,
        supplier=batch.supplier,
    )


class DjangoLedger:
    """Ledger backed by the Batch, ChannelStock and Sale models."""

    # ══════════════════════════════════════════════════════════════
    # BATCHES
    # ══════════════════════════════════════════════════════════════

    def batches_with_stock(self, product_code: str) -> list[BatchRecord]:
        qs = Batch.objects.for_product(product_code).with_stock()
        return [_to_record(b) for b in qs.order_by('expiry_date', 'purchase_date', 'pk')]

    def get_batch(self, batch_id: int) -> BatchRecord | None:
        batch = Batch.objects.filter(pk=batch_id).first()
        return _to_record(batch) if batch else None

    def create_batch(self, product_code: str, quantity: int, purchase_price: Decimal,
                     purchase_date: date, expiry_date: date | None = None,
                     supplier: str = '') -> BatchRecord:
        try:
            with transaction.atomic():
                batch = Batch.objects.create(
                    product_code=product_code,
                    quantity_received=quantity,
                    remaining_quantity=quantity,
                    purchase_price=purchase_price,
                    purchase_date=purchase_date,
                    expiry_date=expiry_date,
                    supplier=supplier or '',
                )
                self._open_channels(batch)
        except IntegrityError as e:
            raise LedgerError(f"Could not create batch for {product_code}: {e}") from e
        return _to_record(batch)

    def delete_batch(self, batch_id: int) -> None:
        try:
            with transaction.atomic():
                deleted, _ = Batch.objects.filter(pk=batch_id).delete()
        except (ProtectedError, IntegrityError) as e:
            raise LedgerError(f"Could not delete batch {batch_id}: {e}") from e
        if not deleted:
            raise LedgerError(f"Batch {batch_id} not found")

    def restore_batch(self, record: BatchRecord) -> BatchRecord:
        try:
            with transaction.atomic():
                batch = Batch.objects.create(
                    pk=record.id,
                    product_code=record.product_code,
                    quantity_received=record.quantity_received,
                    remaining_quantity=record.remaining_quantity,
                    purchase_price=record.purchase_price,
                    purchase_date=record.purchase_date,
                    expiry_date=record.expiry_date,
                    supplier=record.supplier,
                )
                self._open_channels(batch)
        except IntegrityError as e:
            raise LedgerError(f"Could not restore batch {record.id}: {e}") from e
        return _to_record(batch)

    # ══════════════════════════════════════════════════════════════
    # QUANTITIES
    # ══════════════════════════════════════════════════════════════

    def channel_quantity(self, batch_id: int, channel: str) -> int:
        row = ChannelStock.objects.for_batch(batch_id).in_channel(channel).first()
        return row.quantity if row else 0

    def add_to_channel(self, batch_id: int, channel: str, quantity: int) -> None:
        updated = ChannelStock.objects.for_batch(batch_id).in_channel(channel).update(
            quantity=F('quantity') + quantity,
            restocked_at=timezone.now(),
        )
        if not updated:
            raise LedgerError(f"No {channel} stock row for batch {batch_id}")

    def take_from_channel(self, batch_id: int, channel: str, quantity: int) -> None:
        updated = ChannelStock.objects.filter(
            batch_id=batch_id,
            channel=channel,
            quantity__gte=quantity,
        ).update(quantity=F('quantity') - quantity)
        if not updated:
            raise LedgerError(
                f"Cannot take {quantity} from {channel} stock of batch {batch_id}: "
                f"insufficient quantity or row not found"
            )

    def reduce_remaining(self, batch_id: int, quantity: int) -> None:
        updated = Batch.objects.filter(
            pk=batch_id,
            remaining_quantity__gte=quantity,
        ).update(remaining_quantity=F('remaining_quantity') - quantity)
        if not updated:
            raise LedgerError(
                f"Cannot reduce batch {batch_id} by {quantity}: "
                f"insufficient quantity or batch not found"
            )

    def restore_remaining(self, batch_id: int, quantity: int) -> None:
        try:
            with transaction.atomic():
                updated = Batch.objects.filter(pk=batch_id).update(
                    remaining_quantity=F('remaining_quantity') + quantity,
                )
        except IntegrityError as e:
            raise LedgerError(f"Cannot restore {quantity} to batch {batch_id}: {e}") from e
        if not updated:
            raise LedgerError(f"Batch {batch_id} not found")

    # ══════════════════════════════════════════════════════════════
    # REMOVAL SAFETY
    # ══════════════════════════════════════════════════════════════

    def channel_usage(self, batch_id: int, channel: str) -> int:
        return ChannelStock.objects.for_batch(batch_id).in_channel(channel).aggregate(
            t=Sum('quantity')
        )['t'] or 0

    def has_sales(self, batch_id: int) -> bool:
        return Sale.objects.filter(batch_id=batch_id).exists()

    # ══════════════════════════════════════════════════════════════
    # REPORTING
    # ══════════════════════════════════════════════════════════════

    def low_stock(self, threshold: int) -> list[BatchRecord]:
        qs = Batch.objects.low_stock(threshold).order_by('remaining_quantity', 'expiry_date', 'pk')
        return [_to_record(b) for b in qs]

    def expiring_before(self, day: date) -> list[BatchRecord]:
        qs = Batch.objects.with_stock().expiring_before(day).order_by('expiry_date', 'pk')
        return [_to_record(b) for b in qs]

    def stock_totals(self, product_code: str) -> StockTotals:
        main = Batch.objects.for_product(product_code).aggregate(
            t=Sum('remaining_quantity')
        )['t'] or 0
        by_channel = {
            row['channel']: row['t'] or 0
            for row in ChannelStock.objects.for_product(product_code)
            .order_by()
            .values('channel')
            .annotate(t=Sum('quantity'))
        }
        return StockTotals(
            product_code=product_code,
            main=main,
            physical=by_channel.get(Channel.PHYSICAL, 0),
            online=by_channel.get(Channel.ONLINE, 0),
        )

    # ══════════════════════════════════════════════════════════════
    # TRANSACTIONS
    # ══════════════════════════════════════════════════════════════

    def transaction(self):
        return transaction.atomic()

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @staticmethod
    def _open_channels(batch: Batch) -> None:
        """Create the zero-quantity row of every channel for a batch."""
        ChannelStock.objects.bulk_create([
            ChannelStock(batch=batch, channel=channel, quantity=0)
            for channel in Channel.values
        ])
        logger.debug("ledger.channels_opened", extra={"batch_id": batch.pk})
