"""
Add Batch — receive a new batch into the central ledger.

Undo deletes exactly the record that was created.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation

from allocman.commands.base import Command, validate_quantity
from allocman.commands.remove_batch import ensure_removable
from allocman.exceptions import ValidationError
from allocman.protocols.ledger import BatchRecord, Ledger

CENTS = Decimal('0.01')
MAX_PRICE = Decimal('10') ** 10


class AddBatchCommand(Command):
    """Create a batch with remaining == quantity received."""

    kind = 'add_batch'

    def __init__(self, ledger: Ledger, product_code: str, quantity: int,
                 purchase_price, purchase_date: date | None,
                 expiry_date: date | None = None, supplier: str = '',
                 today: date | None = None):
        super().__init__(ledger, today)
        self.product_code = product_code
        self.quantity = quantity
        self.purchase_price = purchase_price
        self.purchase_date = purchase_date
        self.expiry_date = expiry_date
        self.supplier = supplier or ''

        # Undo state
        self.created: BatchRecord | None = None

    def validate(self) -> None:
        if not self.product_code:
            raise ValidationError('PRODUCT_CODE_REQUIRED')

        validate_quantity(self.quantity)

        try:
            price = Decimal(str(self.purchase_price))
        except (InvalidOperation, ValueError):
            raise ValidationError('INVALID_PRICE', price=self.purchase_price) from None
        if not price.is_finite() or price <= 0:
            raise ValidationError('INVALID_PRICE', price=self.purchase_price)
        # Batch.purchase_price is DECIMAL(12, 2)
        if price >= MAX_PRICE or price != price.quantize(CENTS):
            raise ValidationError('INVALID_PRICE', price=self.purchase_price)
        self.purchase_price = price.quantize(CENTS)

        if self.purchase_date is None:
            raise ValidationError('PURCHASE_DATE_REQUIRED')

        if self.purchase_date > self.today:
            raise ValidationError('PURCHASE_DATE_IN_FUTURE', purchase_date=self.purchase_date)

        if self.expiry_date is not None and self.expiry_date < self.purchase_date:
            raise ValidationError(
                'EXPIRY_BEFORE_PURCHASE',
                purchase_date=self.purchase_date,
                expiry_date=self.expiry_date,
            )

    def apply(self):
        self.created = self.ledger.create_batch(
            product_code=self.product_code,
            quantity=self.quantity,
            purchase_price=self.purchase_price,
            purchase_date=self.purchase_date,
            expiry_date=self.expiry_date,
            supplier=self.supplier,
        )
        batch = self.created
        message = (
            f"Lote #{batch.id} adicionado para o produto {batch.product_code}\n"
            f"  Quantidade: {batch.quantity_received} unidades\n"
            f"  Preço de compra: {batch.purchase_price} por unidade\n"
            f"  Data de compra: {batch.purchase_date}\n"
            f"  Validade: {batch.expiry_date or 'sem validade'}\n"
            f"  Fornecedor: {batch.supplier or 'desconhecido'}"
        )
        return message, batch

    def revert(self):
        batch = self.created
        ensure_removable(self.ledger, batch.id)
        self.ledger.delete_batch(batch.id)
        self.created = None
        message = f"Desfeito: lote #{batch.id} do produto {batch.product_code} removido"
        return message, batch

    def describe(self) -> str:
        return (
            f"Adicionar lote de {self.product_code}: {self.quantity} unidades "
            f"de {self.supplier or 'fornecedor desconhecido'}"
        )

    def log_context(self):
        return {
            "command": self.kind,
            "product_code": self.product_code,
            "qty": self.quantity,
            "batch_id": self.created.id if self.created else None,
        }
