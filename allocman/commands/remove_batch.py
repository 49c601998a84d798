"""
Remove Batch — delete a batch that nothing downstream depends on.

A batch can only go while it is untouched: no units in the physical
store, none in the online store, and no sale ever recorded against it.
Undo recreates the identical record (same id, quantities, dates, supplier).
"""

from __future__ import annotations

from datetime import date

from allocman.commands.base import Command
from allocman.exceptions import BusinessRuleViolation
from allocman.models.enums import Channel
from allocman.protocols.ledger import BatchRecord, Ledger


def ensure_removable(ledger: Ledger, batch_id: int) -> None:
    """
    Raise BusinessRuleViolation if the batch is in use downstream.

    Checks, in order: physical store stock, online store stock, sales.
    """
    physical = ledger.channel_usage(batch_id, Channel.PHYSICAL)
    if physical > 0:
        raise BusinessRuleViolation(
            'BATCH_IN_PHYSICAL_STORE',
            f"Lote #{batch_id} não pode ser removido: {physical} unidades na loja física",
            batch_id=batch_id,
            quantity=physical,
        )

    online = ledger.channel_usage(batch_id, Channel.ONLINE)
    if online > 0:
        raise BusinessRuleViolation(
            'BATCH_IN_ONLINE_STORE',
            f"Lote #{batch_id} não pode ser removido: {online} unidades na loja online",
            batch_id=batch_id,
            quantity=online,
        )

    if ledger.has_sales(batch_id):
        raise BusinessRuleViolation(
            'BATCH_HAS_SALES',
            f"Lote #{batch_id} não pode ser removido: possui vendas registradas",
            batch_id=batch_id,
        )


class RemoveBatchCommand(Command):
    """Delete an untouched batch from the ledger."""

    kind = 'remove_batch'

    def __init__(self, ledger: Ledger, batch_id: int, today: date | None = None):
        super().__init__(ledger, today)
        self.batch_id = batch_id

        # Undo state
        self.removed: BatchRecord | None = None

    def validate(self) -> None:
        batch = self.ledger.get_batch(self.batch_id)
        if batch is None:
            raise BusinessRuleViolation('BATCH_NOT_FOUND', batch_id=self.batch_id)

        ensure_removable(self.ledger, self.batch_id)
        self.removed = batch

    def apply(self):
        batch = self.removed
        self.ledger.delete_batch(batch.id)
        message = (
            f"Lote #{batch.id} removido\n"
            f"  Produto: {batch.product_code}\n"
            f"  Quantidade restante: {batch.remaining_quantity} unidades\n"
            f"  Fornecedor: {batch.supplier or 'desconhecido'}\n"
            f"  Data de compra: {batch.purchase_date}"
        )
        return message, batch

    def revert(self):
        restored = self.ledger.restore_batch(self.removed)
        self.removed = None
        message = f"Desfeito: lote #{restored.id} do produto {restored.product_code} restaurado"
        return message, restored

    def describe(self) -> str:
        return f"Remover lote #{self.batch_id}"

    def log_context(self):
        return {"command": self.kind, "batch_id": self.batch_id}
