"""
Issue Stock — move units from a batch into a sales channel.

Issues min(requested, remaining): the batch's remaining quantity goes down
and the channel's quantity for that batch goes up by the same amount, in
one ledger transaction. Undo takes the same amount back out of the channel
and returns it to the batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from allocman.commands.base import Command, validate_quantity
from allocman.conf import allocman_settings
from allocman.exceptions import BusinessRuleViolation, ValidationError
from allocman.models.enums import Channel
from allocman.protocols.ledger import BatchRecord, Ledger


@dataclass(frozen=True)
class IssueReceipt:
    """What an issue actually moved."""

    product_code: str
    batch_id: int
    channel: str
    requested: int
    quantity: int
    batch_remaining: int

    @property
    def partial(self) -> bool:
        return self.quantity < self.requested


class IssueStockCommand(Command):
    """Issue units of a selected batch to the physical or online store."""

    kind = 'issue_stock'

    def __init__(self, ledger: Ledger, batch: BatchRecord, product_code: str,
                 quantity: int, channel: str, today: date | None = None):
        super().__init__(ledger, today)
        self.batch = batch
        self.product_code = product_code
        self.quantity = quantity
        self.channel = channel

        # Undo state
        self.issued = 0

    def validate(self) -> None:
        validate_quantity(self.quantity)

        try:
            self.channel = Channel(self.channel)
        except ValueError:
            raise ValidationError('INVALID_CHANNEL', channel=self.channel) from None

        batch = self.batch
        if batch.remaining_quantity <= 0:
            raise BusinessRuleViolation(
                'BATCH_EMPTY',
                f"Lote #{batch.id} não possui saldo",
                batch_id=batch.id,
            )

        if batch.product_code != self.product_code:
            raise BusinessRuleViolation(
                'PRODUCT_MISMATCH',
                f"Lote #{batch.id} é do produto {batch.product_code}, "
                f"não {self.product_code}",
                batch_id=batch.id,
                expected=self.product_code,
                actual=batch.product_code,
            )

        if batch.is_expired(self.today):
            raise BusinessRuleViolation(
                'BATCH_EXPIRED',
                f"Lote #{batch.id} venceu em {batch.expiry_date}",
                batch_id=batch.id,
                expiry_date=batch.expiry_date,
            )

    def apply(self):
        batch = self.batch
        issued = min(self.quantity, batch.remaining_quantity)

        self.ledger.reduce_remaining(batch.id, issued)
        self.ledger.add_to_channel(batch.id, self.channel, issued)
        self.issued = issued

        receipt = IssueReceipt(
            product_code=self.product_code,
            batch_id=batch.id,
            channel=str(self.channel),
            requested=self.quantity,
            quantity=issued,
            batch_remaining=batch.remaining_quantity - issued,
        )

        lines = [
            f"{issued} unidades de {self.product_code} enviadas para "
            f"{self.channel.label} a partir do lote #{batch.id}",
            f"  Saldo restante no lote: {receipt.batch_remaining} unidades",
        ]
        if receipt.partial:
            lines.append(f"  Atendimento parcial: solicitadas {self.quantity} unidades")

        days = batch.days_to_expiry(self.today)
        if days is not None and days <= allocman_settings.CRITICAL_EXPIRY_DAYS:
            lines.append(f"  ATENÇÃO: lote vence em {days} dias ({batch.expiry_date})")

        return "\n".join(lines), receipt

    def revert(self):
        issued = self.issued
        self.ledger.take_from_channel(self.batch.id, self.channel, issued)
        self.ledger.restore_remaining(self.batch.id, issued)
        self.issued = 0

        message = (
            f"Desfeito: {issued} unidades de {self.product_code} devolvidas "
            f"de {self.channel.label} ao lote #{self.batch.id}"
        )
        return message, issued

    def describe(self) -> str:
        try:
            channel = Channel(self.channel).label
        except ValueError:
            channel = self.channel
        return (
            f"Enviar {self.quantity} unidades de {self.product_code} "
            f"para {channel} (lote #{self.batch.id})"
        )

    def log_context(self):
        return {
            "command": self.kind,
            "product_code": self.product_code,
            "batch_id": self.batch.id,
            "channel": str(self.channel),
            "qty": self.quantity,
            "issued": self.issued,
        }
