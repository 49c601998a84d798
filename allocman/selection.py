"""
Batch selection — which batch to draw from, and why.

Isolated and pure: no database access, no clock reads except through the
`today` argument. The caller always supplies the current candidate list.

Strategies are registered by name and picked by configuration:

    ALLOCMAN = {"SELECTION_STRATEGY": "fifo_expiry"}

Usage:
    selector = BatchSelector()                  # configured strategy
    result = selector.select(batches, "BEV-001", 15)
    if result.has_selection:
        print(result.batch.id, result.reason)

    selector.use("fifo_expiry")                 # swap at runtime
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Protocol, Sequence, runtime_checkable

from allocman.conf import allocman_settings
from allocman.protocols.ledger import BatchRecord


@dataclass(frozen=True)
class SelectionResult:
    """Outcome of a batch selection."""

    batch: BatchRecord | None
    reason: str
    strategy: str

    @property
    def has_selection(self) -> bool:
        return self.batch is not None


@runtime_checkable
class SelectionStrategy(Protocol):
    """
    Protocol for batch selection strategies.

    select() returns the single best batch for the requested quantity,
    or None when no candidate has remaining stock. explain() builds the
    human-readable rationale for a pick.
    """

    name: str

    def select(self, batches: Sequence[BatchRecord], product_code: str,
               quantity: int) -> BatchRecord | None:
        ...

    def explain(self, selected: BatchRecord, batches: Sequence[BatchRecord],
                quantity: int, today: date) -> str:
        ...


def _expiry_then_age(batch: BatchRecord):
    """Earliest expiry first (undated last), then earliest purchase."""
    return (
        batch.expiry_date is None,
        batch.expiry_date or date.max,
        batch.purchase_date,
    )


class FifoExpiryStrategy:
    """
    FIFO with expiry priority.

    1. Among batches that can fill the whole request, pick the earliest
       expiry (undated batches last), then the oldest purchase.
    2. If none can, apply the same order to every batch with stock and
       accept partial fulfillment from the first one.
    3. None if no batch has stock.
    """

    name = 'FIFO com prioridade de validade'

    def __init__(self, critical_days: int | None = None):
        self.critical_days = critical_days

    def select(self, batches, product_code, quantity):
        with_stock = [b for b in batches if b.remaining_quantity > 0]
        if not with_stock:
            return None

        sufficient = [b for b in with_stock if b.remaining_quantity >= quantity]
        return min(sufficient or with_stock, key=_expiry_then_age)

    def explain(self, selected, batches, quantity, today):
        critical_days = self.critical_days
        if critical_days is None:
            critical_days = allocman_settings.CRITICAL_EXPIRY_DAYS

        lines = [f"Lote #{selected.id} selecionado porque:"]

        days = selected.days_to_expiry(today)
        if days is not None:
            if days <= critical_days:
                lines.append(f"CRÍTICO: vence em {days} dias ({selected.expiry_date})")
            else:
                lines.append(f"Validade mais próxima: {selected.expiry_date} ({days} dias)")
        else:
            lines.append("Lote sem data de validade")

        others = [b for b in batches if b.id != selected.id and b.remaining_quantity > 0]

        if not any(b.purchase_date < selected.purchase_date for b in others):
            lines.append(f"Lote mais antigo: comprado em {selected.purchase_date}")

        if selected.expiry_date is not None:
            newer_earlier = next(
                (
                    b for b in others
                    if b.purchase_date > selected.purchase_date
                    and b.expiry_date is not None
                    and b.expiry_date < selected.expiry_date
                ),
                None,
            )
            if newer_earlier is not None:
                reason = (
                    "saldo insuficiente" if newer_earlier.remaining_quantity < quantity
                    else "outros critérios"
                )
                lines.append(
                    f"Obs: lote mais novo #{newer_earlier.id} vence antes "
                    f"({newer_earlier.expiry_date}) mas não foi escolhido ({reason})"
                )

        if selected.remaining_quantity < quantity:
            lines.append(
                f"Atendimento parcial: nenhum lote cobre {quantity} unidades"
            )

        lines.append(f"Quantidade disponível: {selected.remaining_quantity} unidades")
        return "\n".join(lines)


STRATEGIES: dict[str, type] = {
    'fifo_expiry': FifoExpiryStrategy,
}


def register_strategy(key: str, strategy_class: type) -> None:
    """Make a strategy available to the SELECTION_STRATEGY setting."""
    STRATEGIES[key] = strategy_class


def get_strategy(key: str | None = None) -> SelectionStrategy:
    """
    Instantiate a registered strategy.

    Args:
        key: Registry key (None = ALLOCMAN['SELECTION_STRATEGY'])

    Raises:
        KeyError: If the key is not registered
    """
    key = key or allocman_settings.SELECTION_STRATEGY
    try:
        strategy_class = STRATEGIES[key]
    except KeyError:
        raise KeyError(
            f"Unknown selection strategy {key!r}. Registered: {sorted(STRATEGIES)}"
        ) from None
    return strategy_class()


class BatchSelector:
    """
    Holds the active strategy and wraps its pick with a rationale.

    Stateless apart from the strategy: nothing about batches is kept
    between calls.
    """

    def __init__(self, strategy: SelectionStrategy | str | None = None):
        self.strategy = self._resolve(strategy)

    @property
    def strategy_name(self) -> str:
        return self.strategy.name

    def use(self, strategy: SelectionStrategy | str) -> None:
        """Swap the active strategy (instance or registry key)."""
        self.strategy = self._resolve(strategy)

    def select(self, batches: Sequence[BatchRecord], product_code: str,
               quantity: int, today: date | None = None) -> SelectionResult:
        today = today or date.today()
        selected = self.strategy.select(batches, product_code, quantity)

        if selected is None:
            return SelectionResult(
                batch=None,
                reason="Nenhum lote adequado encontrado",
                strategy=self.strategy.name,
            )

        return SelectionResult(
            batch=selected,
            reason=self.strategy.explain(selected, batches, quantity, today),
            strategy=self.strategy.name,
        )

    @staticmethod
    def _resolve(strategy):
        if strategy is None or isinstance(strategy, str):
            return get_strategy(strategy)
        return strategy
