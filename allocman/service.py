"""
Allocator — The single public interface for allocation operations.

Usage:
    from allocman import Allocator

    allocator = Allocator()                       # configured ledger
    allocator.add_batch("BEV-001", 50, Decimal("2.50"), date(2025, 1, 5),
                        expiry_date=date(2025, 3, 1), supplier="Fornecedor A")

    outcome = allocator.issue_stock("BEV-001", 15, Channel.PHYSICAL)
    outcome.reason            # why that batch
    outcome.issued            # units actually moved
    allocator.undo_last()     # put them back

Parameter convention: (product_code, quantity, ...)

Undo history holds a single slot: the last successful mutating command.
A new successful add/remove/issue replaces it; a successful undo clears it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Sequence

from allocman.commands import (
    AddBatchCommand,
    Command,
    CommandResult,
    IssueStockCommand,
    RemoveBatchCommand,
    validate_quantity,
)
from allocman.conf import allocman_settings
from allocman.exceptions import BusinessRuleViolation, ValidationError
from allocman.protocols.ledger import BatchRecord, Ledger
from allocman.selection import BatchSelector, SelectionResult, SelectionStrategy
from allocman.services import reports

logger = logging.getLogger('allocman')


@dataclass(frozen=True)
class IssueOutcome(SelectionResult):
    """Selection plus the result of issuing from the selected batch."""

    outcome: CommandResult | None = None

    @property
    def success(self) -> bool:
        return self.outcome is not None and self.outcome.success

    @property
    def issued(self) -> int:
        if not self.success:
            return 0
        return self.outcome.payload.quantity


class Allocator:
    """
    Composes batch selection, commands and the ledger.

    Args:
        ledger: Ledger to operate on (None = ALLOCMAN['LEDGER'])
        strategy: Strategy instance or registry key (None = ALLOCMAN['SELECTION_STRATEGY'])
        clock: Callable returning today's date
    """

    def __init__(self, ledger: Ledger | None = None,
                 strategy: SelectionStrategy | str | None = None,
                 clock: Callable[[], date] = date.today):
        if ledger is None:
            from allocman.adapters import get_ledger
            ledger = get_ledger()
        self.ledger = ledger
        self.selector = BatchSelector(strategy)
        self.clock = clock
        self._last: Command | None = None

    # ══════════════════════════════════════════════════════════════
    # SELECTION
    # ══════════════════════════════════════════════════════════════

    def select_batch(self, batches: Sequence[BatchRecord], product_code: str,
                     quantity: int) -> SelectionResult:
        """
        Run the active strategy over an explicit candidate list.

        A malformed quantity selects nothing; the reason says why.
        """
        try:
            validate_quantity(quantity)
        except ValidationError as e:
            return SelectionResult(batch=None, reason=e.message,
                                   strategy=self.selector.strategy_name)
        return self.selector.select(batches, product_code, quantity, today=self.clock())

    def analyze(self, product_code: str, quantity: int) -> SelectionResult:
        """
        Dry run: which batch would be issued, and why.

        Reads the ledger, writes nothing, leaves the undo slot alone.
        """
        batches = self.ledger.batches_with_stock(product_code)
        return self.select_batch(batches, product_code, quantity)

    def use_strategy(self, strategy: SelectionStrategy | str) -> None:
        self.selector.use(strategy)
        logger.info(
            "allocation.strategy",
            extra={"strategy": self.selector.strategy_name},
        )

    # ══════════════════════════════════════════════════════════════
    # MUTATIONS
    # ══════════════════════════════════════════════════════════════

    def add_batch(self, product_code: str, quantity: int, purchase_price: Decimal,
                  purchase_date: date | None, expiry_date: date | None = None,
                  supplier: str = '') -> CommandResult:
        """
        Receive a batch into the central ledger.

        With SKU validation on, a blank supplier defaults to the
        catalog's supplier for the product.

        Returns:
            CommandResult with the created BatchRecord as payload
        """
        rejected = self._check_sku(product_code)
        if rejected is not None:
            return rejected

        if not supplier:
            supplier = self._catalog_supplier(product_code)

        command = AddBatchCommand(
            self.ledger,
            product_code=product_code,
            quantity=quantity,
            purchase_price=purchase_price,
            purchase_date=purchase_date,
            expiry_date=expiry_date,
            supplier=supplier,
            today=self.clock(),
        )
        return self._run(command)

    def remove_batch(self, batch_id: int) -> CommandResult:
        """
        Delete a batch that has no channel stock and no sales.

        Returns:
            CommandResult with the removed BatchRecord as payload
        """
        return self._run(RemoveBatchCommand(self.ledger, batch_id, today=self.clock()))

    def issue_stock(self, product_code: str, quantity: int, channel: str) -> IssueOutcome:
        """
        Select a batch and move up to `quantity` units of it into `channel`.

        When no batch has stock, nothing is issued and outcome is None.
        Partial fulfillment is not an error: outcome.payload.quantity
        (or .issued) tells how many units actually moved.
        """
        strategy = self.selector.strategy_name

        rejected = self._check_sku(product_code)
        if rejected is not None:
            return IssueOutcome(
                batch=None,
                reason=rejected.message,
                strategy=strategy,
                outcome=rejected,
            )

        try:
            validate_quantity(quantity)
        except ValidationError as e:
            logger.warning(
                "allocation.issue_stock.invalid_quantity",
                extra={"product_code": product_code, "qty": quantity},
            )
            return IssueOutcome(
                batch=None,
                reason=e.message,
                strategy=strategy,
                outcome=CommandResult.failure(e),
            )

        selection = self.analyze(product_code, quantity)
        if not selection.has_selection:
            logger.info(
                "allocation.issue_stock.no_batch",
                extra={"product_code": product_code, "qty": quantity},
            )
            return IssueOutcome(
                batch=None,
                reason=selection.reason,
                strategy=selection.strategy,
            )

        command = IssueStockCommand(
            self.ledger,
            batch=selection.batch,
            product_code=product_code,
            quantity=quantity,
            channel=channel,
            today=self.clock(),
        )
        return IssueOutcome(
            batch=selection.batch,
            reason=selection.reason,
            strategy=selection.strategy,
            outcome=self._run(command),
        )

    # ══════════════════════════════════════════════════════════════
    # UNDO
    # ══════════════════════════════════════════════════════════════

    def can_undo(self) -> bool:
        return self._last is not None and self._last.can_undo

    def last_command_description(self) -> str | None:
        if self._last is None:
            return None
        return self._last.describe()

    def undo_last(self) -> CommandResult:
        """Reverse the most recent successful mutation."""
        if not self.can_undo():
            return CommandResult.failure(BusinessRuleViolation('NOTHING_TO_UNDO'))

        result = self._last.undo()
        if result.success:
            self._last = None
        return result

    def undo(self, handle: Command | CommandResult) -> CommandResult:
        """
        Undo a specific command, which must be the most recent one.

        Args:
            handle: The command, or the CommandResult that carries it
        """
        command = handle.command if isinstance(handle, CommandResult) else handle
        if command is None or command is not self._last:
            return CommandResult.failure(
                BusinessRuleViolation('NOT_LAST_COMMAND'),
                command=command,
            )
        return self.undo_last()

    # ══════════════════════════════════════════════════════════════
    # REPORTS
    # ══════════════════════════════════════════════════════════════

    def low_stock(self, threshold: int | None = None) -> list[BatchRecord]:
        return reports.low_stock_report(self.ledger, threshold)

    def expiring_soon(self, days: int | None = None) -> list[reports.ExpiryEntry]:
        return reports.expiry_report(self.ledger, days, today=self.clock())

    def inventory_status(self, product_code: str) -> reports.InventoryStatus:
        return reports.inventory_status(self.ledger, product_code)

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _run(self, command: Command) -> CommandResult:
        result = command.execute()
        if result.success:
            self._last = command
        return result

    def _check_sku(self, product_code: str) -> CommandResult | None:
        """Failed result if SKU validation is on and rejects the code."""
        if not allocman_settings.VALIDATE_INPUT_SKUS:
            return None

        from allocman.adapters import get_sku_validator

        validation = get_sku_validator().validate_sku(product_code)
        if validation.valid:
            return None

        error = BusinessRuleViolation(
            'UNKNOWN_PRODUCT',
            validation.message or f"Produto desconhecido: {product_code}",
            product_code=product_code,
            reason=validation.error_code,
        )
        logger.warning(
            "allocation.sku.rejected",
            extra={"product_code": product_code, "reason": validation.error_code},
        )
        return CommandResult.failure(error)

    def _catalog_supplier(self, product_code: str) -> str:
        if not allocman_settings.VALIDATE_INPUT_SKUS:
            return ''

        from allocman.adapters import get_sku_validator

        info = get_sku_validator().get_sku_info(product_code)
        return info.supplier if info is not None else ''
