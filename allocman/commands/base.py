"""
Command base — one reversible ledger mutation.

LIFECYCLE:

    CREATED ──execute() ok──► EXECUTED ──undo() ok──► UNDONE
       │                         │
       │ execute() fails         │ undo() fails: stays EXECUTED,
       ▼                         │ the ledger transaction rolled
    FAILED                       │ back whatever undo() had written
                                 ▼

A command is executed at most once and undone at most once. Every
outcome is reported as a CommandResult; AllocationError never escapes
execute()/undo(). Anything else (database down, programming errors)
propagates.

Subclasses implement:
    validate()  raise ValidationError / BusinessRuleViolation, no writes
    apply()     the ledger writes, inside ledger.transaction()
    revert()    the exact inverse of apply(), inside ledger.transaction()
    describe()  one-line description
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from allocman.exceptions import (
    AllocationError,
    BusinessRuleViolation,
    LedgerError,
    OperationFailure,
    ValidationError,
)
from allocman.models.enums import CommandStatus
from allocman.protocols.ledger import Ledger

logger = logging.getLogger('allocman')


def validate_quantity(quantity) -> None:
    """Raise INVALID_QUANTITY unless quantity is a positive int (bools excluded)."""
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError('INVALID_QUANTITY', requested=quantity)


@dataclass(frozen=True)
class CommandResult:
    """
    Result of executing or undoing a command.

    Attributes:
        success: Whether the operation was applied
        message: Human-readable outcome
        payload: Operation-specific data (BatchRecord, IssueReceipt, ...)
        code: Error code when success is False
        error: The AllocationError behind a failure
        command: Handle of the command that produced this result
    """

    success: bool
    message: str
    payload: Any = None
    code: str | None = None
    error: AllocationError | None = field(default=None, repr=False)
    command: Command | None = field(default=None, repr=False, compare=False)

    @classmethod
    def ok(cls, message: str, payload: Any = None, command: Command | None = None) -> CommandResult:
        return cls(success=True, message=message, payload=payload, command=command)

    @classmethod
    def failure(cls, error: AllocationError, command: Command | None = None) -> CommandResult:
        return cls(
            success=False,
            message=error.message,
            code=error.code,
            error=error,
            command=command,
        )

    def __bool__(self) -> bool:
        return self.success


class Command:
    """Base class for reversible ledger commands."""

    kind = 'command'

    def __init__(self, ledger: Ledger, today: date | None = None):
        self.ledger = ledger
        self.today = today or date.today()
        self.status = CommandStatus.CREATED

    # ══════════════════════════════════════════════════════════════
    # PUBLIC
    # ══════════════════════════════════════════════════════════════

    @property
    def can_undo(self) -> bool:
        return self.status == CommandStatus.EXECUTED

    def execute(self) -> CommandResult:
        if self.status != CommandStatus.CREATED:
            return self._reject('execute', CommandStatus.CREATED)

        try:
            self.validate()
            with self.ledger.transaction():
                message, payload = self.apply()
        except LedgerError as e:
            self.status = CommandStatus.FAILED
            return self._failed('execute', self._wrap(e))
        except AllocationError as e:
            self.status = CommandStatus.FAILED
            return self._failed('execute', e)

        self.status = CommandStatus.EXECUTED
        logger.info(f"allocation.{self.kind}", extra=self.log_context())
        return CommandResult.ok(message, payload, command=self)

    def undo(self) -> CommandResult:
        if self.status != CommandStatus.EXECUTED:
            return self._reject('undo', CommandStatus.EXECUTED)

        try:
            with self.ledger.transaction():
                message, payload = self.revert()
        except LedgerError as e:
            return self._failed('undo', self._wrap(e))
        except AllocationError as e:
            return self._failed('undo', e)

        self.status = CommandStatus.UNDONE
        logger.info(f"allocation.{self.kind}.undo", extra=self.log_context())
        return CommandResult.ok(message, payload, command=self)

    # ══════════════════════════════════════════════════════════════
    # HOOKS
    # ══════════════════════════════════════════════════════════════

    def validate(self) -> None:
        pass

    def apply(self) -> tuple[str, Any]:
        raise NotImplementedError

    def revert(self) -> tuple[str, Any]:
        raise NotImplementedError

    def describe(self) -> str:
        raise NotImplementedError

    def log_context(self) -> dict[str, Any]:
        return {"command": self.kind}

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    def _wrap(self, cause: LedgerError) -> OperationFailure:
        error = OperationFailure(
            'LEDGER_WRITE_FAILED',
            f"Falha ao gravar no estoque central: {cause}",
            command=self.kind,
        )
        error.__cause__ = cause
        return error

    def _reject(self, action: str, expected: str) -> CommandResult:
        error = BusinessRuleViolation(
            'INVALID_STATE',
            f"Não é possível {'executar' if action == 'execute' else 'desfazer'}: "
            f"comando está '{self.status}'",
            current=str(self.status),
            expected=str(expected),
        )
        return self._failed(action, error)

    def _failed(self, action: str, error: AllocationError) -> CommandResult:
        logger.warning(
            f"allocation.{self.kind}.{action}.failed",
            extra={**self.log_context(), "code": error.code, "error": error.message},
        )
        return CommandResult.failure(error, command=self)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.status}: {self.describe()}>"
