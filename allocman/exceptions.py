"""
Exceptions for Allocman.

All errors are AllocationError with a structured code for programmatic handling.

Taxonomy:
    ValidationError        malformed input, rejected before any lookup
    BusinessRuleViolation  rejected after lookup, before any mutation
    OperationFailure       the ledger write itself failed (cause attached)

LedgerError is raised by ledger adapters when a write cannot be applied
(conditional update matched no row, integrity error). Commands wrap it
in OperationFailure.
"""

from decimal import Decimal
from typing import Any


class AllocationError(Exception):
    """
    Structured exception for allocation operations.

    Usage:
        try:
            command.run()
        except AllocationError as e:
            if e.code == 'BATCH_HAS_SALES':
                print(f"Lote {e.data['batch_id']} já foi vendido")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"


class ValidationError(AllocationError):
    """Malformed input."""

    _default_messages = {
        'PRODUCT_CODE_REQUIRED': 'Código do produto é obrigatório',
        'INVALID_QUANTITY': 'Quantidade inválida (deve ser positiva)',
        'INVALID_CHANNEL': 'Canal de venda inválido',
        'INVALID_PRICE': 'Preço de compra inválido (positivo, até 2 casas decimais)',
        'PURCHASE_DATE_REQUIRED': 'Data de compra é obrigatória',
        'PURCHASE_DATE_IN_FUTURE': 'Data de compra não pode estar no futuro',
        'EXPIRY_BEFORE_PURCHASE': 'Data de validade anterior à data de compra',
    }


class BusinessRuleViolation(AllocationError):
    """Input is well formed but the current ledger state forbids the operation."""

    _default_messages = {
        'BATCH_NOT_FOUND': 'Lote não encontrado',
        'BATCH_IN_PHYSICAL_STORE': 'Lote possui estoque na loja física',
        'BATCH_IN_ONLINE_STORE': 'Lote possui estoque na loja online',
        'BATCH_HAS_SALES': 'Lote possui vendas registradas',
        'BATCH_EXPIRED': 'Lote vencido',
        'BATCH_EMPTY': 'Lote sem saldo',
        'PRODUCT_MISMATCH': 'Lote não pertence ao produto solicitado',
        'UNKNOWN_PRODUCT': 'Produto desconhecido',
        'INVALID_STATE': 'Estado inválido para esta operação',
        'NOT_LAST_COMMAND': 'Somente a última operação pode ser desfeita',
        'NOTHING_TO_UNDO': 'Nenhuma operação para desfazer',
    }


class OperationFailure(AllocationError):
    """The ledger rejected or failed a write."""

    _default_messages = {
        'LEDGER_WRITE_FAILED': 'Falha ao gravar no estoque central',
    }


class LedgerError(Exception):
    """Raised by ledger adapters when a write cannot be applied."""
