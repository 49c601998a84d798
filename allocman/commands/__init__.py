"""
Allocman Commands.

Each command wraps one mutating ledger operation and its exact inverse.
"""

from allocman.commands.base import Command, CommandResult, validate_quantity
from allocman.commands.add_batch import AddBatchCommand
from allocman.commands.remove_batch import RemoveBatchCommand, ensure_removable
from allocman.commands.issue_stock import IssueReceipt, IssueStockCommand

__all__ = [
    "Command",
    "CommandResult",
    "validate_quantity",
    "AddBatchCommand",
    "RemoveBatchCommand",
    "ensure_removable",
    "IssueReceipt",
    "IssueStockCommand",
]
