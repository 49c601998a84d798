"""
Django Allocman — Alocação de Estoque por Lote.

Escolhe o lote certo (validade primeiro, depois o mais antigo), envia
para a loja física ou online e permite desfazer.

Uso:
    from allocman import Allocator, Channel

    allocator = Allocator()
    allocator.issue_stock("BEV-001", 15, Channel.PHYSICAL)
    allocator.undo_last()
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'Allocator':
        from allocman.service import Allocator
        return Allocator
    elif name == 'IssueOutcome':
        from allocman.service import IssueOutcome
        return IssueOutcome
    elif name == 'CommandResult':
        from allocman.commands.base import CommandResult
        return CommandResult
    elif name == 'AllocationError':
        from allocman.exceptions import AllocationError
        return AllocationError
    elif name == 'BatchRecord':
        from allocman.protocols.ledger import BatchRecord
        return BatchRecord
    elif name == 'Channel':
        from allocman.models.enums import Channel
        return Channel
    elif name == 'Batch':
        from allocman.models.batch import Batch
        return Batch
    elif name == 'ChannelStock':
        from allocman.models.channel import ChannelStock
        return ChannelStock
    elif name == 'Sale':
        from allocman.models.sale import Sale
        return Sale
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'Allocator',
    'IssueOutcome',
    'CommandResult',
    'AllocationError',
    'BatchRecord',
    'Channel',
    'Batch',
    'ChannelStock',
    'Sale',
]

__version__ = '0.1.0'
