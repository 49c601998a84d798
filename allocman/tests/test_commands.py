"""
Tests for the command set, run against the in-memory ledger.
"""

from datetime import date
from decimal import Decimal

import pytest

from allocman.commands import (
    AddBatchCommand,
    CommandResult,
    IssueReceipt,
    IssueStockCommand,
    RemoveBatchCommand,
)
from allocman.exceptions import LedgerError, OperationFailure, ValidationError
from allocman.models.enums import Channel, CommandStatus


def add(ledger, today, **overrides):
    params = {
        'product_code': 'BEV-001',
        'quantity': 50,
        'purchase_price': Decimal('2.50'),
        'purchase_date': date(2024, 11, 10),
        'expiry_date': date(2025, 1, 10),
        'supplier': 'Fornecedor A',
    }
    params.update(overrides)
    return AddBatchCommand(ledger, today=today, **params)


@pytest.fixture
def batch(ledger):
    return ledger.create_batch(
        product_code='BEV-001',
        quantity=20,
        purchase_price=Decimal('2.50'),
        purchase_date=date(2024, 11, 10),
        expiry_date=date(2025, 1, 10),
        supplier='Fornecedor A',
    )


class TestAddBatch:
    """Tests for AddBatchCommand."""

    def test_creates_batch(self, ledger, today):
        result = add(ledger, today).execute()

        assert result.success
        record = result.payload
        assert ledger.get_batch(record.id) == record
        assert record.remaining_quantity == record.quantity_received == 50
        assert "adicionado" in result.message

    def test_accepts_string_price(self, ledger, today):
        result = add(ledger, today, purchase_price='3.10').execute()

        assert result.success
        assert result.payload.purchase_price == Decimal('3.10')

    def test_price_quantized_to_cents(self, ledger, today):
        result = add(ledger, today, purchase_price=Decimal('4.5')).execute()

        assert result.payload.purchase_price.as_tuple().exponent == -2
        assert str(result.payload.purchase_price) == '4.50'

    @pytest.mark.parametrize('overrides, code', [
        ({'quantity': 0}, 'INVALID_QUANTITY'),
        ({'quantity': -5}, 'INVALID_QUANTITY'),
        ({'quantity': True}, 'INVALID_QUANTITY'),
        ({'quantity': '50'}, 'INVALID_QUANTITY'),
        ({'purchase_price': Decimal('0')}, 'INVALID_PRICE'),
        ({'purchase_price': 'abc'}, 'INVALID_PRICE'),
        ({'purchase_price': Decimal('0.001')}, 'INVALID_PRICE'),
        ({'purchase_price': Decimal('10000000000')}, 'INVALID_PRICE'),
        ({'purchase_date': None}, 'PURCHASE_DATE_REQUIRED'),
        ({'purchase_date': date(2024, 12, 2)}, 'PURCHASE_DATE_IN_FUTURE'),
        ({'expiry_date': date(2024, 11, 9)}, 'EXPIRY_BEFORE_PURCHASE'),
        ({'product_code': ''}, 'PRODUCT_CODE_REQUIRED'),
    ])
    def test_validation(self, ledger, today, overrides, code):
        command = add(ledger, today, **overrides)
        result = command.execute()

        assert not result.success
        assert result.code == code
        assert isinstance(result.error, ValidationError)
        assert command.status == CommandStatus.FAILED
        assert ledger.batches_with_stock('BEV-001') == []

    def test_purchase_today_accepted(self, ledger, today):
        assert add(ledger, today, purchase_date=today).execute().success

    def test_expiry_same_day_as_purchase_accepted(self, ledger, today):
        assert add(ledger, today, expiry_date=date(2024, 11, 10)).execute().success

    def test_undo_deletes_created_batch(self, ledger, today):
        command = add(ledger, today)
        record = command.execute().payload

        result = command.undo()

        assert result.success
        assert ledger.get_batch(record.id) is None
        assert command.status == CommandStatus.UNDONE

    def test_undo_refused_once_batch_issued(self, ledger, today):
        command = add(ledger, today)
        record = command.execute().payload
        ledger.reduce_remaining(record.id, 5)
        ledger.add_to_channel(record.id, Channel.ONLINE, 5)

        result = command.undo()

        assert not result.success
        assert result.code == 'BATCH_IN_ONLINE_STORE'
        assert command.status == CommandStatus.EXECUTED
        assert ledger.get_batch(record.id) is not None

    def test_describe(self, ledger, today):
        assert add(ledger, today).describe() == (
            "Adicionar lote de BEV-001: 50 unidades de Fornecedor A"
        )


class TestRemoveBatch:
    """Tests for RemoveBatchCommand."""

    def test_removes_untouched_batch(self, ledger, today, batch):
        result = RemoveBatchCommand(ledger, batch.id, today=today).execute()

        assert result.success
        assert result.payload == batch
        assert ledger.get_batch(batch.id) is None

    def test_not_found(self, ledger, today):
        result = RemoveBatchCommand(ledger, 999, today=today).execute()

        assert result.code == 'BATCH_NOT_FOUND'

    @pytest.mark.parametrize('channel, code', [
        (Channel.PHYSICAL, 'BATCH_IN_PHYSICAL_STORE'),
        (Channel.ONLINE, 'BATCH_IN_ONLINE_STORE'),
    ])
    def test_refused_with_channel_stock(self, ledger, today, batch, channel, code):
        ledger.reduce_remaining(batch.id, 3)
        ledger.add_to_channel(batch.id, channel, 3)

        result = RemoveBatchCommand(ledger, batch.id, today=today).execute()

        assert not result.success
        assert result.code == code
        assert result.error.data['quantity'] == 3
        assert ledger.get_batch(batch.id) is not None

    def test_refused_with_sales(self, ledger, today, batch):
        ledger.reduce_remaining(batch.id, 2)
        ledger.add_to_channel(batch.id, Channel.PHYSICAL, 2)
        ledger.record_sale(batch.id, Channel.PHYSICAL, 2)

        result = RemoveBatchCommand(ledger, batch.id, today=today).execute()

        assert result.code == 'BATCH_HAS_SALES'
        assert ledger.get_batch(batch.id) is not None

    def test_physical_checked_before_online(self, ledger, today, batch):
        ledger.reduce_remaining(batch.id, 4)
        ledger.add_to_channel(batch.id, Channel.PHYSICAL, 2)
        ledger.add_to_channel(batch.id, Channel.ONLINE, 2)

        result = RemoveBatchCommand(ledger, batch.id, today=today).execute()

        assert result.code == 'BATCH_IN_PHYSICAL_STORE'

    def test_undo_recreates_identical_record(self, ledger, today, batch):
        command = RemoveBatchCommand(ledger, batch.id, today=today)
        command.execute()

        result = command.undo()

        assert result.success
        assert ledger.get_batch(batch.id) == batch


class TestIssueStock:
    """Tests for IssueStockCommand."""

    def test_issues_requested_amount(self, ledger, today, batch):
        command = IssueStockCommand(ledger, batch, 'BEV-001', 15, Channel.PHYSICAL, today=today)
        result = command.execute()

        assert result.success
        receipt = result.payload
        assert isinstance(receipt, IssueReceipt)
        assert receipt.quantity == 15
        assert not receipt.partial
        assert receipt.batch_remaining == 5
        assert ledger.get_batch(batch.id).remaining_quantity == 5
        assert ledger.channel_quantity(batch.id, Channel.PHYSICAL) == 15

    def test_partial_issue(self, ledger, today, batch):
        result = IssueStockCommand(ledger, batch, 'BEV-001', 60, 'online', today=today).execute()

        assert result.success
        assert result.payload.quantity == 20
        assert result.payload.partial
        assert "Atendimento parcial" in result.message
        assert ledger.get_batch(batch.id).remaining_quantity == 0
        assert ledger.channel_quantity(batch.id, Channel.ONLINE) == 20

    def test_critical_expiry_warning(self, ledger, today):
        soon = ledger.create_batch('BEV-001', 10, Decimal('1'), date(2024, 11, 1),
                                   expiry_date=date(2024, 12, 11))

        result = IssueStockCommand(ledger, soon, 'BEV-001', 5, Channel.PHYSICAL, today=today).execute()

        assert "ATENÇÃO: lote vence em 10 dias" in result.message

    def test_undo_restores_both_quantities(self, ledger, today, batch):
        command = IssueStockCommand(ledger, batch, 'BEV-001', 15, Channel.PHYSICAL, today=today)
        command.execute()

        result = command.undo()

        assert result.success
        assert ledger.get_batch(batch.id).remaining_quantity == 20
        assert ledger.channel_quantity(batch.id, Channel.PHYSICAL) == 0

    @pytest.mark.parametrize('quantity', [0, -1, True, None, 2.0])
    def test_invalid_quantity(self, ledger, today, batch, quantity):
        result = IssueStockCommand(ledger, batch, 'BEV-001', quantity, Channel.PHYSICAL,
                                   today=today).execute()

        assert result.code == 'INVALID_QUANTITY'
        assert ledger.get_batch(batch.id).remaining_quantity == 20

    def test_invalid_channel(self, ledger, today, batch):
        result = IssueStockCommand(ledger, batch, 'BEV-001', 5, 'warehouse', today=today).execute()

        assert result.code == 'INVALID_CHANNEL'

    def test_empty_batch(self, ledger, today, batch):
        empty = batch.with_remaining(0)

        result = IssueStockCommand(ledger, empty, 'BEV-001', 5, Channel.PHYSICAL, today=today).execute()

        assert result.code == 'BATCH_EMPTY'

    def test_product_mismatch(self, ledger, today, batch):
        result = IssueStockCommand(ledger, batch, 'BEV-002', 5, Channel.PHYSICAL, today=today).execute()

        assert result.code == 'PRODUCT_MISMATCH'
        assert ledger.get_batch(batch.id).remaining_quantity == 20

    def test_expired_batch(self, ledger, batch):
        result = IssueStockCommand(ledger, batch, 'BEV-001', 5, Channel.PHYSICAL,
                                   today=date(2025, 1, 11)).execute()

        assert result.code == 'BATCH_EXPIRED'
        assert ledger.channel_quantity(batch.id, Channel.PHYSICAL) == 0

    def test_expires_today_is_not_expired(self, ledger, batch):
        result = IssueStockCommand(ledger, batch, 'BEV-001', 5, Channel.PHYSICAL,
                                   today=date(2025, 1, 10)).execute()

        assert result.success

    def test_stale_selection_fails_without_partial_write(self, ledger, today, batch):
        """The ledger guard rejects the decrement; nothing is written."""
        ledger.reduce_remaining(batch.id, 18)

        result = IssueStockCommand(ledger, batch, 'BEV-001', 15, Channel.PHYSICAL,
                                   today=today).execute()

        assert not result.success
        assert result.code == 'LEDGER_WRITE_FAILED'
        assert isinstance(result.error, OperationFailure)
        assert isinstance(result.error.__cause__, LedgerError)
        assert ledger.get_batch(batch.id).remaining_quantity == 2
        assert ledger.channel_quantity(batch.id, Channel.PHYSICAL) == 0

    def test_failed_undo_rolls_back_and_stays_executed(self, ledger, today, batch):
        command = IssueStockCommand(ledger, batch, 'BEV-001', 15, Channel.PHYSICAL, today=today)
        command.execute()
        ledger.record_sale(batch.id, Channel.PHYSICAL, 10)

        result = command.undo()

        assert not result.success
        assert result.code == 'LEDGER_WRITE_FAILED'
        assert command.status == CommandStatus.EXECUTED
        assert command.can_undo
        assert ledger.get_batch(batch.id).remaining_quantity == 5
        assert ledger.channel_quantity(batch.id, Channel.PHYSICAL) == 5


class TestLifecycle:
    """State machine shared by all commands."""

    def test_execute_twice(self, ledger, today):
        command = add(ledger, today)
        command.execute()

        result = command.execute()

        assert not result.success
        assert result.code == 'INVALID_STATE'
        assert len(ledger.batches_with_stock('BEV-001')) == 1

    def test_undo_twice(self, ledger, today):
        command = add(ledger, today)
        command.execute()
        command.undo()

        result = command.undo()

        assert result.code == 'INVALID_STATE'
        assert command.status == CommandStatus.UNDONE

    def test_undo_before_execute(self, ledger, today):
        command = add(ledger, today)

        result = command.undo()

        assert result.code == 'INVALID_STATE'
        assert command.status == CommandStatus.CREATED

    def test_failed_command_is_terminal(self, ledger, today):
        command = add(ledger, today, quantity=0)
        command.execute()

        assert command.status == CommandStatus.FAILED
        assert not command.can_undo
        assert command.execute().code == 'INVALID_STATE'

    def test_result_carries_command_handle(self, ledger, today):
        command = add(ledger, today)
        result = command.execute()

        assert isinstance(result, CommandResult)
        assert result.command is command
        assert bool(result) is True

    def test_error_as_dict(self, ledger, today):
        result = add(ledger, today, quantity=-1).execute()

        assert result.error.as_dict() == {
            'code': 'INVALID_QUANTITY',
            'message': 'Quantidade inválida (deve ser positiva)',
            'data': {'requested': -1},
        }
