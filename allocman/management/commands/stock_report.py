"""
Management command to print low stock and expiring batches.

Usage:
    python manage.py stock_report
    python manage.py stock_report --low-stock 5 --days 15
"""

from django.core.management.base import BaseCommand

from allocman.adapters import get_ledger
from allocman.services.reports import expiry_report, low_stock_report


class Command(BaseCommand):
    """Stock report command."""

    help = 'Lista lotes com estoque baixo e lotes próximos do vencimento'

    def add_arguments(self, parser):
        parser.add_argument(
            '--low-stock',
            type=int,
            default=None,
            help='Limite de estoque baixo (padrão: ALLOCMAN LOW_STOCK_THRESHOLD)'
        )
        parser.add_argument(
            '--days',
            type=int,
            default=None,
            help='Janela de vencimento em dias (padrão: ALLOCMAN EXPIRY_WINDOW_DAYS)'
        )

    def handle(self, *args, **options):
        ledger = get_ledger()

        low = low_stock_report(ledger, options['low_stock'])
        self.stdout.write(self.style.MIGRATE_HEADING('Estoque baixo'))
        if not low:
            self.stdout.write('  Nenhum lote com estoque baixo')
        for batch in low:
            self.stdout.write(
                f'  Lote #{batch.id} {batch.product_code}: '
                f'{batch.remaining_quantity} unidade(s)'
            )

        expiring = expiry_report(ledger, options['days'])
        self.stdout.write(self.style.MIGRATE_HEADING('Vencimento próximo'))
        if not expiring:
            self.stdout.write('  Nenhum lote próximo do vencimento')
        for entry in expiring:
            line = (
                f'  Lote #{entry.batch.id} {entry.batch.product_code}: '
                f'{entry.batch.remaining_quantity} unidade(s), '
                f'validade {entry.batch.expiry_date}'
            )
            if entry.expired:
                self.stdout.write(self.style.ERROR(f'{line} (VENCIDO)'))
            else:
                self.stdout.write(self.style.WARNING(f'{line} ({entry.days_left} dias)'))

        self.stdout.write(
            self.style.SUCCESS(f'{len(low)} lote(s) com estoque baixo, {len(expiring)} a vencer')
        )
