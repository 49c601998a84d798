"""
Initial migration for Allocman models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Allocman models: Batch, ChannelStock, Sale."""

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Batch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_code', models.CharField(db_index=True, max_length=50, verbose_name='Código do Produto')),
                ('quantity_received', models.PositiveIntegerField(verbose_name='Quantidade Recebida')),
                ('remaining_quantity', models.PositiveIntegerField(help_text='Saldo ainda não enviado para os canais', verbose_name='Quantidade Restante')),
                ('purchase_price', models.DecimalField(decimal_places=2, max_digits=12, verbose_name='Preço de Compra')),
                ('purchase_date', models.DateField(verbose_name='Data de Compra')),
                ('expiry_date', models.DateField(blank=True, db_index=True, help_text='Último dia em que o lote pode ser vendido', null=True, verbose_name='Data de Validade')),
                ('supplier', models.CharField(blank=True, default='', max_length=200, verbose_name='Fornecedor')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Criado em')),
            ],
            options={
                'verbose_name': 'Lote',
                'verbose_name_plural': 'Lotes',
                'ordering': ['expiry_date', 'purchase_date'],
                'indexes': [models.Index(fields=['product_code', 'remaining_quantity'], name='batch_product_stock_idx')],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('remaining_quantity__lte', models.F('quantity_received'))), name='batch_remaining_within_received'),
                    models.CheckConstraint(condition=models.Q(('expiry_date__isnull', True), ('expiry_date__gte', models.F('purchase_date')), _connector='OR'), name='batch_expiry_not_before_purchase'),
                ],
            },
        ),
        migrations.CreateModel(
            name='ChannelStock',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('channel', models.CharField(choices=[('physical', 'Loja física'), ('online', 'Loja online')], max_length=20, verbose_name='Canal')),
                ('quantity', models.PositiveIntegerField(default=0, verbose_name='Quantidade')),
                ('restocked_at', models.DateTimeField(blank=True, null=True, verbose_name='Reabastecido em')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='channel_stock', to='allocman.batch', verbose_name='Lote')),
            ],
            options={
                'verbose_name': 'Estoque do Canal',
                'verbose_name_plural': 'Estoques dos Canais',
                'ordering': ['batch', 'channel'],
                'constraints': [
                    models.UniqueConstraint(fields=('batch', 'channel'), name='unique_channel_stock_per_batch'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='channel_stock_not_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Sale',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('channel', models.CharField(choices=[('physical', 'Loja física'), ('online', 'Loja online')], max_length=20, verbose_name='Canal')),
                ('quantity', models.PositiveIntegerField(verbose_name='Quantidade')),
                ('reference', models.CharField(blank=True, default='', help_text='Ex: número da nota, id do pedido', max_length=100, verbose_name='Referência')),
                ('sold_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Vendido em')),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales', to='allocman.batch', verbose_name='Lote')),
            ],
            options={
                'verbose_name': 'Venda',
                'verbose_name_plural': 'Vendas',
                'ordering': ['sold_at'],
            },
        ),
    ]
