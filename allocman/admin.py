"""
Allocman Admin — read-only views for inspection and debugging.

Stock only changes through the Allocator, so nothing here can add,
edit or delete:
- Batch: quantities, dates, supplier, per-channel stock inline
- ChannelStock: units of each batch in the physical and online stores
- Sale: historical sale lines
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from allocman.models import Batch, ChannelStock, Sale


class ReadOnlyAdminMixin:
    """Deny add/change/delete; the changelist stays viewable."""

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# BATCH ADMIN
# =========================================================================

class ChannelStockInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = ChannelStock
    fields = ['channel', 'quantity', 'restocked_at']
    readonly_fields = fields
    extra = 0


@admin.register(Batch)
class BatchAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Batch admin — read-only."""

    list_display = ['id', 'product_code', 'remaining_quantity', 'quantity_received',
                    'purchase_date', 'expiry_date', 'expired_display', 'supplier']
    list_filter = ['purchase_date', 'expiry_date', 'supplier']
    search_fields = ['product_code', 'supplier']
    readonly_fields = ['product_code', 'quantity_received', 'remaining_quantity',
                       'purchase_price', 'purchase_date', 'expiry_date', 'supplier',
                       'created_at']
    date_hierarchy = 'purchase_date'
    inlines = [ChannelStockInline]

    @admin.display(description=_('Vencido'), boolean=True)
    def expired_display(self, obj):
        return obj.is_expired


# =========================================================================
# CHANNEL STOCK ADMIN
# =========================================================================

@admin.register(ChannelStock)
class ChannelStockAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Channel stock admin — read-only."""

    list_display = ['batch', 'product_display', 'channel', 'quantity', 'restocked_at']
    list_filter = ['channel']
    search_fields = ['batch__product_code']
    list_select_related = ['batch']

    @admin.display(description=_('Produto'))
    def product_display(self, obj):
        return obj.batch.product_code


# =========================================================================
# SALE ADMIN
# =========================================================================

@admin.register(Sale)
class SaleAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Sale admin — read-only history."""

    list_display = ['sold_at', 'batch', 'channel', 'quantity', 'reference']
    list_filter = ['channel', 'sold_at']
    search_fields = ['reference', 'batch__product_code']
    date_hierarchy = 'sold_at'
    list_select_related = ['batch']
