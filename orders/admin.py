"""Django admin configuration for orders."""

from django.contrib import admin

from inventory.models import InventoryRecord

from .models import Order


class InventoryRecordInline(admin.TabularInline):
    """Stock consumption written when the order was completed."""

    model = InventoryRecord
    extra = 0
    can_delete = False
    # rows come from the ledger only
    max_num = 0

    def get_readonly_fields(self, request, obj=None):
        return [f.name for f in self.model._meta.fields]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ('id', 'client_name', 'type', 'order_state', 'total_price', 'deposit', 'remaining_amount', 'created_at')
    list_filter = ('order_state', 'created_at')
    search_fields = ('id', 'client_name', 'client_phone', 'type')
    # derived by the order services
    readonly_fields = ('order_size', 'remaining_amount', 'stock_deducted', 'created_by', 'updated_by')
    inlines = [InventoryRecordInline]
