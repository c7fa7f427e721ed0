from django.contrib import admin

from .models import InventoryRecord, Material


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = ('name', 'category', 'unit', 'current_stock', 'min_stock_level', 'selling_price', 'is_order_type', 'is_active')
    list_filter = ('category', 'is_order_type', 'is_active')
    search_fields = ('name', 'description')
    readonly_fields = ('current_stock', 'created_at', 'updated_at')


@admin.register(InventoryRecord)
class InventoryRecordAdmin(admin.ModelAdmin):
    """Ledger rows are read-only in the admin."""

    list_display = ('material', 'type', 'previous_stock', 'actual_stock', 'difference', 'counted_by', 'date')
    list_filter = ('type',)
    search_fields = ('material__name', 'reason')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
