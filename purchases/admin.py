from django.contrib import admin

from .models import Purchase, PurchaseItem, Supplier


class PurchaseItemInline(admin.TabularInline):
    model = PurchaseItem
    extra = 0
    readonly_fields = ('total_cost',)


@admin.register(Purchase)
class PurchaseAdmin(admin.ModelAdmin):
    list_display = ('purchase_number', 'supplier', 'status', 'total_amount', 'order_date', 'received_date')
    list_filter = ('status',)
    search_fields = ('purchase_number', 'supplier__name')
    readonly_fields = ('purchase_number', 'total_amount', 'received_date')
    inlines = [PurchaseItemInline]


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ('name', 'contact_person', 'phone', 'is_active')
    search_fields = ('name', 'contact_person', 'phone')
