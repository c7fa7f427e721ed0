"""Django admin configuration for invoices."""

from django.contrib import admin
from django.utils.html import format_html, format_html_join

from .models import Invoice
from .services import recalculate_invoice


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'client_name', 'invoice_date', 'status', 'subtotal', 'total', 'total_remaining')
    list_filter = ('status', 'invoice_date')
    search_fields = ('client_name', 'client_phone', 'client_factory_name')
    readonly_fields = ('client_name', 'client_phone', 'client_factory_name', 'subtotal', 'total', 'total_remaining', 'get_order_details')

    def save_model(self, request, obj, form, change):
        if not change:
            obj.apply_client_snapshot(obj.client)
            obj.created_by = request.user
        obj.updated_by = request.user
        super().save_model(request, obj, form, change)
        recalculate_invoice(obj)

    # Order rows are rendered with every dynamic value escaped.
    def get_order_details(self, obj):
        rows = format_html_join(
            '',
            '<tr><td>#{}</td><td>{}</td><td>{}</td><td>{}</td><td>{}</td></tr>',
            ((o.pk, o.type, o.order_state, o.total_price, o.deposit) for o in obj.orders.all()),
        )
        return format_html(
            '<table style="width:100%; border-collapse: collapse;">'
            '<thead><tr><th>Order</th><th>Type</th><th>State</th><th>Total</th><th>Deposit</th></tr></thead>'
            '<tbody>{}</tbody>'
            '</table>',
            rows,
        )
    get_order_details.short_description = 'Orders'
