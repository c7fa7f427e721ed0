"""Drop cached read models whenever the underlying data changes."""

from django.dispatch import receiver

from inventory.events import stock_adjusted
from invoices.events import invoice_created, invoice_deleted, invoice_updated
from orders.events import order_created, order_deleted, order_updated

from .cache import invalidate


@receiver(order_created)
@receiver(order_updated)
@receiver(order_deleted)
def invalidate_order_views(sender, **kwargs):
    invalidate('dashboard', 'timeseries')


@receiver(invoice_created)
@receiver(invoice_updated)
@receiver(invoice_deleted)
@receiver(stock_adjusted)
def invalidate_dashboard(sender, **kwargs):
    invalidate('dashboard')
