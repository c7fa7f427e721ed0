"""Invoice domain events."""

from django.dispatch import Signal

# kwargs: invoice, actor
invoice_created = Signal()
invoice_updated = Signal()

# kwargs: snapshot (dict), actor
invoice_deleted = Signal()
