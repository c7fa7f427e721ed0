"""Order domain events.

Sent after commit through :func:`core.events.publish`.
"""

from django.dispatch import Signal

# kwargs: order, actor
order_created = Signal()
order_updated = Signal()
order_completed = Signal()

# kwargs: snapshot (dict), actor
order_deleted = Signal()
