"""Purchase receiving."""

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from inventory import services as stock

from .models import Purchase

logger = logging.getLogger(__name__)


def receive_purchase(purchase, *, actor, received_items=None, notes=''):
    """Mark ``purchase`` received and add the quantities to stock.

    ``received_items`` is an optional list of ``{'material': Material,
    'quantity': Decimal}``; when omitted the purchase's own items are used.
    Every quantity goes through the stock ledger.
    """
    with transaction.atomic():
        locked = Purchase.objects.select_for_update().get(pk=purchase.pk)
        if locked.status == Purchase.RECEIVED:
            raise ValidationError({'detail': 'Purchase has already been received.'})
        if locked.status == Purchase.CANCELLED:
            raise ValidationError({'detail': 'Cannot receive a cancelled purchase.'})

        if received_items is None:
            received_items = [
                {'material': item.material, 'quantity': item.quantity}
                for item in locked.items.select_related('material')
            ]

        records = [
            stock.receive(item['material'], item['quantity'], actor=actor,
                          notes=notes or f'Purchase {locked.purchase_number}')
            for item in received_items
        ]

        locked.status = Purchase.RECEIVED
        locked.received_date = timezone.now()
        locked.updated_by = actor
        if notes:
            locked.notes = notes[:500]
        locked.save(update_fields=['status', 'received_date', 'updated_by', 'notes', 'updated_at'])

    logger.info('Purchase %s received by %s (%d items)', locked.purchase_number, getattr(actor, 'username', None), len(records))
    return locked, records
