"""Invoice aggregation.

Totals are always recomputed from the full set of child orders; there is
no incremental bookkeeping to drift out of sync.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction

from core.events import publish

from .events import invoice_deleted
from .models import Invoice

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    total: Decimal
    total_remaining: Decimal


def compute_invoice_totals(orders, tax=ZERO, shipping=ZERO, discount=ZERO) -> InvoiceTotals:
    """Pure aggregation over ``(total_price, deposit)`` pairs.

    ``subtotal = sum(total_price)``, ``total = subtotal + tax + shipping -
    discount`` and ``total_remaining = total - sum(deposit)``. Missing
    amounts count as zero.
    """
    subtotal = ZERO
    deposits = ZERO
    for total_price, deposit in orders:
        subtotal += total_price or ZERO
        deposits += deposit or ZERO
    total = subtotal + (tax or ZERO) + (shipping or ZERO) - (discount or ZERO)
    return InvoiceTotals(subtotal=subtotal, total=total, total_remaining=total - deposits)


def recalculate_invoice(invoice: Invoice) -> InvoiceTotals:
    """Recompute and persist ``invoice``'s derived totals from its orders."""
    totals = compute_invoice_totals(
        invoice.orders.values_list('total_price', 'deposit'),
        invoice.tax,
        invoice.shipping,
        invoice.discount,
    )
    Invoice.objects.filter(pk=invoice.pk).update(
        subtotal=totals.subtotal,
        total=totals.total,
        total_remaining=totals.total_remaining,
    )
    invoice.subtotal = totals.subtotal
    invoice.total = totals.total
    invoice.total_remaining = totals.total_remaining
    return totals


def recalculate_invoice_by_id(invoice_id) -> InvoiceTotals | None:
    """Best-effort recompute used after order writes; failures are logged."""
    if invoice_id is None:
        return None
    try:
        invoice = Invoice.objects.get(pk=invoice_id)
        return recalculate_invoice(invoice)
    except Invoice.DoesNotExist:
        return None
    except Exception:
        logger.exception('Failed to recalculate invoice %s', invoice_id)
        return None


def delete_invoice(invoice: Invoice, *, actor):
    """Delete ``invoice`` together with its orders."""
    snapshot = {
        'id': invoice.pk,
        'client_name': invoice.client_name,
        'total': invoice.total,
        'order_count': invoice.orders.count(),
    }
    with transaction.atomic():
        invoice.orders.all().delete()
        invoice.delete()
    logger.info(
        'Invoice %s deleted by %s with %d orders',
        snapshot['id'], getattr(actor, 'username', None), snapshot['order_count'],
    )
    publish(invoice_deleted, sender=Invoice, snapshot=snapshot, actor=actor)
    return snapshot
