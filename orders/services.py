"""Order lifecycle: create, update and delete with their derived state.

Each operation runs its database writes in one transaction with the order
row locked, then triggers the side effects that must not roll it back
(invoice recalculation, domain events).
"""

import logging

from django.db import transaction
from rest_framework.exceptions import ValidationError

from accounts.models import ADMIN
from core.events import publish
from inventory.services import consume_for_order
from invoices.services import recalculate_invoice_by_id

from .events import order_completed, order_created, order_deleted, order_updated
from .exceptions import OrderDeleteForbidden
from .models import Order
from .pricing import ZERO, calculate_order_size, resolve_pricing

logger = logging.getLogger(__name__)

PRICING_SOURCES = ('material', 'product')
SIZE_FIELDS = ('repeats', 'sheet_height')


def _consume_stock_once(order, actor):
    """Deduct the order's material once; returns True when this call did it.

    The conditional UPDATE on ``stock_deducted`` is the claim; a concurrent
    caller that loses it does nothing. An :class:`InsufficientStockError`
    from the ledger propagates and rolls the claim back with the caller's
    transaction.
    """
    if order.material_id is None or order.stock_deducted:
        return False
    claimed = Order.objects.filter(pk=order.pk, stock_deducted=False).update(stock_deducted=True)
    if not claimed:
        return False
    consume_for_order(order, actor=actor)
    order.stock_deducted = True
    return True


def _require_client(order):
    if order.client_id is None and order.invoice_id is None:
        raise ValidationError({'client': ['Client is required unless the order belongs to an invoice.']})


def _after_write(order, actor, *, invoice_ids, event, completed=False):
    for invoice_id in sorted(i for i in invoice_ids if i is not None):
        recalculate_invoice_by_id(invoice_id)
    publish(event, sender=Order, order=order, actor=actor)
    if completed:
        publish(order_completed, sender=Order, order=order, actor=actor)


def create_order(data, *, actor):
    """Create an order from validated input.

    ``data`` carries model instances for ``client``, ``invoice``,
    ``material`` and ``product``. When no client is given the invoice's
    client and snapshot are used.
    """
    data = dict(data)
    client = data.pop('client', None)
    invoice = data.pop('invoice', None)
    if client is None and invoice is None:
        raise ValidationError({'client': ['Client is required unless the order belongs to an invoice.']})

    material = data.pop('material', None)
    product = data.pop('product', None)
    repeats = data.pop('repeats', 1)
    sheet_height = data.pop('sheet_height', ZERO)
    order_size = calculate_order_size(repeats, sheet_height)
    pricing = resolve_pricing(
        material=material,
        product=product,
        order_size=order_size,
        total_price=data.pop('total_price', None),
        manual_type=data.pop('type', ''),
    )
    deposit = data.pop('deposit', None) or ZERO

    order = Order(
        client=client if client is not None else invoice.client,
        invoice=invoice,
        material=material,
        product=product,
        type=pricing.type,
        repeats=repeats,
        sheet_height=sheet_height,
        order_size=order_size,
        total_price=pricing.total_price,
        deposit=deposit,
        remaining_amount=pricing.total_price - deposit,
        created_by=actor,
        updated_by=actor,
        **data,
    )
    order.apply_client_snapshot(client if client is not None else invoice)

    with transaction.atomic():
        order.save()
        completed = order.order_state == Order.DONE
        if completed:
            _consume_stock_once(order, actor)
    order.refresh_from_db(fields=['total_price', 'deposit', 'remaining_amount', 'order_size'])

    logger.info(
        'Order %s created by %s (%s): type=%s total=%s state=%s',
        order.pk, actor.username, actor.role, order.type, order.total_price, order.order_state,
    )
    _after_write(order, actor, invoice_ids={order.invoice_id}, event=order_created, completed=completed)
    return order


def update_order(order, data, *, actor):
    """Apply a role-filtered partial update.

    Size is recomputed from the stored dimensions when only one of them is
    sent. The price is re-resolved when the pricing source changes, or when
    the size changes while a material or product is attached; otherwise an
    explicit ``total_price`` is taken as is.
    """
    data = dict(data)
    previous_invoice_id = order.invoice_id

    with transaction.atomic():
        locked = Order.objects.select_for_update().get(pk=order.pk)
        previous_state = locked.order_state

        if 'client' in data:
            client = data.pop('client')
            if client is not None and client.pk != locked.client_id:
                locked.apply_client_snapshot(client)
            locked.client = client

        source_changed = False
        for field in PRICING_SOURCES:
            if field in data:
                value = data.pop(field)
                if getattr(locked, f'{field}_id') != (value.pk if value is not None else None):
                    source_changed = True
                setattr(locked, field, value)

        size_changed = any(field in data and data[field] != getattr(locked, field) for field in SIZE_FIELDS)
        supplied_total = data.pop('total_price', None)

        for field, value in data.items():
            setattr(locked, field, value)

        locked.order_size = calculate_order_size(locked.repeats, locked.sheet_height)
        has_source = locked.material_id is not None or locked.product_id is not None
        if source_changed or (size_changed and has_source):
            # The stored total may only stand in for an unpriced source that stayed the same.
            fallback_total = supplied_total
            if fallback_total is None and not source_changed:
                fallback_total = locked.total_price
            pricing = resolve_pricing(
                material=locked.material,
                product=locked.product,
                order_size=locked.order_size,
                total_price=fallback_total,
                manual_type=locked.type,
            )
            locked.type = pricing.type
            locked.total_price = pricing.total_price
        elif supplied_total is not None:
            locked.total_price = supplied_total

        locked.remaining_amount = locked.total_price - locked.deposit
        _require_client(locked)
        locked.updated_by = actor
        locked.save()

        completed = locked.order_state == Order.DONE and previous_state != Order.DONE
        if locked.order_state == Order.DONE:
            _consume_stock_once(locked, actor)

    logger.info(
        'Order %s updated by %s (%s): state %s -> %s, total=%s',
        locked.pk, actor.username, actor.role, previous_state, locked.order_state, locked.total_price,
    )
    _after_write(
        locked, actor,
        invoice_ids={previous_invoice_id, locked.invoice_id},
        event=order_updated,
        completed=completed,
    )
    return locked


def delete_order(order, *, actor):
    """Delete ``order``. Non-admins may only delete their own pending orders."""
    if actor.role != ADMIN:
        if order.order_state != Order.PENDING:
            raise OrderDeleteForbidden(
                'Cannot delete orders that are in progress or completed. Only admin can perform this action.'
            )
        if order.created_by_id != actor.pk:
            raise OrderDeleteForbidden('Not authorized to delete this order.')

    snapshot = order.snapshot()
    with transaction.atomic():
        order.delete()

    logger.info(
        'Order %s deleted by %s (%s); state was %s',
        snapshot['id'], actor.username, actor.role, snapshot['order_state'],
    )
    recalculate_invoice_by_id(snapshot['invoice_id'])
    publish(order_deleted, sender=Order, snapshot=snapshot, actor=actor)
    return snapshot
