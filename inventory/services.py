"""Stock operations for materials.

Every stock change goes through :func:`_apply`, which locks the material row,
writes exactly one ledger row and one material update in the same
transaction, and clamps the resulting stock at zero.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from django.db import transaction

from core.events import publish

from .events import low_stock, stock_adjusted
from .exceptions import InsufficientStockError
from .models import InventoryRecord, Material, ZERO

logger = logging.getLogger(__name__)


def _as_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _apply(material: Material, compute, *, actor, record_type: str, reason: str = '', notes: str = '', order=None) -> InventoryRecord:
    with transaction.atomic():
        locked = Material.objects.select_for_update().get(pk=material.pk)
        previous = locked.current_stock
        new_stock = max(ZERO, _as_decimal(compute(locked)))

        record = InventoryRecord.objects.create(
            material=locked,
            previous_stock=previous,
            actual_stock=new_stock,
            type=record_type,
            reason=(reason or '')[:200],
            notes=(notes or '')[:500],
            counted_by=actor,
            order=order,
        )
        locked.current_stock = new_stock
        locked.updated_by = actor
        locked.save(update_fields=['current_stock', 'updated_by', 'updated_at'])

    material.current_stock = locked.current_stock
    logger.info(
        'Stock %s for material %s (%s): %s -> %s by %s',
        record_type, locked.pk, locked.name, previous, new_stock, getattr(actor, 'username', None),
    )

    publish(stock_adjusted, sender=Material, material=locked, record=record, actor=actor)
    if locked.is_low_stock:
        publish(low_stock, sender=Material, material=locked, actor=actor)
    return record


def adjust_stock(material, new_stock, *, actor, record_type=InventoryRecord.ADJUSTMENT, reason='', notes='', order=None):
    """Set ``material.current_stock`` to an absolute value (never below zero)."""
    return _apply(material, lambda m: new_stock, actor=actor, record_type=record_type,
                  reason=reason, notes=notes, order=order)


def submit_daily_count(material, actual_stock, *, actor, notes=''):
    return adjust_stock(material, actual_stock, actor=actor, record_type=InventoryRecord.DAILY_COUNT, notes=notes)


def record_wastage(material, amount, *, actor, reason='', notes=''):
    amount = _as_decimal(amount)
    return _apply(material, lambda m: m.current_stock - amount, actor=actor,
                  record_type=InventoryRecord.WASTAGE, reason=reason, notes=notes)


def withdraw(material, quantity, *, actor, reason='', notes=''):
    """Manual withdrawal by the shop floor; cannot take more than is on hand."""
    quantity = _as_decimal(quantity)

    def _compute(m):
        if m.current_stock < quantity:
            raise InsufficientStockError(m, quantity)
        return m.current_stock - quantity

    return _apply(material, _compute, actor=actor, record_type=InventoryRecord.USAGE,
                  reason=reason or 'Material withdrawal', notes=notes)


def receive(material, quantity, *, actor, notes=''):
    quantity = _as_decimal(quantity)
    return _apply(material, lambda m: m.current_stock + quantity, actor=actor,
                  record_type=InventoryRecord.ADJUSTMENT, reason='Purchase received', notes=notes)


def consume_for_order(order, *, actor):
    """Deduct ``order.order_size`` from the order's material.

    Raises :class:`InsufficientStockError` when the locked stock cannot cover
    the order; the caller's transaction is rolled back with it.
    """
    required = _as_decimal(order.order_size)

    def _compute(m):
        if m.current_stock < required:
            raise InsufficientStockError(m, required)
        return m.current_stock - required

    return _apply(order.material, _compute, actor=actor, record_type=InventoryRecord.USAGE,
                  reason=f'Order #{order.pk} completed', order=order)
