"""Receivers turning domain events into notifications."""

from django.dispatch import receiver

from accounts.models import ADMIN, DESIGNER, FINANCIAL, WORKER
from inventory.events import low_stock
from invoices.events import invoice_created, invoice_deleted, invoice_updated
from orders.events import order_completed, order_created, order_deleted, order_updated

from .dispatcher import notify_roles

CREATE_AUDIENCE = (ADMIN, DESIGNER, WORKER)
CHANGE_AUDIENCE = (ADMIN, DESIGNER, WORKER, FINANCIAL)


def _actor_name(actor):
    return getattr(actor, 'display_name', None) or getattr(actor, 'username', 'system')


@receiver(order_created)
def notify_order_created(sender, order, actor, **kwargs):
    notify_roles(
        CREATE_AUDIENCE,
        title='New order',
        message=f'{_actor_name(actor)} created order #{order.pk} ({order.type}) for {order.client_name}.',
        type='order',
        related_id=order.pk,
        related_type='order',
        action_url=f'/orders/{order.pk}',
    )


@receiver(order_updated)
def notify_order_updated(sender, order, actor, **kwargs):
    notify_roles(
        CHANGE_AUDIENCE,
        title='Order updated',
        message=f'{_actor_name(actor)} updated order #{order.pk}; state is {order.get_order_state_display()}.',
        type='order',
        related_id=order.pk,
        related_type='order',
        action_url=f'/orders/{order.pk}',
    )


@receiver(order_completed)
def notify_order_completed(sender, order, actor, **kwargs):
    notify_roles(
        (ADMIN, FINANCIAL),
        title='Order completed',
        message=f'Order #{order.pk} for {order.client_name} is done (total {order.total_price}).',
        type='order',
        related_id=order.pk,
        related_type='order',
        action_url=f'/orders/{order.pk}',
    )


@receiver(order_deleted)
def notify_order_deleted(sender, snapshot, actor, **kwargs):
    notify_roles(
        CHANGE_AUDIENCE,
        title='Order deleted',
        message=f'{_actor_name(actor)} deleted order #{snapshot["id"]} for {snapshot["client_name"]}.',
        type='order',
        related_id=snapshot['id'],
        related_type='order',
    )


@receiver(invoice_created)
@receiver(invoice_updated)
def notify_invoice_changed(sender, invoice, actor, signal, **kwargs):
    verb = 'created' if signal is invoice_created else 'updated'
    notify_roles(
        CHANGE_AUDIENCE,
        title=f'Invoice {verb}',
        message=f'{_actor_name(actor)} {verb} invoice #{invoice.pk} for {invoice.client_name}.',
        type='invoice',
        related_id=invoice.pk,
        related_type='invoice',
        action_url=f'/invoices/{invoice.pk}',
    )


@receiver(invoice_deleted)
def notify_invoice_deleted(sender, snapshot, actor, **kwargs):
    notify_roles(
        CHANGE_AUDIENCE,
        title='Invoice deleted',
        message=(
            f'{_actor_name(actor)} deleted invoice #{snapshot["id"]} for {snapshot["client_name"]} '
            f'with {snapshot["order_count"]} orders.'
        ),
        type='invoice',
        related_id=snapshot['id'],
        related_type='invoice',
    )


@receiver(low_stock)
def notify_low_stock(sender, material, actor, **kwargs):
    notify_roles(
        (ADMIN,),
        title='Low stock',
        message=(
            f'{material.name} is at {material.current_stock} {material.unit} '
            f'(minimum {material.min_stock_level}).'
        ),
        type='inventory',
        related_id=material.pk,
        related_type='material',
        action_url=f'/materials/{material.pk}',
    )
