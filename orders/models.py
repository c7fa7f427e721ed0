"""Database models for production orders."""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Order(models.Model):
    """A production job for a client, optionally grouped under an invoice.

    ``order_size``, ``total_price`` and ``remaining_amount`` are derived by
    :mod:`orders.services`; ``stock_deducted`` flips to True the first time
    the order is completed and the material stock is consumed.
    """

    PENDING = 'pending'
    ACTIVE = 'active'
    DONE = 'done'
    DELIVERED = 'delivered'
    STATE_CHOICES = (
        (PENDING, 'Pending'),
        (ACTIVE, 'Active'),
        (DONE, 'Done'),
        (DELIVERED, 'Delivered'),
    )

    client = models.ForeignKey(
        'clients.Client', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    # Client snapshot, frozen at creation
    client_name = models.CharField(max_length=255, blank=True)
    client_phone = models.CharField(max_length=30, blank=True)
    client_factory_name = models.CharField(max_length=255, blank=True)

    invoice = models.ForeignKey(
        'invoices.Invoice', on_delete=models.CASCADE, null=True, blank=True, related_name='orders'
    )
    material = models.ForeignKey(
        'inventory.Material', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )
    product = models.ForeignKey(
        'products.Product', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )

    type = models.CharField(max_length=100, blank=True)
    repeats = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    sheet_width = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    sheet_height = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    order_size = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    deposit = models.DecimalField(max_digits=14, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    remaining_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    order_state = models.CharField(max_length=10, choices=STATE_CHOICES, default=PENDING)
    stock_deducted = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    design_link = models.CharField(max_length=500, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='orders_created'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['order_state', '-created_at'], name='order_state_idx'),
            models.Index(fields=['client', '-created_at'], name='order_client_idx'),
            models.Index(fields=['invoice'], name='order_invoice_idx'),
            models.Index(fields=['-created_at'], name='order_created_idx'),
        ]

    def __str__(self):
        return f"Order #{self.pk} - {self.client_name or 'no client'}"

    def apply_client_snapshot(self, source):
        """Copy name/phone/factory from a client or an invoice."""
        if hasattr(source, 'snapshot'):
            snapshot = source.snapshot()
        else:
            snapshot = {
                'name': source.client_name,
                'phone': source.client_phone,
                'factory_name': source.client_factory_name,
            }
        self.client_name = snapshot['name'] or ''
        self.client_phone = snapshot['phone'] or ''
        self.client_factory_name = snapshot['factory_name'] or ''

    def snapshot(self):
        """Plain dict describing the order, used as event payload after deletion."""
        return {
            'id': self.pk,
            'client_name': self.client_name,
            'type': self.type,
            'order_state': self.order_state,
            'total_price': self.total_price,
            'invoice_id': self.invoice_id,
        }
