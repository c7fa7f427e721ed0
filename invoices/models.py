"""Database models for invoices."""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Invoice(models.Model):
    """Groups a client's orders under one bill.

    ``subtotal``, ``total`` and ``total_remaining`` are derived from the
    child orders by :func:`invoices.services.recalculate_invoice` and are
    never edited directly.
    """

    DRAFT = 'draft'
    SENT = 'sent'
    PAID = 'paid'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = (
        (DRAFT, 'Draft'),
        (SENT, 'Sent'),
        (PAID, 'Paid'),
        (CANCELLED, 'Cancelled'),
    )

    client = models.ForeignKey('clients.Client', on_delete=models.PROTECT, related_name='invoices')
    # Snapshot of the client at creation (or at an admin client change)
    client_name = models.CharField(max_length=255, blank=True)
    client_phone = models.CharField(max_length=30, blank=True)
    client_factory_name = models.CharField(max_length=255, blank=True)

    invoice_date = models.DateField(default=timezone.localdate)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=DRAFT)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    shipping = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    subtotal = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    total_remaining = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices_created'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['client'], name='invoice_client_idx'),
            models.Index(fields=['status'], name='invoice_status_idx'),
            models.Index(fields=['-invoice_date'], name='invoice_date_idx'),
        ]

    def __str__(self):
        return f"Invoice #{self.pk} - {self.client_name}"

    def apply_client_snapshot(self, client):
        snapshot = client.snapshot()
        self.client = client
        self.client_name = snapshot['name']
        self.client_phone = snapshot['phone']
        self.client_factory_name = snapshot['factory_name']
