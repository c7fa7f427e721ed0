"""Database models for suppliers and purchase orders."""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Supplier(models.Model):
    PAYMENT_TERMS_CHOICES = (
        ('cash', 'Cash'),
        ('net_15', 'Net 15'),
        ('net_30', 'Net 30'),
        ('net_60', 'Net 60'),
    )

    name = models.CharField(max_length=100)
    contact_person = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=30)
    email = models.EmailField(blank=True)
    address = models.CharField(max_length=300, blank=True)
    payment_terms = models.CharField(max_length=10, choices=PAYMENT_TERMS_CHOICES, default='cash')
    notes = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='supplier_name_idx'),
            models.Index(fields=['is_active'], name='supplier_active_idx'),
        ]

    def __str__(self):
        return self.name


class Purchase(models.Model):
    """A purchase order; receiving it adds each item's quantity to stock."""

    PENDING = 'pending'
    ORDERED = 'ordered'
    RECEIVED = 'received'
    CANCELLED = 'cancelled'
    STATUS_CHOICES = (
        (PENDING, 'Pending'),
        (ORDERED, 'Ordered'),
        (RECEIVED, 'Received'),
        (CANCELLED, 'Cancelled'),
    )
    DELETABLE_STATUSES = (PENDING, CANCELLED)

    purchase_number = models.CharField(max_length=30, unique=True, editable=False)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchases')
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=PENDING)
    order_date = models.DateTimeField(default=timezone.now)
    expected_delivery = models.DateField(null=True, blank=True)
    received_date = models.DateTimeField(null=True, blank=True)
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    notes = models.CharField(max_length=500, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-order_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='purchase_status_idx'),
            models.Index(fields=['-order_date'], name='purchase_date_idx'),
        ]

    def __str__(self):
        return self.purchase_number

    @staticmethod
    def next_number(day=None):
        """``PO-YYYYMMDD-NNNN``, sequential per day."""
        day = day or timezone.localdate()
        prefix = f"PO-{day:%Y%m%d}-"
        last = (
            Purchase.objects.filter(purchase_number__startswith=prefix)
            .order_by('-purchase_number')
            .values_list('purchase_number', flat=True)
            .first()
        )
        seq = int(last.rsplit('-', 1)[1]) + 1 if last else 1
        return f"{prefix}{seq:04d}"

    def save(self, *args, **kwargs):
        if not self.purchase_number:
            self.purchase_number = Purchase.next_number()
        super().save(*args, **kwargs)

    def recalculate_total(self):
        total = sum((item.total_cost for item in self.items.all()), Decimal('0'))
        self.total_amount = total
        return total


class PurchaseItem(models.Model):
    purchase = models.ForeignKey(Purchase, on_delete=models.CASCADE, related_name='items')
    material = models.ForeignKey('inventory.Material', on_delete=models.PROTECT, related_name='purchase_items')
    quantity = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=0)

    def __str__(self):
        return f"{self.material} x {self.quantity}"

    def save(self, *args, **kwargs):
        self.total_cost = self.quantity * self.unit_cost
        super().save(*args, **kwargs)
