"""Database models for raw materials and the inventory ledger."""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q
from django.utils import timezone

ZERO = Decimal('0')


class Material(models.Model):
    """A stocked raw material (film, ink, paper...).

    Materials flagged with ``is_order_type`` are offered as order types and
    priced per unit of order size through ``selling_price``.
    """

    CATEGORY_CHOICES = (
        ('paper', 'Paper'),
        ('ink', 'Ink'),
        ('chemicals', 'Chemicals'),
        ('packaging', 'Packaging'),
        ('tools', 'Tools'),
        ('other', 'Other'),
    )
    UNIT_CHOICES = (
        ('kg', 'Kg'),
        ('liter', 'Liter'),
        ('piece', 'Piece'),
        ('box', 'Box'),
        ('roll', 'Roll'),
        ('sheet', 'Sheet'),
    )

    name = models.CharField(max_length=100)
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES, default='other')
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='piece')
    min_stock_level = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    current_stock = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    cost_per_unit = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    selling_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)])
    is_order_type = models.BooleanField(default=False)
    supplier = models.ForeignKey(
        'purchases.Supplier',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='materials',
    )
    description = models.CharField(max_length=500, blank=True)
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='+'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['name'], name='material_name_idx'),
            models.Index(fields=['category'], name='material_category_idx'),
            models.Index(fields=['is_active', 'current_stock'], name='material_stock_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def has_selling_price(self):
        return self.selling_price is not None and self.selling_price > ZERO

    @property
    def is_low_stock(self):
        return self.current_stock <= self.min_stock_level

    @property
    def stock_status(self):
        if self.current_stock <= ZERO:
            return 'out_of_stock'
        if self.current_stock <= self.min_stock_level:
            return 'low_stock'
        return 'in_stock'


class InventoryRecord(models.Model):
    """Append-only ledger entry; one row per stock-affecting event."""

    DAILY_COUNT = 'daily_count'
    ADJUSTMENT = 'adjustment'
    WASTAGE = 'wastage'
    USAGE = 'usage'
    TYPE_CHOICES = (
        (DAILY_COUNT, 'Daily count'),
        (ADJUSTMENT, 'Adjustment'),
        (WASTAGE, 'Wastage'),
        (USAGE, 'Usage'),
    )

    material = models.ForeignKey(Material, on_delete=models.PROTECT, related_name='inventory_records')
    date = models.DateTimeField(default=timezone.now)
    previous_stock = models.DecimalField(max_digits=12, decimal_places=2)
    actual_stock = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    difference = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    reason = models.CharField(max_length=200, blank=True)
    notes = models.CharField(max_length=500, blank=True)
    counted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='inventory_records'
    )
    # Set only for usage rows produced by order completion; kept after the order is deleted.
    order = models.ForeignKey(
        'orders.Order', on_delete=models.DO_NOTHING, db_constraint=False,
        null=True, blank=True, related_name='inventory_records',
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['-date'], name='inventory_date_idx'),
            models.Index(fields=['material', '-date'], name='inventory_material_idx'),
            models.Index(fields=['type'], name='inventory_type_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['order', 'type'],
                condition=Q(order__isnull=False),
                name='inventory_one_entry_per_order_type',
            ),
        ]

    def __str__(self):
        return f"{self.get_type_display()} {self.material} {self.previous_stock} -> {self.actual_stock}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ValueError('Inventory records are append-only.')
        self.difference = self.actual_stock - self.previous_stock
        super().save(*args, **kwargs)
