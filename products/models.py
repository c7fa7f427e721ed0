"""Database models for the product catalog."""

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    """A fixed-price item offered as an alternative pricing source to materials.

    The material composition is informational; completing an order for a
    product does not consume its materials.
    """

    name = models.CharField(max_length=100)
    description = models.TextField(max_length=1000, blank=True)
    selling_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    category = models.CharField(max_length=100, default='General')
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
            models.Index(fields=['name'], name='product_name_idx'),
            models.Index(fields=['category'], name='product_category_idx'),
            models.Index(fields=['is_active'], name='product_active_idx'),
        ]

    def __str__(self):
        return self.name


class ProductMaterial(models.Model):
    """One (material, quantity) line of a product's composition."""

    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='materials')
    material = models.ForeignKey('inventory.Material', on_delete=models.PROTECT, related_name='product_lines')
    quantity = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['product', 'material'], name='product_material_unique'),
        ]

    def __str__(self):
        return f"{self.product} / {self.material} x {self.quantity}"
