"""Inventory domain events."""

from django.dispatch import Signal

# kwargs: material, record, actor
stock_adjusted = Signal()

# kwargs: material, actor
low_stock = Signal()
