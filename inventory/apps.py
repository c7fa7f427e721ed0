"""Inventory app configuration."""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    """Django app config for materials and the stock ledger."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'inventory'
