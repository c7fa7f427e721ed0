"""Accounts app configuration."""

from django.apps import AppConfig


class AccountsConfig(AppConfig):
    """Django app config for staff users and roles."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accounts'
