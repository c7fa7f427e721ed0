"""Clients app configuration."""

from django.apps import AppConfig


class ClientsConfig(AppConfig):
    """Django app config for the client registry."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'clients'
