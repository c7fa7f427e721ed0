"""Database models for staff users and their roles."""

from django.db import models
from django.contrib.auth.models import AbstractUser

RECEPTIONIST = 'receptionist'
DESIGNER = 'designer'
WORKER = 'worker'
FINANCIAL = 'financial'
ADMIN = 'admin'
CLIENT = 'client'

# Roles that work inside the factory (everyone except portal clients)
STAFF_ROLES = frozenset({RECEPTIONIST, DESIGNER, WORKER, FINANCIAL, ADMIN})


class User(AbstractUser):
    """Custom user model.

    Extends Django's :class:`~django.contrib.auth.models.AbstractUser` with:
    - ``role`` which drives every permission decision in the API
    - ``full_name`` used in notifications and audit output
    - optional ``phone_number``
    """

    ROLE_CHOICES = (
        (RECEPTIONIST, 'Receptionist'),
        (DESIGNER, 'Designer'),
        (WORKER, 'Worker'),
        (FINANCIAL, 'Financial'),
        (ADMIN, 'Admin'),
        (CLIENT, 'Client'),
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=RECEPTIONIST)
    full_name = models.CharField(max_length=150, blank=True)
    phone_number = models.CharField(max_length=20, null=True, blank=True)

    def __str__(self):
        return self.username

    @property
    def display_name(self):
        return self.full_name or self.username

    @property
    def is_admin_role(self):
        return self.role == ADMIN
