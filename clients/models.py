"""Database models for factory clients."""

from django.db import models
from django.conf import settings

from .phones import normalize_phone


class Client(models.Model):
    """A customer of the factory.

    Orders and invoices copy the identity fields at creation time (see
    :meth:`snapshot`), so later edits here never rewrite history.
    """

    name = models.CharField(max_length=255)
    phone = models.CharField(max_length=30)
    normalized_phone = models.CharField(max_length=20, blank=True, editable=False)
    factory_name = models.CharField(max_length=255, blank=True)
    address = models.CharField(max_length=500, blank=True)
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='clients_created',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        indexes = [
            models.Index(fields=['normalized_phone'], name='client_phone_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.factory_name})" if self.factory_name else self.name

    def snapshot(self):
        """Identity fields frozen onto orders and invoices."""
        return {
            'name': self.name,
            'phone': self.phone,
            'factory_name': self.factory_name,
        }

    def save(self, *args, **kwargs):
        self.normalized_phone = normalize_phone(self.phone)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'phone' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'normalized_phone'}
        super().save(*args, **kwargs)
