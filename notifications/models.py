"""Database models for per-user notifications."""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Notification(models.Model):
    """One recipient's copy of a business event message."""

    TYPE_CHOICES = (
        ('order', 'Order'),
        ('invoice', 'Invoice'),
        ('payment', 'Payment'),
        ('inventory', 'Inventory'),
        ('system', 'System'),
        ('client', 'Client'),
    )
    RELATED_TYPE_CHOICES = (
        ('order', 'Order'),
        ('invoice', 'Invoice'),
        ('client', 'Client'),
        ('material', 'Material'),
        ('purchase', 'Purchase'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='notifications')
    title = models.CharField(max_length=200)
    message = models.CharField(max_length=500)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='system')
    related_id = models.PositiveBigIntegerField(null=True, blank=True)
    related_type = models.CharField(max_length=20, choices=RELATED_TYPE_CHOICES, blank=True)
    read = models.BooleanField(default=False)
    read_at = models.DateTimeField(null=True, blank=True)
    action_url = models.CharField(max_length=300, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'read', '-created_at'], name='notification_unread_idx'),
            models.Index(fields=['user', '-created_at'], name='notification_user_idx'),
        ]

    def __str__(self):
        return f"{self.title} -> {self.user}"

    def mark_as_read(self):
        if not self.read:
            self.read = True
            self.read_at = timezone.now()
            self.save(update_fields=['read', 'read_at'])
