from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = [
            'id', 'title', 'message', 'type', 'related_id', 'related_type',
            'read', 'read_at', 'action_url', 'created_at',
        ]
        read_only_fields = fields
