"""Serializers for the accounts app."""

from django.contrib.auth import get_user_model
from rest_framework import serializers


User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Compact user representation embedded in other payloads."""

    class Meta:
        model = User
        fields = ['id', 'username', 'full_name', 'role']


class UserProfileSerializer(serializers.ModelSerializer):
    """Authenticated user's own profile."""

    class Meta:
        model = User
        fields = ['id', 'username', 'full_name', 'email', 'phone_number', 'role', 'date_joined']
        read_only_fields = ['id', 'username', 'role', 'date_joined']
