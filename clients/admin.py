"""Django admin configuration for clients."""

from django.contrib import admin
from .models import Client


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    """Admin configuration for clients."""

    list_display = ('id', 'name', 'phone', 'normalized_phone', 'factory_name', 'created_at')
    search_fields = ('name', 'phone', 'normalized_phone', 'factory_name')
    readonly_fields = ('normalized_phone', 'created_by', 'created_at', 'updated_at')

    def save_model(self, request, obj, form, change):
        if not change and not obj.created_by_id:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)
