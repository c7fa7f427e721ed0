"""Serializers for invoices.

Create and update payloads are split per role: only admins send financial
fields (tax, shipping, discount) or change the client.
"""

from rest_framework import serializers

from clients.models import Client
from inventory.models import ZERO
from orders.models import Order

from .models import Invoice

FINANCIAL_FIELDS = ('tax', 'shipping', 'discount')


class InvoiceOrderSerializer(serializers.ModelSerializer):
    material_name = serializers.ReadOnlyField(source='material.name')

    class Meta:
        model = Order
        fields = [
            'id', 'type', 'material', 'material_name', 'product', 'repeats',
            'sheet_width', 'sheet_height', 'order_size', 'total_price', 'deposit',
            'remaining_amount', 'order_state', 'created_at',
        ]
        read_only_fields = fields


class InvoiceSerializer(serializers.ModelSerializer):
    """Read shape used for list responses."""

    order_count = serializers.IntegerField(read_only=True, default=0)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Invoice
        fields = [
            'id', 'client', 'client_name', 'client_phone', 'client_factory_name',
            'invoice_date', 'status', 'tax', 'shipping', 'discount',
            'subtotal', 'total', 'total_remaining', 'notes', 'order_count',
            'created_by', 'created_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None


class InvoiceDetailSerializer(InvoiceSerializer):
    orders = InvoiceOrderSerializer(many=True, read_only=True)

    class Meta(InvoiceSerializer.Meta):
        fields = InvoiceSerializer.Meta.fields + ['orders']
        read_only_fields = fields


class InvoiceCreateSerializer(serializers.ModelSerializer):
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all())
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, required=False)
    shipping = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, required=False)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, required=False)

    class Meta:
        model = Invoice
        fields = ['client', 'invoice_date', 'status', 'notes', 'tax', 'shipping', 'discount']

    def create(self, validated_data):
        client = validated_data.pop('client')
        invoice = Invoice(**validated_data)
        invoice.apply_client_snapshot(client)
        invoice.save()
        return invoice


class InvoiceStaffUpdateSerializer(serializers.ModelSerializer):
    """Designers and workers: dates, status and notes only."""

    class Meta:
        model = Invoice
        fields = ['invoice_date', 'status', 'notes']


class InvoiceAdminUpdateSerializer(serializers.ModelSerializer):
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all(), required=False)
    tax = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, required=False)
    shipping = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, required=False)
    discount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, required=False)

    class Meta:
        model = Invoice
        fields = ['client', 'invoice_date', 'status', 'notes', 'tax', 'shipping', 'discount']

    def update(self, instance, validated_data):
        client = validated_data.pop('client', None)
        if client is not None and client.pk != instance.client_id:
            instance.apply_client_snapshot(client)
        return super().update(instance, validated_data)
