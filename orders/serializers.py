"""DRF serializers for orders.

Writes use one serializer per role; fields a role may not touch are simply
not declared, so they are dropped from the payload before validation.
"""

from rest_framework import serializers

from accounts.models import ADMIN, DESIGNER, FINANCIAL, WORKER
from clients.models import Client
from inventory.models import Material, ZERO
from inventory.serializers import MaterialOptionSerializer
from invoices.models import Invoice
from products.models import Product
from products.serializers import ProductOptionSerializer

from .models import Order


def _amount(**kwargs):
    return serializers.DecimalField(max_digits=14, decimal_places=2, min_value=ZERO, **kwargs)


def _dimension(**kwargs):
    return serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO, **kwargs)


class OrderSerializer(serializers.ModelSerializer):
    """Read shape returned by every order endpoint."""

    material_info = MaterialOptionSerializer(source='material', read_only=True)
    product_info = ProductOptionSerializer(source='product', read_only=True)
    created_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'client', 'client_name', 'client_phone', 'client_factory_name',
            'invoice', 'material', 'material_info', 'product', 'product_info', 'type',
            'repeats', 'sheet_width', 'sheet_height', 'order_size',
            'total_price', 'deposit', 'remaining_amount', 'order_state', 'stock_deducted',
            'notes', 'design_link', 'created_by', 'created_by_name', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        return obj.created_by.display_name if obj.created_by else None


class OrderCreateSerializer(serializers.Serializer):
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all(), required=False, allow_null=True)
    invoice = serializers.PrimaryKeyRelatedField(queryset=Invoice.objects.all(), required=False, allow_null=True)
    material = serializers.PrimaryKeyRelatedField(
        queryset=Material.objects.filter(is_active=True), required=False, allow_null=True
    )
    product = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.filter(is_active=True), required=False, allow_null=True
    )
    type = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    total_price = _amount(required=False, allow_null=True)
    repeats = serializers.IntegerField(min_value=1, default=1)
    sheet_width = _dimension(default=ZERO)
    sheet_height = _dimension(default=ZERO)
    deposit = _amount(default=ZERO)
    order_state = serializers.ChoiceField(choices=Order.STATE_CHOICES, default=Order.PENDING)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    design_link = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')

    def validate(self, attrs):
        if attrs.get('client') is None and attrs.get('invoice') is None:
            raise serializers.ValidationError({'client': 'Client is required unless the order belongs to an invoice.'})
        return attrs


class WorkerOrderUpdateSerializer(serializers.Serializer):
    order_state = serializers.ChoiceField(choices=Order.STATE_CHOICES, required=False)


class FinancialOrderUpdateSerializer(serializers.Serializer):
    deposit = _amount(required=False)
    total_price = _amount(required=False)
    notes = serializers.CharField(required=False, allow_blank=True)


class DesignerOrderUpdateSerializer(WorkerOrderUpdateSerializer):
    design_link = serializers.CharField(max_length=500, required=False, allow_blank=True)
    material = serializers.PrimaryKeyRelatedField(
        queryset=Material.objects.filter(is_active=True), required=False, allow_null=True
    )
    product = serializers.PrimaryKeyRelatedField(
        queryset=Product.objects.filter(is_active=True), required=False, allow_null=True
    )
    sheet_width = _dimension(required=False)
    sheet_height = _dimension(required=False)
    repeats = serializers.IntegerField(min_value=1, required=False)
    notes = serializers.CharField(required=False, allow_blank=True)
    deposit = _amount(required=False)
    client_name = serializers.CharField(max_length=255, required=False, allow_blank=True)


class AdminOrderUpdateSerializer(DesignerOrderUpdateSerializer):
    client = serializers.PrimaryKeyRelatedField(queryset=Client.objects.all(), required=False, allow_null=True)
    invoice = serializers.PrimaryKeyRelatedField(queryset=Invoice.objects.all(), required=False, allow_null=True)
    type = serializers.CharField(max_length=100, required=False, allow_blank=True)
    total_price = _amount(required=False)
    client_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    client_factory_name = serializers.CharField(max_length=255, required=False, allow_blank=True)


UPDATE_SERIALIZERS = {
    ADMIN: AdminOrderUpdateSerializer,
    DESIGNER: DesignerOrderUpdateSerializer,
    WORKER: WorkerOrderUpdateSerializer,
    FINANCIAL: FinancialOrderUpdateSerializer,
}
