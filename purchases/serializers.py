from django.db import transaction
from rest_framework import serializers

from inventory.models import Material, ZERO

from .models import Purchase, PurchaseItem, Supplier


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'contact_person', 'phone', 'email', 'address',
            'payment_terms', 'notes', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['created_at', 'updated_at']


class PurchaseItemSerializer(serializers.ModelSerializer):
    material_name = serializers.ReadOnlyField(source='material.name')
    material_unit = serializers.ReadOnlyField(source='material.unit')
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)
    unit_cost = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)

    class Meta:
        model = PurchaseItem
        fields = ['id', 'material', 'material_name', 'material_unit', 'quantity', 'unit_cost', 'total_cost']
        read_only_fields = ['total_cost']


class PurchaseSerializer(serializers.ModelSerializer):
    """Purchase order with nested items; writing ``items`` replaces them."""

    items = PurchaseItemSerializer(many=True)
    supplier_name = serializers.ReadOnlyField(source='supplier.name')

    class Meta:
        model = Purchase
        fields = [
            'id', 'purchase_number', 'supplier', 'supplier_name', 'items', 'total_amount',
            'status', 'order_date', 'expected_delivery', 'received_date', 'notes',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['purchase_number', 'total_amount', 'received_date', 'created_at', 'updated_at']

    def validate_status(self, value):
        # received is only reachable through the receive endpoint
        if value == Purchase.RECEIVED:
            raise serializers.ValidationError('Use the receive endpoint to mark a purchase received.')
        return value

    def validate(self, attrs):
        if self.instance is not None and self.instance.status == Purchase.RECEIVED:
            raise serializers.ValidationError('A received purchase cannot be edited.')
        return attrs

    def _write_items(self, purchase, items):
        purchase.items.all().delete()
        for item in items:
            PurchaseItem.objects.create(purchase=purchase, **item)
        purchase.recalculate_total()
        purchase.save(update_fields=['total_amount'])

    @transaction.atomic
    def create(self, validated_data):
        items = validated_data.pop('items', [])
        purchase = Purchase.objects.create(**validated_data)
        self._write_items(purchase, items)
        return purchase

    @transaction.atomic
    def update(self, instance, validated_data):
        items = validated_data.pop('items', None)
        instance = super().update(instance, validated_data)
        if items is not None:
            self._write_items(instance, items)
        return instance


class ReceivedItemSerializer(serializers.Serializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.all())
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)


class ReceivePurchaseSerializer(serializers.Serializer):
    received_items = ReceivedItemSerializer(many=True, required=False)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
