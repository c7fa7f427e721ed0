"""DRF serializers for materials and inventory records."""

from decimal import Decimal

from rest_framework import serializers

from .models import InventoryRecord, Material, ZERO


class MaterialSerializer(serializers.ModelSerializer):
    """Material with its derived stock status."""

    stock_status = serializers.ReadOnlyField()
    supplier_name = serializers.ReadOnlyField(source='supplier.name')

    class Meta:
        model = Material
        fields = [
            'id', 'name', 'category', 'unit',
            'min_stock_level', 'current_stock', 'cost_per_unit', 'selling_price',
            'is_order_type', 'supplier', 'supplier_name', 'description',
            'is_active', 'stock_status', 'created_at', 'updated_at',
        ]
        read_only_fields = ['is_active', 'created_at', 'updated_at']


class MaterialOptionSerializer(serializers.ModelSerializer):
    """Compact material shape embedded in orders."""

    class Meta:
        model = Material
        fields = ['id', 'name', 'unit', 'selling_price', 'current_stock']


class InventoryRecordSerializer(serializers.ModelSerializer):
    material_name = serializers.ReadOnlyField(source='material.name')
    material_unit = serializers.ReadOnlyField(source='material.unit')
    counted_by_name = serializers.SerializerMethodField()

    class Meta:
        model = InventoryRecord
        fields = [
            'id', 'material', 'material_name', 'material_unit', 'date',
            'previous_stock', 'actual_stock', 'difference', 'type',
            'reason', 'notes', 'counted_by', 'counted_by_name', 'order', 'created_at',
        ]
        read_only_fields = fields

    def get_counted_by_name(self, obj):
        user = obj.counted_by
        return user.display_name if user else None


class StockUpdateSerializer(serializers.Serializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.filter(is_active=True))
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)
    type = serializers.ChoiceField(choices=InventoryRecord.TYPE_CHOICES, default=InventoryRecord.ADJUSTMENT)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class DailyCountItemSerializer(serializers.Serializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.filter(is_active=True))
    actual_stock = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class DailyCountSerializer(serializers.Serializer):
    counts = DailyCountItemSerializer(many=True, allow_empty=False)


class WastageSerializer(serializers.Serializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.filter(is_active=True))
    waste_amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class WithdrawSerializer(serializers.Serializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.filter(is_active=True))
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    reason = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    notes = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')


class DayQuerySerializer(serializers.Serializer):
    date = serializers.DateField(required=False)


class DateRangeQuerySerializer(serializers.Serializer):
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)
