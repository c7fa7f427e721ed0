"""Serializers for the product catalog."""

from django.db import transaction
from rest_framework import serializers

from inventory.models import Material, ZERO

from .models import Product, ProductMaterial


class ProductMaterialSerializer(serializers.ModelSerializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.filter(is_active=True))
    material_name = serializers.ReadOnlyField(source='material.name')
    material_unit = serializers.ReadOnlyField(source='material.unit')
    quantity = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)

    class Meta:
        model = ProductMaterial
        fields = ['material', 'material_name', 'material_unit', 'quantity']


class ProductSerializer(serializers.ModelSerializer):
    """Product with its composition.

    Sending ``materials`` replaces the whole composition.
    """

    materials = ProductMaterialSerializer(many=True, required=False)
    selling_price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=ZERO)

    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'selling_price', 'category',
            'materials', 'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['is_active', 'created_at', 'updated_at']

    def validate_materials(self, value):
        seen = set()
        for line in value:
            if line['material'].pk in seen:
                raise serializers.ValidationError('Each material may appear only once.')
            seen.add(line['material'].pk)
        return value

    def _write_materials(self, product, lines):
        product.materials.all().delete()
        ProductMaterial.objects.bulk_create(ProductMaterial(product=product, **line) for line in lines)

    @transaction.atomic
    def create(self, validated_data):
        lines = validated_data.pop('materials', [])
        product = super().create(validated_data)
        self._write_materials(product, lines)
        return product

    @transaction.atomic
    def update(self, instance, validated_data):
        lines = validated_data.pop('materials', None)
        product = super().update(instance, validated_data)
        if lines is not None:
            self._write_materials(product, lines)
        return product


class ProductOptionSerializer(serializers.ModelSerializer):
    """Compact product shape embedded in orders."""

    class Meta:
        model = Product
        fields = ['id', 'name', 'selling_price']
