from decimal import Decimal

from rest_framework import serializers
from .models import Material, MaterialTransaction


class MaterialSerializer(serializers.ModelSerializer):
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    min_quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    stock_value = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Material
        fields = [
            'id', 'material_code', 'name', 'category', 'unit', 'quantity', 'min_quantity',
            'unit_price', 'stock_value', 'supplier', 'location', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'material_code', 'status', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'allow_blank': False},
            'category': {'allow_blank': False},
            'unit': {'allow_blank': False},
        }

    def create(self, validated_data):
        material = Material(**validated_data)
        material.refresh_status()
        material.save()
        return material


class MaterialUpdateSerializer(MaterialSerializer):
    """
    Edits descriptive fields only. Quantity changes go through the
    transaction endpoint; status may only be switched to or from
    DISCONTINUED here.
    """
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)
    status = serializers.ChoiceField(choices=Material.Status.choices, required=False)

    class Meta(MaterialSerializer.Meta):
        read_only_fields = ['id', 'material_code', 'quantity', 'created_at', 'updated_at']

    def update(self, instance, validated_data):
        requested_status = validated_data.pop('status', None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        if requested_status == Material.Status.DISCONTINUED:
            instance.status = Material.Status.DISCONTINUED
        elif requested_status is not None or instance.status != Material.Status.DISCONTINUED:
            instance.status = Material.status_for(instance.quantity, instance.min_quantity)
        instance.save()
        return instance


class MaterialBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Material
        fields = ['id', 'material_code', 'name', 'unit', 'quantity', 'status']


class MaterialTransactionSerializer(serializers.ModelSerializer):
    material_code = serializers.CharField(source='material.material_code', read_only=True)
    created_by_email = serializers.CharField(source='created_by.email', read_only=True, default=None)

    class Meta:
        model = MaterialTransaction
        fields = [
            'id', 'material', 'material_code', 'type', 'quantity', 'balance_after', 'reference',
            'notes', 'created_by', 'created_by_email', 'created_at',
        ]
        read_only_fields = fields


class StockMovementSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=MaterialTransaction.Type.choices)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    reference = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
