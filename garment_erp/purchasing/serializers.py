from decimal import Decimal

from rest_framework import serializers

from garment_erp.core.serializers import UserBriefSerializer
from garment_erp.inventory.models import Material
from garment_erp.inventory.serializers import MaterialBriefSerializer
from garment_erp.parties.models import Supplier
from garment_erp.parties.serializers import SupplierBriefSerializer
from .models import PurchaseOrder, POItem
from .services import INITIAL_STATUSES


class POItemSerializer(serializers.ModelSerializer):
    material_detail = MaterialBriefSerializer(source='material', read_only=True)
    pending_qty = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = POItem
        fields = [
            'id', 'material', 'material_detail', 'description', 'quantity', 'unit_price',
            'amount', 'received_qty', 'pending_qty',
        ]
        read_only_fields = fields


class POItemInputSerializer(serializers.Serializer):
    material = serializers.PrimaryKeyRelatedField(queryset=Material.objects.all(), required=False, allow_null=True)
    description = serializers.CharField(max_length=500)
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2)
    unit_price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than zero.')
        return value


class PurchaseOrderListSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    item_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'supplier', 'supplier_name', 'status', 'order_date', 'expected_date',
            'received_date', 'total_amount', 'item_count', 'created_at',
        ]
        read_only_fields = fields


class PurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_detail = SupplierBriefSerializer(source='supplier', read_only=True)
    created_by_detail = UserBriefSerializer(source='created_by', read_only=True)
    items = POItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'po_number', 'supplier', 'supplier_detail', 'created_by', 'created_by_detail',
            'status', 'order_date', 'expected_date', 'received_date', 'subtotal', 'tax_rate',
            'tax_amount', 'shipping_cost', 'total_amount', 'notes', 'terms', 'items',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PurchaseOrderWriteSerializer(serializers.Serializer):
    supplier = serializers.PrimaryKeyRelatedField(queryset=Supplier.objects.all())
    items = POItemInputSerializer(many=True, allow_empty=False)
    expected_date = serializers.DateField(required=False, allow_null=True)
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'), required=False)
    shipping_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'), required=False)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    terms = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class PurchaseOrderCreateSerializer(PurchaseOrderWriteSerializer):
    status = serializers.ChoiceField(choices=PurchaseOrder.Status.choices, required=False)

    def validate_status(self, value):
        if value not in INITIAL_STATUSES:
            raise serializers.ValidationError(
                f"Initial status must be one of: {', '.join(INITIAL_STATUSES)}."
            )
        return value


class PurchaseOrderUpdateSerializer(PurchaseOrderWriteSerializer):
    """
    Every field optional; ``items`` replaces the whole item list.
    The supplier is fixed at creation and is ignored on edit.
    """
    status = serializers.ChoiceField(choices=PurchaseOrder.Status.choices, required=False)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop('supplier')
        for field in self.fields.values():
            field.required = False


class ReceiveItemSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    quantity = serializers.DecimalField(max_digits=10, decimal_places=2)


class ReceiveSerializer(serializers.Serializer):
    items = ReceiveItemSerializer(many=True, allow_empty=False)
