from rest_framework import serializers
from .models import Customer, Supplier


class CustomerSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = [
            'id', 'customer_code', 'name', 'email', 'phone', 'address', 'city', 'state', 'pincode',
            'country', 'gst_number', 'pan_number', 'payment_terms', 'notes', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'customer_code', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'allow_blank': False},
            'phone': {'allow_blank': False},
        }


class CustomerBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Customer
        fields = ['id', 'customer_code', 'name', 'phone']


class SupplierSerializer(serializers.ModelSerializer):
    po_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = Supplier
        fields = [
            'id', 'supplier_code', 'name', 'contact_person', 'email', 'phone', 'address', 'city',
            'state', 'country', 'gst_number', 'pan_number', 'bank_details', 'is_active', 'po_count',
            'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'supplier_code', 'created_at', 'updated_at']
        extra_kwargs = {
            'name': {'allow_blank': False},
            'phone': {'allow_blank': False},
        }

    def validate_bank_details(self, value):
        if value is not None and not isinstance(value, dict):
            raise serializers.ValidationError('Bank details must be an object.')
        return value


class SupplierBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'supplier_code', 'name', 'contact_person', 'phone', 'email']
