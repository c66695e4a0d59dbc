from decimal import Decimal

from rest_framework import serializers

from garment_erp.employees.models import Employee
from garment_erp.parties.models import Customer
from .models import Measurement, BODY_FIELDS


class MeasurementSerializer(serializers.ModelSerializer):
    customer = serializers.PrimaryKeyRelatedField(queryset=Customer.objects.all())
    taken_by = serializers.PrimaryKeyRelatedField(queryset=Employee.objects.all())
    customer_code = serializers.CharField(source='customer.customer_code', read_only=True)
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    taken_by_name = serializers.CharField(source='taken_by.user.full_name', read_only=True)

    class Meta:
        model = Measurement
        fields = [
            'id', 'measurement_code', 'customer', 'customer_code', 'customer_name', 'taken_by',
            'taken_by_name', 'garment_type',
        ] + BODY_FIELDS + ['notes', 'custom_fields', 'created_at', 'updated_at']
        read_only_fields = ['id', 'measurement_code', 'created_at', 'updated_at']
        extra_kwargs = {
            field: {'min_value': Decimal('0')} for field in BODY_FIELDS
        }
        extra_kwargs['garment_type'] = {'allow_blank': False}

    def validate_custom_fields(self, value):
        if value is not None and not isinstance(value, dict):
            raise serializers.ValidationError('Custom fields must be an object.')
        return value


class MeasurementListSerializer(serializers.ModelSerializer):
    customer_name = serializers.CharField(source='customer.name', read_only=True)
    taken_by_name = serializers.CharField(source='taken_by.user.full_name', read_only=True)

    class Meta:
        model = Measurement
        fields = [
            'id', 'measurement_code', 'customer', 'customer_name', 'taken_by', 'taken_by_name',
            'garment_type', 'created_at',
        ]
        read_only_fields = fields
