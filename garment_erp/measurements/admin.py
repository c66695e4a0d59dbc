from django.contrib import admin
from .models import Measurement, UPPER_BODY_FIELDS, LOWER_BODY_FIELDS


@admin.register(Measurement)
class MeasurementAdmin(admin.ModelAdmin):
    list_display = ['measurement_code', 'customer', 'garment_type', 'taken_by', 'created_at']
    list_filter = ['garment_type', 'created_at']
    search_fields = ['measurement_code', 'customer__name', 'customer__customer_code']
    readonly_fields = ['measurement_code', 'created_at', 'updated_at']
    fieldsets = (
        (None, {'fields': ('measurement_code', 'customer', 'taken_by', 'garment_type')}),
        ('Upper body', {'fields': UPPER_BODY_FIELDS}),
        ('Lower body', {'fields': LOWER_BODY_FIELDS}),
        ('Additional', {'fields': ('notes', 'custom_fields', 'created_at', 'updated_at')}),
    )
    ordering = ['-created_at']
