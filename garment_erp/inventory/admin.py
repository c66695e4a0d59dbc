from django.contrib import admin
from .models import Material, MaterialTransaction


@admin.register(Material)
class MaterialAdmin(admin.ModelAdmin):
    list_display = ['material_code', 'name', 'category', 'quantity', 'unit', 'min_quantity', 'status']
    list_filter = ['status', 'category']
    search_fields = ['material_code', 'name', 'supplier']
    readonly_fields = ['material_code', 'created_at', 'updated_at']
    ordering = ['name']


@admin.register(MaterialTransaction)
class MaterialTransactionAdmin(admin.ModelAdmin):
    list_display = ['material', 'type', 'quantity', 'balance_after', 'reference', 'created_by', 'created_at']
    list_filter = ['type', 'created_at']
    search_fields = ['material__material_code', 'material__name', 'reference', 'notes']
    ordering = ['-created_at']
    readonly_fields = ['material', 'type', 'quantity', 'balance_after', 'reference', 'notes', 'created_by', 'created_at']
