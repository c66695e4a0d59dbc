from django.contrib import admin
from .models import Customer, Supplier


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ['customer_code', 'name', 'phone', 'email', 'city', 'is_active', 'created_at']
    list_filter = ['is_active', 'state', 'created_at']
    search_fields = ['customer_code', 'name', 'phone', 'email']
    readonly_fields = ['customer_code', 'created_at', 'updated_at']
    ordering = ['-created_at']


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['supplier_code', 'name', 'contact_person', 'phone', 'email', 'is_active', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['supplier_code', 'name', 'contact_person', 'email']
    readonly_fields = ['supplier_code', 'created_at', 'updated_at']
    ordering = ['name']
