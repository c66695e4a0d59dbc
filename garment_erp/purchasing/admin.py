from django.contrib import admin
from .models import PurchaseOrder, POItem


class POItemInline(admin.TabularInline):
    model = POItem
    extra = 0
    fields = ['material', 'description', 'quantity', 'unit_price', 'amount', 'received_qty']
    readonly_fields = ['amount', 'received_qty']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_number', 'supplier', 'status', 'order_date', 'get_item_count', 'total_amount', 'created_by']
    list_filter = ['status', 'order_date', 'supplier']
    search_fields = ['po_number', 'supplier__name', 'notes']
    readonly_fields = ['po_number', 'subtotal', 'tax_amount', 'total_amount', 'received_date', 'created_at', 'updated_at']
    inlines = [POItemInline]
    ordering = ['-created_at']

    def get_item_count(self, obj):
        return obj.items.count()
    get_item_count.short_description = 'Items'
