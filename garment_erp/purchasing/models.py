from decimal import Decimal, ROUND_HALF_UP

from django.db import models
from django.utils import timezone

from garment_erp.core.codes import allocate_monthly_code
from garment_erp.core.models import User
from garment_erp.inventory.models import Material
from garment_erp.parties.models import Supplier

CENT = Decimal('0.01')


def money(value):
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def calculate_totals(lines, tax_rate, shipping_cost):
    """
    Totals for ``(quantity, unit_price)`` pairs.

    subtotal = sum(quantity * unit_price), tax = subtotal * tax_rate / 100,
    total = subtotal + tax + shipping.
    """
    subtotal = money(sum((Decimal(q) * Decimal(p) for q, p in lines), Decimal('0')))
    tax_amount = money(subtotal * Decimal(tax_rate or 0) / Decimal('100'))
    shipping_cost = money(shipping_cost or 0)
    return {
        'subtotal': subtotal,
        'tax_amount': tax_amount,
        'total_amount': subtotal + tax_amount + shipping_cost,
    }


class PurchaseOrder(models.Model):
    """Purchase order raised against a supplier"""
    NUMBER_PREFIX = 'PO'

    class Status(models.TextChoices):
        DRAFT = 'DRAFT', 'Draft'
        PENDING_APPROVAL = 'PENDING_APPROVAL', 'Pending Approval'
        APPROVED = 'APPROVED', 'Approved'
        ORDERED = 'ORDERED', 'Ordered'
        PARTIALLY_RECEIVED = 'PARTIALLY_RECEIVED', 'Partially Received'
        RECEIVED = 'RECEIVED', 'Received'
        CANCELLED = 'CANCELLED', 'Cancelled'

    po_number = models.CharField(max_length=20, unique=True, editable=False)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchase_orders')
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='purchase_orders')
    order_date = models.DateField(default=timezone.localdate)
    expected_date = models.DateField(blank=True, null=True)
    received_date = models.DateTimeField(blank=True, null=True, help_text="Set when every item is fully received")
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'), help_text="Percent")
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    shipping_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=30, choices=Status.choices, default=Status.DRAFT)
    notes = models.TextField(blank=True, null=True)
    terms = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.po_number

    def save(self, *args, **kwargs):
        if not self.po_number:
            self.po_number = allocate_monthly_code(PurchaseOrder, 'po_number', self.NUMBER_PREFIX)
        super().save(*args, **kwargs)

    @property
    def is_terminal(self):
        return self.status in (PurchaseOrder.Status.RECEIVED, PurchaseOrder.Status.CANCELLED)

    def recalculate_totals(self, items=None):
        """Refresh subtotal, tax and total from ``items`` (defaults to stored items)"""
        items = self.items.all() if items is None else items
        totals = calculate_totals(
            [(item.quantity, item.unit_price) for item in items], self.tax_rate, self.shipping_cost
        )
        for field, value in totals.items():
            setattr(self, field, value)
        return totals

    def apply_tax_and_shipping(self):
        """Refresh tax and total keeping the stored subtotal"""
        self.tax_amount = money(Decimal(self.subtotal) * Decimal(self.tax_rate or 0) / Decimal('100'))
        self.total_amount = Decimal(self.subtotal) + self.tax_amount + money(self.shipping_cost or 0)

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['supplier', 'status'], name='idx_po_supplier_status'),
            models.Index(fields=['-order_date'], name='idx_po_order_date'),
        ]


class POItem(models.Model):
    """Purchase order line; ``received_qty`` only grows and never exceeds ``quantity``"""
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    material = models.ForeignKey(Material, on_delete=models.SET_NULL, null=True, blank=True, related_name='po_items')
    description = models.CharField(max_length=500)
    quantity = models.DecimalField(max_digits=10, decimal_places=2)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    received_qty = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    amount = models.DecimalField(max_digits=12, decimal_places=2)

    def __str__(self):
        return f"{self.purchase_order.po_number}: {self.description}"

    def save(self, *args, **kwargs):
        self.amount = self.get_line_total()
        super().save(*args, **kwargs)

    def get_line_total(self):
        return money(Decimal(self.quantity) * Decimal(self.unit_price))

    @property
    def pending_qty(self):
        return max(Decimal(self.quantity) - Decimal(self.received_qty), Decimal('0'))

    @property
    def is_fully_received(self):
        return Decimal(self.received_qty) >= Decimal(self.quantity)

    class Meta:
        db_table = 'po_items'
        ordering = ['id']
