from decimal import Decimal

from django.db import models

from garment_erp.core.codes import allocate_code


class Material(models.Model):
    """Raw materials and trims held in stock (fabric, thread, buttons...)"""
    CODE_PREFIX = 'MAT'

    class Status(models.TextChoices):
        AVAILABLE = 'AVAILABLE', 'Available'
        LOW_STOCK = 'LOW_STOCK', 'Low Stock'
        OUT_OF_STOCK = 'OUT_OF_STOCK', 'Out of Stock'
        DISCONTINUED = 'DISCONTINUED', 'Discontinued'

    material_code = models.CharField(max_length=20, unique=True, editable=False)
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=100)
    unit = models.CharField(max_length=20, help_text="Unit of measure, e.g. meters, pcs, kg")
    quantity = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    min_quantity = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'), help_text="Reorder threshold")
    unit_price = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    supplier = models.CharField(max_length=200, blank=True, null=True, help_text="Usual supplier name")
    location = models.CharField(max_length=200, blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.AVAILABLE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.material_code} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.material_code:
            self.material_code = allocate_code(Material, 'material_code', self.CODE_PREFIX)
        super().save(*args, **kwargs)

    @staticmethod
    def status_for(quantity, min_quantity):
        quantity = Decimal(quantity or 0)
        if quantity <= 0:
            return Material.Status.OUT_OF_STOCK
        if quantity <= Decimal(min_quantity or 0):
            return Material.Status.LOW_STOCK
        return Material.Status.AVAILABLE

    def refresh_status(self):
        """Recompute status from quantity; DISCONTINUED is kept as set"""
        if self.status != Material.Status.DISCONTINUED:
            self.status = Material.status_for(self.quantity, self.min_quantity)
        return self.status

    @property
    def stock_value(self):
        return (self.quantity or Decimal('0')) * (self.unit_price or Decimal('0'))

    class Meta:
        db_table = 'materials'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category'], name='materials_category_idx'),
            models.Index(fields=['status'], name='materials_status_idx'),
        ]


class MaterialTransaction(models.Model):
    """Append-only stock ledger entry for a material"""
    class Type(models.TextChoices):
        IN = 'IN', 'Stock In'
        OUT = 'OUT', 'Stock Out'
        ADJUSTMENT = 'ADJUSTMENT', 'Adjustment'
        RETURN = 'RETURN', 'Return'

    material = models.ForeignKey(Material, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=Type.choices)
    quantity = models.DecimalField(max_digits=10, decimal_places=2)
    balance_after = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True, help_text="Material quantity after this entry")
    reference = models.CharField(max_length=100, blank=True, null=True, help_text="Source document, e.g. PO number")
    notes = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey('core.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='material_transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.material.material_code} {self.type} {self.quantity}"

    class Meta:
        db_table = 'material_transactions'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['reference'], name='mat_txn_reference_idx'),
            models.Index(fields=['-created_at'], name='mat_txn_created_idx'),
        ]
