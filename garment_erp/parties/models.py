from django.db import models
from garment_erp.core.codes import allocate_code


class Customer(models.Model):
    """Customers the workshop tailors garments for"""
    CODE_PREFIX = 'CUST'

    customer_code = models.CharField(max_length=20, unique=True, editable=False)
    name = models.CharField(max_length=200)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20)
    address = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    state = models.CharField(max_length=100, blank=True, null=True)
    pincode = models.CharField(max_length=20, blank=True, null=True)
    country = models.CharField(max_length=100, default='India')
    gst_number = models.CharField(max_length=20, blank=True, null=True)
    pan_number = models.CharField(max_length=20, blank=True, null=True)
    payment_terms = models.PositiveIntegerField(blank=True, null=True, help_text="Payment terms in days")
    notes = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.customer_code} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.customer_code:
            self.customer_code = allocate_code(Customer, 'customer_code', self.CODE_PREFIX)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'customers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['name'], name='customers_name_idx'),
            models.Index(fields=['phone'], name='customers_phone_idx'),
        ]


class Supplier(models.Model):
    """Material suppliers"""
    CODE_PREFIX = 'SUP'

    supplier_code = models.CharField(max_length=20, unique=True, editable=False)
    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20)
    address = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    state = models.CharField(max_length=100, blank=True, null=True)
    country = models.CharField(max_length=100, default='India')
    gst_number = models.CharField(max_length=20, blank=True, null=True)
    pan_number = models.CharField(max_length=20, blank=True, null=True)
    bank_details = models.JSONField(blank=True, null=True, help_text="Account name, number, IFSC and bank name")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.supplier_code} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.supplier_code:
            self.supplier_code = allocate_code(Supplier, 'supplier_code', self.CODE_PREFIX)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'suppliers'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['name'], name='suppliers_name_idx'),
        ]
