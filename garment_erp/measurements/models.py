from django.db import models

from garment_erp.core.codes import allocate_code
from garment_erp.employees.models import Employee
from garment_erp.parties.models import Customer

UPPER_BODY_FIELDS = [
    'chest', 'waist', 'hips', 'shoulder', 'sleeve_length', 'arm_hole', 'bicep', 'wrist',
    'neck_round', 'front_length', 'back_length',
]
LOWER_BODY_FIELDS = ['inseam', 'outseam', 'thigh', 'knee', 'calf', 'ankle', 'rise']
BODY_FIELDS = UPPER_BODY_FIELDS + LOWER_BODY_FIELDS

COMMON_GARMENT_TYPES = [
    'Shirt', 'Suit', 'Blazer', 'Trousers', 'Dress', 'Blouse', 'Kurta', 'Saree Blouse',
    'Lehenga', 'Sherwani',
]


def measurement_field(**kwargs):
    return models.DecimalField(max_digits=6, decimal_places=2, blank=True, null=True, **kwargs)


class Measurement(models.Model):
    """Body measurements taken for a customer's garment (inches)"""
    CODE_PREFIX = 'MSR'
    CODE_WIDTH = 5

    measurement_code = models.CharField(max_length=20, unique=True, editable=False)
    customer = models.ForeignKey(Customer, on_delete=models.CASCADE, related_name='measurements')
    taken_by = models.ForeignKey(Employee, on_delete=models.PROTECT, related_name='measurements')
    garment_type = models.CharField(max_length=100)

    # Upper body
    chest = measurement_field()
    waist = measurement_field()
    hips = measurement_field()
    shoulder = measurement_field()
    sleeve_length = measurement_field()
    arm_hole = measurement_field()
    bicep = measurement_field()
    wrist = measurement_field()
    neck_round = measurement_field()
    front_length = measurement_field()
    back_length = measurement_field()

    # Lower body
    inseam = measurement_field()
    outseam = measurement_field()
    thigh = measurement_field()
    knee = measurement_field()
    calf = measurement_field()
    ankle = measurement_field()
    rise = measurement_field()

    notes = models.TextField(blank=True, null=True)
    custom_fields = models.JSONField(blank=True, null=True, help_text="Additional named measurements")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.measurement_code} - {self.garment_type}"

    def save(self, *args, **kwargs):
        if not self.measurement_code:
            self.measurement_code = allocate_code(
                Measurement, 'measurement_code', self.CODE_PREFIX, width=self.CODE_WIDTH
            )
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'measurements'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['garment_type'], name='measurements_garment_idx'),
        ]
