from decimal import Decimal

from django.db import models
from django.utils import timezone

from garment_erp.core.codes import allocate_code
from garment_erp.core.models import User


class Employee(models.Model):
    """Staff record linked one-to-one with a login user"""
    CODE_PREFIX = 'EMP'

    employee_id = models.CharField(max_length=20, unique=True, editable=False)
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='employee')
    department = models.CharField(max_length=100)
    designation = models.CharField(max_length=100)
    joining_date = models.DateField(default=timezone.localdate)
    salary = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    address = models.TextField(blank=True, null=True)
    emergency_contact = models.CharField(max_length=100, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee_id} - {self.user.full_name}"

    def save(self, *args, **kwargs):
        if not self.employee_id:
            self.employee_id = allocate_code(Employee, 'employee_id', self.CODE_PREFIX)
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'employees'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['department'], name='employees_department_idx'),
        ]


class Attendance(models.Model):
    """Daily attendance, one record per employee per date"""
    class Status(models.TextChoices):
        PRESENT = 'PRESENT', 'Present'
        ABSENT = 'ABSENT', 'Absent'
        LATE = 'LATE', 'Late'
        HALF_DAY = 'HALF_DAY', 'Half Day'
        ON_LEAVE = 'ON_LEAVE', 'On Leave'

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='attendances')
    date = models.DateField()
    check_in = models.DateTimeField(blank=True, null=True)
    check_out = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PRESENT)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.employee.employee_id} {self.date} {self.status}"

    class Meta:
        db_table = 'attendances'
        ordering = ['-date', '-created_at']
        constraints = [
            models.UniqueConstraint(fields=['employee', 'date'], name='unique_attendance_per_day'),
        ]
        indexes = [
            models.Index(fields=['date'], name='attendances_date_idx'),
            models.Index(fields=['status'], name='attendances_status_idx'),
        ]
