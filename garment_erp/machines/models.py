from decimal import Decimal

from django.db import models
from django.utils import timezone

from garment_erp.core.codes import allocate_code
from garment_erp.employees.models import Employee


class Machine(models.Model):
    """Production floor machines (sewing, cutting, embroidery...)"""
    CODE_PREFIX = 'MCH'

    class Status(models.TextChoices):
        RUNNING = 'RUNNING', 'Running'
        IDLE = 'IDLE', 'Idle'
        MAINTENANCE_REQUIRED = 'MAINTENANCE_REQUIRED', 'Maintenance Required'
        UNDER_MAINTENANCE = 'UNDER_MAINTENANCE', 'Under Maintenance'
        OUT_OF_ORDER = 'OUT_OF_ORDER', 'Out of Order'

    machine_code = models.CharField(max_length=20, unique=True, editable=False)
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=100)
    manufacturer = models.CharField(max_length=200, blank=True, null=True)
    model = models.CharField(max_length=200, blank=True, null=True)
    purchase_date = models.DateField(blank=True, null=True)
    last_maintenance = models.DateTimeField(blank=True, null=True)
    next_maintenance = models.DateTimeField(blank=True, null=True)
    status = models.CharField(max_length=30, choices=Status.choices, default=Status.IDLE)
    location = models.CharField(max_length=200, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.machine_code} - {self.name}"

    def save(self, *args, **kwargs):
        if not self.machine_code:
            self.machine_code = allocate_code(Machine, 'machine_code', self.CODE_PREFIX)
        super().save(*args, **kwargs)

    @property
    def active_assignment(self):
        return self.assignments.filter(is_active=True).select_related('employee__user').first()

    class Meta:
        db_table = 'machines'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='machines_status_idx'),
            models.Index(fields=['type'], name='machines_type_idx'),
        ]


class MachineAssignment(models.Model):
    """Operator assigned to a machine; only one active assignment per machine"""
    machine = models.ForeignKey(Machine, on_delete=models.CASCADE, related_name='assignments')
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='machine_assignments')
    assigned_at = models.DateTimeField(default=timezone.now)
    unassigned_at = models.DateTimeField(blank=True, null=True)
    is_active = models.BooleanField(default=True)

    def __str__(self):
        return f"{self.machine.machine_code} -> {self.employee.employee_id}"

    class Meta:
        db_table = 'machine_assignments'
        ordering = ['-assigned_at']
        constraints = [
            models.UniqueConstraint(
                fields=['machine'],
                condition=models.Q(is_active=True),
                name='unique_active_assignment_per_machine',
            ),
        ]


class MaintenanceLog(models.Model):
    """Maintenance history for a machine"""
    class Type(models.TextChoices):
        ROUTINE = 'ROUTINE', 'Routine'
        REPAIR = 'REPAIR', 'Repair'
        EMERGENCY = 'EMERGENCY', 'Emergency'
        UPGRADE = 'UPGRADE', 'Upgrade'

    machine = models.ForeignKey(Machine, on_delete=models.CASCADE, related_name='maintenance_logs')
    type = models.CharField(max_length=20, choices=Type.choices)
    description = models.TextField()
    cost = models.DecimalField(max_digits=10, decimal_places=2, blank=True, null=True, default=Decimal('0.00'))
    performed_at = models.DateTimeField(default=timezone.now)
    performed_by = models.CharField(max_length=200, blank=True, null=True, help_text="Technician or vendor name")
    next_due_date = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.machine.machine_code} {self.type} {self.performed_at:%Y-%m-%d}"

    class Meta:
        db_table = 'maintenance_logs'
        ordering = ['-performed_at']
