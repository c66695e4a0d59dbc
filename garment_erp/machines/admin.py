from django.contrib import admin
from .models import Machine, MachineAssignment, MaintenanceLog


class MaintenanceLogInline(admin.TabularInline):
    model = MaintenanceLog
    extra = 0
    fields = ['type', 'description', 'cost', 'performed_at', 'performed_by', 'next_due_date']


@admin.register(Machine)
class MachineAdmin(admin.ModelAdmin):
    list_display = ['machine_code', 'name', 'type', 'status', 'location', 'next_maintenance']
    list_filter = ['status', 'type']
    search_fields = ['machine_code', 'name', 'manufacturer', 'model']
    readonly_fields = ['machine_code', 'created_at', 'updated_at']
    inlines = [MaintenanceLogInline]
    ordering = ['machine_code']


@admin.register(MachineAssignment)
class MachineAssignmentAdmin(admin.ModelAdmin):
    list_display = ['machine', 'employee', 'assigned_at', 'unassigned_at', 'is_active']
    list_filter = ['is_active']
    search_fields = ['machine__machine_code', 'employee__employee_id']
    ordering = ['-assigned_at']


@admin.register(MaintenanceLog)
class MaintenanceLogAdmin(admin.ModelAdmin):
    list_display = ['machine', 'type', 'performed_at', 'performed_by', 'cost', 'next_due_date']
    list_filter = ['type', 'performed_at']
    search_fields = ['machine__machine_code', 'description', 'performed_by']
    ordering = ['-performed_at']
