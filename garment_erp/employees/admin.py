from django.contrib import admin
from .models import Employee, Attendance


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['employee_id', 'user', 'department', 'designation', 'joining_date', 'is_active']
    list_filter = ['department', 'is_active']
    search_fields = ['employee_id', 'user__email', 'user__first_name', 'user__last_name']
    readonly_fields = ['employee_id', 'created_at', 'updated_at']
    ordering = ['employee_id']


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['employee', 'date', 'status', 'check_in', 'check_out']
    list_filter = ['status', 'date']
    search_fields = ['employee__employee_id', 'employee__user__first_name', 'employee__user__last_name']
    ordering = ['-date']
    date_hierarchy = 'date'
