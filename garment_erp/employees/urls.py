from django.urls import path
from .views import (
    employee_list_create, employee_detail, employee_departments,
    attendance_list_mark, attendance_bulk, attendance_today, attendance_report,
)

urlpatterns = [
    # Employee endpoints
    path('employees/', employee_list_create, name='employee-list-create'),
    path('employees/meta/departments/', employee_departments, name='employee-departments'),
    path('employees/<int:pk>/', employee_detail, name='employee-detail'),

    # Attendance endpoints
    path('attendance/', attendance_list_mark, name='attendance-list-mark'),
    path('attendance/bulk/', attendance_bulk, name='attendance-bulk'),
    path('attendance/today/', attendance_today, name='attendance-today'),
    path('attendance/report/', attendance_report, name='attendance-report'),
]
