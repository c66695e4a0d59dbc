import logging
from collections import OrderedDict

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.filters import filter_queryset
from garment_erp.core.models import Role
from garment_erp.core.permissions import role_required, FLOOR_ROLES, MANAGEMENT_ROLES
from garment_erp.core.utils import api_response, list_response
from .filters import EmployeeFilter, AttendanceFilter
from .models import Employee, Attendance
from .serializers import (
    EmployeeSerializer, EmployeeCreateSerializer, EmployeeUpdateSerializer,
    AttendanceSerializer, AttendanceMarkSerializer, AttendanceBulkSerializer,
)

logger = logging.getLogger(__name__)

STATUS_SUMMARY_KEYS = OrderedDict([
    (Attendance.Status.PRESENT, 'present'),
    (Attendance.Status.ABSENT, 'absent'),
    (Attendance.Status.LATE, 'late'),
    (Attendance.Status.HALF_DAY, 'half_day'),
    (Attendance.Status.ON_LEAVE, 'on_leave'),
])


# Employee views
@api_view(['GET', 'POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['POST'])])
def employee_list_create(request):
    """List employees (unpaginated without page/limit) or create one with its login user"""
    if request.method == 'GET':
        queryset = Employee.objects.select_related('user')
        queryset = filter_queryset(EmployeeFilter, request, queryset)
        if 'page' in request.query_params or 'limit' in request.query_params:
            queryset = queryset.order_by('-created_at')
        else:
            queryset = queryset.order_by('user__first_name', 'user__last_name')
        return list_response(request, queryset, EmployeeSerializer, allow_unpaginated=True)

    serializer = EmployeeCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    employee = serializer.save()
    logger.info(f"Employee {employee.employee_id} created by {request.user.email}")
    return api_response(EmployeeSerializer(employee).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['PUT', 'PATCH'])])
def employee_detail(request, pk):
    """Retrieve, update or delete an employee"""
    employee = get_object_or_404(Employee.objects.select_related('user'), pk=pk)

    if request.method == 'GET':
        from garment_erp.machines.serializers import MachineAssignmentSerializer

        data = EmployeeSerializer(employee).data
        data['attendances'] = AttendanceSerializer(employee.attendances.order_by('-date')[:30], many=True).data
        data['machine_assignments'] = MachineAssignmentSerializer(
            employee.machine_assignments.select_related('machine').order_by('-assigned_at'), many=True
        ).data
        return api_response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = EmployeeUpdateSerializer(employee, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)
    else:  # DELETE
        if request.user.role != Role.ADMIN:
            raise PermissionDenied()
        code = employee.employee_id
        # deleting the user cascades to the employee record
        employee.user.delete()
        logger.info(f"Employee {code} deleted by {request.user.email}")
        return api_response(message='Employee deleted successfully')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def employee_departments(request):
    """Distinct departments in use"""
    departments = (
        Employee.objects.order_by('department')
        .values_list('department', flat=True)
        .distinct()
    )
    return api_response(list(departments))


# Attendance views
@api_view(['GET', 'POST'])
@permission_classes([role_required(*FLOOR_ROLES, methods=['POST'])])
def attendance_list_mark(request):
    """List attendance (unpaginated without page/limit) or mark one record"""
    if request.method == 'GET':
        queryset = Attendance.objects.select_related('employee__user')
        queryset = filter_queryset(AttendanceFilter, request, queryset)
        if 'page' in request.query_params or 'limit' in request.query_params:
            queryset = queryset.order_by('-date', '-created_at')
        else:
            queryset = queryset.order_by('date', 'id')
        return list_response(request, queryset, AttendanceSerializer, allow_unpaginated=True)

    serializer = AttendanceMarkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    attendance = serializer.save()
    return api_response(AttendanceSerializer(attendance).data)


@api_view(['POST'])
@permission_classes([role_required(*FLOOR_ROLES)])
def attendance_bulk(request):
    """Mark many attendance records in one transaction"""
    serializer = AttendanceBulkSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    records = serializer.save()
    logger.info(f"{len(records)} attendance records marked by {request.user.email}")
    return api_response(
        AttendanceSerializer(records, many=True).data,
        message=f'{len(records)} records updated',
    )


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_today(request):
    """
    Today's records plus a summary. Active employees without a record count
    as absent alongside those explicitly marked ABSENT.
    """
    today = timezone.localdate()
    records = list(
        Attendance.objects.filter(date=today).select_related('employee__user').order_by('employee__employee_id')
    )
    total = Employee.objects.filter(is_active=True).count()
    marked_employee_ids = {record.employee_id for record in records}
    unmarked = Employee.objects.filter(is_active=True).exclude(id__in=marked_employee_ids).count()

    counts = {key: 0 for key in STATUS_SUMMARY_KEYS.values()}
    for record in records:
        counts[STATUS_SUMMARY_KEYS[record.status]] += 1

    return api_response({
        'date': today.isoformat(),
        'attendances': AttendanceSerializer(records, many=True).data,
        'summary': {
            'total': total,
            'present': counts['present'],
            'late': counts['late'],
            'absent': counts['absent'] + unmarked,
            'half_day': counts['half_day'],
            'on_leave': counts['on_leave'],
        },
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_report(request):
    """Attendance between start_date and end_date grouped per employee"""
    if not request.query_params.get('start_date') or not request.query_params.get('end_date'):
        raise ValidationError({'detail': ['Start and end date required']})

    queryset = Attendance.objects.select_related('employee__user').order_by('date', 'id')
    queryset = filter_queryset(AttendanceFilter, request, queryset)

    grouped = OrderedDict()
    for record in queryset:
        entry = grouped.get(record.employee_id)
        if entry is None:
            entry = grouped[record.employee_id] = {
                'employee': {
                    'id': record.employee.id,
                    'employee_id': record.employee.employee_id,
                    'name': record.employee.user.full_name,
                    'department': record.employee.department,
                },
                'records': [],
                'summary': {key: 0 for key in STATUS_SUMMARY_KEYS.values()},
            }
        entry['records'].append(record)
        entry['summary'][STATUS_SUMMARY_KEYS[record.status]] += 1

    data = []
    for entry in grouped.values():
        entry['records'] = AttendanceSerializer(entry['records'], many=True).data
        data.append(entry)
    return api_response(data)
