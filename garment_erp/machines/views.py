import logging

from django.db import transaction
from django.db.models import Count, Prefetch
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.exceptions import InvalidStateTransition
from garment_erp.core.filters import filter_queryset
from garment_erp.core.models import Role
from garment_erp.core.permissions import role_required, FLOOR_ROLES, MANAGEMENT_ROLES
from garment_erp.core.utils import api_response, paginated_response
from .filters import MachineFilter
from .models import Machine, MachineAssignment
from .serializers import (
    MachineSerializer, MachineCreateSerializer, MachineAssignmentSerializer,
    MaintenanceLogSerializer, MachineAssignSerializer,
)

logger = logging.getLogger(__name__)


def _deactivate_assignments(machine):
    return machine.assignments.filter(is_active=True).update(is_active=False, unassigned_at=timezone.now())


@api_view(['GET', 'POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['POST'])])
def machine_list_create(request):
    """List machines with their current operator, or register a new machine"""
    if request.method == 'GET':
        queryset = Machine.objects.prefetch_related(
            Prefetch(
                'assignments',
                queryset=MachineAssignment.objects.filter(is_active=True).select_related('employee__user'),
                to_attr='active_assignments',
            )
        ).order_by('-created_at')
        queryset = filter_queryset(MachineFilter, request, queryset)
        return paginated_response(request, queryset, MachineSerializer)

    serializer = MachineCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    machine = serializer.save(status=Machine.Status.IDLE)
    logger.info(f"Machine {machine.machine_code} created by {request.user.email}")
    return api_response(MachineSerializer(machine).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([role_required(*MANAGEMENT_ROLES, methods=['PUT', 'PATCH'])])
def machine_detail(request, pk):
    """Retrieve (with assignment and maintenance history), update or delete a machine"""
    machine = get_object_or_404(Machine, pk=pk)

    if request.method == 'GET':
        data = MachineSerializer(machine).data
        data['assignments'] = MachineAssignmentSerializer(
            machine.assignments.select_related('employee__user').order_by('-assigned_at'), many=True
        ).data
        data['maintenance_logs'] = MaintenanceLogSerializer(
            machine.maintenance_logs.order_by('-performed_at'), many=True
        ).data
        return api_response(data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = MachineSerializer(machine, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return api_response(serializer.data)
    else:  # DELETE
        if request.user.role != Role.ADMIN:
            raise PermissionDenied()
        code = machine.machine_code
        machine.delete()
        logger.info(f"Machine {code} deleted by {request.user.email}")
        return api_response(message='Machine deleted successfully')


@api_view(['POST'])
@permission_classes([role_required(*FLOOR_ROLES)])
def machine_assign(request, pk):
    """Assign an operator; any current assignment is closed and the machine starts RUNNING"""
    serializer = MachineAssignSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    employee = serializer.validated_data['employee']

    with transaction.atomic():
        machine = get_object_or_404(Machine.objects.select_for_update(), pk=pk)
        if machine.status in (Machine.Status.OUT_OF_ORDER, Machine.Status.UNDER_MAINTENANCE):
            raise InvalidStateTransition(f'Cannot assign a machine that is {machine.get_status_display().lower()}.')
        _deactivate_assignments(machine)
        assignment = MachineAssignment.objects.create(machine=machine, employee=employee)
        machine.status = Machine.Status.RUNNING
        machine.save(update_fields=['status', 'updated_at'])

    logger.info(f"Machine {machine.machine_code} assigned to {employee.employee_id}")
    return api_response(MachineAssignmentSerializer(assignment).data)


@api_view(['POST'])
@permission_classes([role_required(*FLOOR_ROLES)])
def machine_unassign(request, pk):
    """Close the active assignment and set the machine IDLE"""
    with transaction.atomic():
        machine = get_object_or_404(Machine.objects.select_for_update(), pk=pk)
        closed = _deactivate_assignments(machine)
        if machine.status == Machine.Status.RUNNING:
            machine.status = Machine.Status.IDLE
            machine.save(update_fields=['status', 'updated_at'])

    logger.info(f"Machine {machine.machine_code} unassigned ({closed} assignment(s) closed)")
    return api_response(message='Employee unassigned successfully')


@api_view(['POST'])
@permission_classes([role_required(*MANAGEMENT_ROLES)])
def machine_maintenance(request, pk):
    """Record maintenance; stamps last/next maintenance and returns the machine to IDLE"""
    serializer = MaintenanceLogSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    with transaction.atomic():
        machine = get_object_or_404(Machine.objects.select_for_update(), pk=pk)
        log = serializer.save(machine=machine)
        _deactivate_assignments(machine)
        machine.last_maintenance = log.performed_at
        machine.next_maintenance = log.next_due_date
        machine.status = Machine.Status.IDLE
        machine.save(update_fields=['last_maintenance', 'next_maintenance', 'status', 'updated_at'])

    logger.info(f"Maintenance ({log.type}) logged for machine {machine.machine_code}")
    return api_response(MaintenanceLogSerializer(log).data, status_code=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def machine_status_summary(request):
    """Machine count per status"""
    rows = Machine.objects.order_by().values('status').annotate(count=Count('id'))
    counts = {row['status']: row['count'] for row in rows}
    return api_response({
        'by_status': [{'status': value, 'count': counts.get(value, 0)} for value in Machine.Status.values],
        'total': sum(counts.values()),
    })
