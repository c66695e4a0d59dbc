from datetime import timedelta
from decimal import Decimal

from django.db.models import Count, Prefetch
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import IsAuthenticated

from garment_erp.core.utils import api_response, parse_positive_int
from garment_erp.employees.models import Employee, Attendance
from garment_erp.inventory.models import Material
from garment_erp.machines.models import Machine, MachineAssignment
from garment_erp.machines.serializers import MachineSerializer, MaintenanceLogSerializer
from garment_erp.parties.models import Customer
from garment_erp.purchasing.models import PurchaseOrder
from garment_erp.purchasing.serializers import PurchaseOrderListSerializer

PENDING_PO_STATUSES = [PurchaseOrder.Status.PENDING_APPROVAL, PurchaseOrder.Status.ORDERED]
RECENT_PURCHASE_ORDERS = 5
RECENT_MAINTENANCE_LOGS = 5
DEFAULT_PERIOD_DAYS = 7
MAX_PERIOD_DAYS = 366


def _status_breakdown(queryset, choices):
    """Count per status, listing every choice even when it has no rows"""
    counts = {
        row['status']: row['count']
        for row in queryset.order_by().values('status').annotate(count=Count('id'))
    }
    return [{'status': value, 'count': counts.get(value, 0)} for value in choices.values]


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def analytics_dashboard(request):
    """Headline counts and status breakdowns across the shop floor"""
    today = timezone.localdate()
    todays_attendance = Attendance.objects.filter(date=today)
    recent_orders = (
        PurchaseOrder.objects.select_related('supplier')
        .annotate(item_count=Count('items'))
        .order_by('-created_at')[:RECENT_PURCHASE_ORDERS]
    )

    return api_response({
        'counts': {
            'employees': Employee.objects.filter(is_active=True).count(),
            'machines': Machine.objects.count(),
            'materials': Material.objects.count(),
            'customers': Customer.objects.filter(is_active=True).count(),
            'pending_purchase_orders': PurchaseOrder.objects.filter(status__in=PENDING_PO_STATUSES).count(),
        },
        'attendance': {
            'date': today.isoformat(),
            'by_status': _status_breakdown(todays_attendance, Attendance.Status),
            'total': todays_attendance.count(),
        },
        'machine_status': _status_breakdown(Machine.objects.all(), Machine.Status),
        'material_status': _status_breakdown(Material.objects.all(), Material.Status),
        'recent_purchase_orders': PurchaseOrderListSerializer(recent_orders, many=True).data,
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def analytics_attendance(request):
    """
    Daily attendance counts for the last ``period`` days, today included.

    Every day in the window is listed with all statuses, so days nobody was
    marked show zeros rather than disappearing.
    """
    period = parse_positive_int(request.query_params.get('period'), 'period', DEFAULT_PERIOD_DAYS)
    if period > MAX_PERIOD_DAYS:
        raise ValidationError({'period': [f'period cannot exceed {MAX_PERIOD_DAYS} days.']})

    end_date = timezone.localdate()
    start_date = end_date - timedelta(days=period - 1)
    rows = (
        Attendance.objects.filter(date__gte=start_date, date__lte=end_date)
        .order_by()
        .values('date', 'status')
        .annotate(count=Count('id'))
    )

    daily = {}
    for offset in range(period):
        day = start_date + timedelta(days=offset)
        daily[day.isoformat()] = {value: 0 for value in Attendance.Status.values}
    totals = {value: 0 for value in Attendance.Status.values}
    for row in rows:
        daily[row['date'].isoformat()][row['status']] = row['count']
        totals[row['status']] += row['count']

    return api_response({
        'period': period,
        'start_date': start_date.isoformat(),
        'end_date': end_date.isoformat(),
        'daily': [{'date': day, **counts} for day, counts in daily.items()],
        'stats': [{'status': value, 'count': totals[value]} for value in Attendance.Status.values],
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def analytics_machines(request):
    """Utilisation figures plus each machine with its operator and latest maintenance"""
    machines = list(
        Machine.objects.prefetch_related(
            Prefetch(
                'assignments',
                queryset=MachineAssignment.objects.filter(is_active=True).select_related('employee__user'),
                to_attr='active_assignments',
            ),
            'maintenance_logs',
        ).order_by('machine_code')
    )

    counts = {value: 0 for value in Machine.Status.values}
    for machine in machines:
        counts[machine.status] += 1
    total = len(machines)
    running = counts[Machine.Status.RUNNING]
    utilization_rate = Decimal('0.00')
    if total:
        utilization_rate = (Decimal(running) * 100 / total).quantize(Decimal('0.01'))

    results = []
    for machine in machines:
        data = MachineSerializer(machine).data
        data['recent_maintenance'] = MaintenanceLogSerializer(
            list(machine.maintenance_logs.all())[:RECENT_MAINTENANCE_LOGS], many=True
        ).data
        results.append(data)

    return api_response({
        'efficiency': {
            'total': total,
            'running': running,
            'idle': counts[Machine.Status.IDLE],
            'maintenance': counts[Machine.Status.MAINTENANCE_REQUIRED] + counts[Machine.Status.UNDER_MAINTENANCE],
            'out_of_order': counts[Machine.Status.OUT_OF_ORDER],
            'utilization_rate': utilization_rate,
        },
        'machines': results,
    })
