"""
Test suite for the Analytics module
Tests: dashboard counts, attendance trends and machine utilisation
"""
from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.employees.models import Attendance
from garment_erp.inventory.models import Material
from garment_erp.machines.models import Machine, MachineAssignment, MaintenanceLog
from garment_erp.purchasing.models import PurchaseOrder


def as_counts(breakdown):
    return {row['status']: row['count'] for row in breakdown}


class DashboardAPITests(TestCase):
    """Test the dashboard aggregate endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.EMPLOYEE)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_dashboard_requires_authentication(self):
        """Test anonymous requests are rejected"""
        self.client.logout()
        response = self.client.get('/api/v1/analytics/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_dashboard_empty_database(self):
        """Test every breakdown lists all statuses with zero counts"""
        response = self.client.get('/api/v1/analytics/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        self.assertEqual(data['counts'], {
            'employees': 0, 'machines': 0, 'materials': 0, 'customers': 0, 'pending_purchase_orders': 0,
        })
        self.assertEqual(as_counts(data['machine_status']), {value: 0 for value in Machine.Status.values})
        self.assertEqual(as_counts(data['material_status']), {value: 0 for value in Material.Status.values})
        self.assertEqual(data['attendance']['total'], 0)
        self.assertEqual(data['recent_purchase_orders'], [])

    def test_dashboard_counts_only_active_records(self):
        """Test inactive employees and customers are left out of the counts"""
        TestDataFactory.create_employee()
        TestDataFactory.create_employee(is_active=False)
        TestDataFactory.create_customer()
        TestDataFactory.create_customer(is_active=False)
        TestDataFactory.create_machine()
        TestDataFactory.create_material()

        counts = self.client.get('/api/v1/analytics/dashboard/').data['data']['counts']
        self.assertEqual(counts['employees'], 1)
        self.assertEqual(counts['customers'], 1)
        self.assertEqual(counts['machines'], 1)
        self.assertEqual(counts['materials'], 1)

    def test_dashboard_pending_purchase_orders(self):
        """Test orders awaiting approval or delivery count as pending"""
        supplier = TestDataFactory.create_supplier()
        for po_status in PurchaseOrder.Status.values:
            TestDataFactory.create_purchase_order(user=self.user, supplier=supplier, status=po_status)

        data = self.client.get('/api/v1/analytics/dashboard/').data['data']
        self.assertEqual(data['counts']['pending_purchase_orders'], 2)
        self.assertEqual(len(data['recent_purchase_orders']), 5)

    def test_dashboard_todays_attendance_by_status(self):
        """Test only today's attendance is broken down"""
        today = timezone.localdate()
        first = TestDataFactory.create_employee()
        second = TestDataFactory.create_employee()
        TestDataFactory.create_attendance(first, date=today, status=Attendance.Status.PRESENT)
        TestDataFactory.create_attendance(second, date=today, status=Attendance.Status.LATE)
        TestDataFactory.create_attendance(first, date=today - timedelta(days=1), status=Attendance.Status.ABSENT)

        attendance = self.client.get('/api/v1/analytics/dashboard/').data['data']['attendance']
        self.assertEqual(attendance['date'], today.isoformat())
        self.assertEqual(attendance['total'], 2)
        counts = as_counts(attendance['by_status'])
        self.assertEqual(counts[Attendance.Status.PRESENT], 1)
        self.assertEqual(counts[Attendance.Status.LATE], 1)
        self.assertEqual(counts[Attendance.Status.ABSENT], 0)

    def test_dashboard_machine_and_material_status(self):
        """Test machine and material status breakdowns"""
        TestDataFactory.create_machine(status=Machine.Status.RUNNING)
        TestDataFactory.create_machine(status=Machine.Status.RUNNING)
        TestDataFactory.create_machine(status=Machine.Status.OUT_OF_ORDER)
        TestDataFactory.create_material(quantity=Decimal('0'))
        TestDataFactory.create_material(quantity=Decimal('5.00'))
        TestDataFactory.create_material()

        data = self.client.get('/api/v1/analytics/dashboard/').data['data']
        machine_counts = as_counts(data['machine_status'])
        self.assertEqual(machine_counts[Machine.Status.RUNNING], 2)
        self.assertEqual(machine_counts[Machine.Status.OUT_OF_ORDER], 1)
        self.assertEqual(machine_counts[Machine.Status.IDLE], 0)
        material_counts = as_counts(data['material_status'])
        self.assertEqual(material_counts[Material.Status.OUT_OF_STOCK], 1)
        self.assertEqual(material_counts[Material.Status.LOW_STOCK], 1)
        self.assertEqual(material_counts[Material.Status.AVAILABLE], 1)


class AttendanceTrendAPITests(TestCase):
    """Test the daily attendance trend endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.employee = TestDataFactory.create_employee()

    def test_default_period_lists_every_day(self):
        """Test the default window is seven days ending today"""
        response = self.client.get('/api/v1/analytics/attendance/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        today = timezone.localdate()
        self.assertEqual(data['period'], 7)
        self.assertEqual(len(data['daily']), 7)
        self.assertEqual(data['daily'][0]['date'], (today - timedelta(days=6)).isoformat())
        self.assertEqual(data['daily'][-1]['date'], today.isoformat())
        self.assertEqual(data['daily'][0][Attendance.Status.PRESENT], 0)

    def test_counts_fall_on_their_day(self):
        """Test records are counted on their own date and totalled in stats"""
        today = timezone.localdate()
        other = TestDataFactory.create_employee()
        TestDataFactory.create_attendance(self.employee, date=today, status=Attendance.Status.PRESENT)
        TestDataFactory.create_attendance(other, date=today, status=Attendance.Status.PRESENT)
        TestDataFactory.create_attendance(self.employee, date=today - timedelta(days=1),
                                          status=Attendance.Status.ON_LEAVE)
        TestDataFactory.create_attendance(self.employee, date=today - timedelta(days=3),
                                          status=Attendance.Status.ABSENT)

        data = self.client.get('/api/v1/analytics/attendance/?period=2').data['data']
        self.assertEqual(len(data['daily']), 2)
        yesterday, current = data['daily']
        self.assertEqual(current[Attendance.Status.PRESENT], 2)
        self.assertEqual(yesterday[Attendance.Status.ON_LEAVE], 1)
        stats = as_counts(data['stats'])
        self.assertEqual(stats[Attendance.Status.PRESENT], 2)
        self.assertEqual(stats[Attendance.Status.ON_LEAVE], 1)
        self.assertEqual(stats[Attendance.Status.ABSENT], 0)

    def test_invalid_period_rejected(self):
        """Test non numeric, zero and oversized periods are a 400"""
        for period in ('abc', '0', '367'):
            response = self.client.get(f'/api/v1/analytics/attendance/?period={period}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertFalse(response.data['success'])


class MachineUtilizationAPITests(TestCase):
    """Test the machine utilisation endpoint"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.FLOOR_MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_no_machines(self):
        """Test utilisation is zero without machines"""
        response = self.client.get('/api/v1/analytics/machines/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        efficiency = response.data['data']['efficiency']
        self.assertEqual(efficiency['total'], 0)
        self.assertEqual(efficiency['utilization_rate'], Decimal('0.00'))
        self.assertEqual(response.data['data']['machines'], [])

    def test_efficiency_breakdown(self):
        """Test running share and maintenance grouping"""
        TestDataFactory.create_machine(status=Machine.Status.RUNNING)
        TestDataFactory.create_machine(status=Machine.Status.IDLE)
        TestDataFactory.create_machine(status=Machine.Status.MAINTENANCE_REQUIRED)
        TestDataFactory.create_machine(status=Machine.Status.UNDER_MAINTENANCE)
        TestDataFactory.create_machine(status=Machine.Status.OUT_OF_ORDER)
        TestDataFactory.create_machine(status=Machine.Status.RUNNING)

        efficiency = self.client.get('/api/v1/analytics/machines/').data['data']['efficiency']
        self.assertEqual(efficiency['total'], 6)
        self.assertEqual(efficiency['running'], 2)
        self.assertEqual(efficiency['idle'], 1)
        self.assertEqual(efficiency['maintenance'], 2)
        self.assertEqual(efficiency['out_of_order'], 1)
        self.assertEqual(efficiency['utilization_rate'], Decimal('33.33'))

    def test_machines_include_operator_and_recent_maintenance(self):
        """Test each machine carries its active operator and at most five latest logs"""
        machine = TestDataFactory.create_machine(status=Machine.Status.RUNNING)
        employee = TestDataFactory.create_employee()
        MachineAssignment.objects.create(machine=machine, employee=employee)
        now = timezone.now()
        for days_ago in range(7):
            MaintenanceLog.objects.create(
                machine=machine, type=MaintenanceLog.Type.ROUTINE,
                description=f'Service {days_ago}', performed_at=now - timedelta(days=days_ago),
            )

        machines = self.client.get('/api/v1/analytics/machines/').data['data']['machines']
        self.assertEqual(len(machines), 1)
        self.assertEqual(machines[0]['current_assignment']['employee'], employee.id)
        recent = machines[0]['recent_maintenance']
        self.assertEqual(len(recent), 5)
        self.assertEqual(recent[0]['description'], 'Service 0')
