"""
Test suite for the Machines module
Tests: machine registration, operator assignment, maintenance logging and status summary
"""
from django.test import TestCase
from rest_framework import status

from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.machines.models import Machine, MachineAssignment, MaintenanceLog


class MachineAPITests(TestCase):
    """Test machine CRUD endpoints"""

    def setUp(self):
        self.manager = TestDataFactory.create_user(role=Role.MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_machine_starts_idle(self):
        """Test new machines get a code and IDLE status regardless of input"""
        response = self.client.post(
            '/api/v1/machines/', {'name': 'Juki DDL-8700', 'type': 'Sewing', 'status': Machine.Status.RUNNING},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['machine_code'], 'MCH0001')
        self.assertEqual(response.data['data']['status'], Machine.Status.IDLE)

    def test_create_machine_forbidden_for_employee(self):
        """Test employees cannot register machines"""
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.EMPLOYEE))
        response = self.client.post('/api/v1/machines/', {'name': 'Cutter', 'type': 'Cutting'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_filters(self):
        """Test status and search filters"""
        TestDataFactory.create_machine(name='Overlock 1', status=Machine.Status.RUNNING)
        TestDataFactory.create_machine(name='Button holer')
        response = self.client.get(f'/api/v1/machines/?status={Machine.Status.RUNNING}')
        self.assertEqual(response.data['pagination']['total'], 1)
        response = self.client.get('/api/v1/machines/?search=button')
        self.assertEqual(response.data['data'][0]['name'], 'Button holer')

    def test_delete_requires_admin(self):
        """Test only admins delete machines"""
        machine = TestDataFactory.create_machine()
        response = self.client.delete(f'/api/v1/machines/{machine.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ADMIN))
        response = self.client.delete(f'/api/v1/machines/{machine.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_status_summary(self):
        """Test per status counts"""
        TestDataFactory.create_machine(status=Machine.Status.RUNNING)
        TestDataFactory.create_machine()
        TestDataFactory.create_machine()
        response = self.client.get('/api/v1/machines/summary/status/')
        counts = {row['status']: row['count'] for row in response.data['data']['by_status']}
        self.assertEqual(counts[Machine.Status.IDLE], 2)
        self.assertEqual(counts[Machine.Status.RUNNING], 1)
        self.assertEqual(response.data['data']['total'], 3)


class MachineAssignmentTests(TestCase):
    """Test assign, unassign and maintenance flows"""

    def setUp(self):
        self.floor_manager = TestDataFactory.create_user(role=Role.FLOOR_MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.floor_manager)
        self.machine = TestDataFactory.create_machine()
        self.employee = TestDataFactory.create_employee()

    def test_assign_sets_running(self):
        """Test assigning an operator starts the machine"""
        response = self.client.post(
            f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, Machine.Status.RUNNING)
        self.assertEqual(self.machine.active_assignment.employee, self.employee)

    def test_reassign_closes_previous(self):
        """Test only one assignment stays active"""
        other = TestDataFactory.create_employee()
        self.client.post(f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json')
        self.client.post(f'/api/v1/machines/{self.machine.id}/assign/', {'employee': other.id}, format='json')
        active = MachineAssignment.objects.filter(machine=self.machine, is_active=True)
        self.assertEqual(active.count(), 1)
        self.assertEqual(active.get().employee, other)
        self.assertIsNotNone(MachineAssignment.objects.get(employee=self.employee).unassigned_at)

    def test_assign_out_of_order_rejected(self):
        """Test broken machines cannot be assigned"""
        self.machine.status = Machine.Status.OUT_OF_ORDER
        self.machine.save()
        response = self.client.post(
            f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(MachineAssignment.objects.exists())

    def test_assign_inactive_employee_rejected(self):
        """Test inactive employees cannot be assigned"""
        self.employee.is_active = False
        self.employee.save()
        response = self.client.post(
            f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unassign_sets_idle(self):
        """Test unassigning stops the machine"""
        self.client.post(f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json')
        response = self.client.post(f'/api/v1/machines/{self.machine.id}/unassign/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, Machine.Status.IDLE)
        self.assertIsNone(self.machine.active_assignment)

    def test_maintenance_logs_and_idles(self):
        """Test maintenance creates a log, stamps dates and idles the machine"""
        self.client.post(f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json')
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.MANAGER))
        response = self.client.post(
            f'/api/v1/machines/{self.machine.id}/maintenance/',
            {
                'type': MaintenanceLog.Type.REPAIR,
                'description': 'Replaced needle bar',
                'cost': '450.00',
                'next_due_date': '2030-01-01T00:00:00Z',
            },
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.machine.refresh_from_db()
        self.assertEqual(self.machine.status, Machine.Status.IDLE)
        self.assertIsNotNone(self.machine.last_maintenance)
        self.assertEqual(self.machine.next_maintenance.year, 2030)
        self.assertEqual(self.machine.maintenance_logs.count(), 1)
        self.assertFalse(self.machine.assignments.filter(is_active=True).exists())

    def test_maintenance_forbidden_for_floor_manager(self):
        """Test floor managers cannot log maintenance"""
        response = self.client.post(
            f'/api/v1/machines/{self.machine.id}/maintenance/',
            {'type': MaintenanceLog.Type.ROUTINE, 'description': 'Oiling'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detail_includes_history(self):
        """Test the detail view carries assignments and logs"""
        self.client.post(f'/api/v1/machines/{self.machine.id}/assign/', {'employee': self.employee.id}, format='json')
        response = self.client.get(f'/api/v1/machines/{self.machine.id}/')
        data = response.data['data']
        self.assertEqual(len(data['assignments']), 1)
        self.assertEqual(data['current_assignment']['employee'], self.employee.id)
        self.assertEqual(data['maintenance_logs'], [])
