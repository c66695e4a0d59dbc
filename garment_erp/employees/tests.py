"""
Test suite for the Employees module
Tests: employee creation with login users, listing, attendance marking, today's summary and reports
"""
from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from garment_erp.core.models import Role, User
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.employees.models import Employee, Attendance


class EmployeeAPITests(TestCase):
    """Test employee endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def _payload(self, **overrides):
        data = {
            'email': 'Tailor@Test.com',
            'password': 'secret123',
            'first_name': 'Asha',
            'last_name': 'Patel',
            'department': 'Stitching',
            'designation': 'Tailor',
            'salary': '18000',
        }
        data.update(overrides)
        return data

    def test_create_employee_creates_user(self):
        """Test creating an employee also creates an EMPLOYEE login"""
        response = self.client.post('/api/v1/employees/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['employee_id'], 'EMP0001')
        user = User.objects.get(email='tailor@test.com')
        self.assertEqual(user.role, Role.EMPLOYEE)
        self.assertTrue(user.check_password('secret123'))

    def test_create_employee_duplicate_email(self):
        """Test duplicate emails are rejected"""
        self.client.post('/api/v1/employees/', self._payload(), format='json')
        response = self.client.post('/api/v1/employees/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Email already registered')
        self.assertEqual(Employee.objects.count(), 1)

    def test_create_employee_forbidden_for_floor_manager(self):
        """Test only admins and managers can add employees"""
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.FLOOR_MANAGER))
        response = self.client.post('/api/v1/employees/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_unpaginated_without_params(self):
        """Test the full list is returned when page and limit are omitted"""
        for _ in range(12):
            TestDataFactory.create_employee()
        response = self.client.get('/api/v1/employees/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 12)
        self.assertNotIn('pagination', response.data)

    def test_list_paginated_with_params(self):
        """Test page and limit switch pagination on"""
        for _ in range(3):
            TestDataFactory.create_employee()
        response = self.client.get('/api/v1/employees/?limit=2')
        self.assertEqual(len(response.data['data']), 2)
        self.assertEqual(response.data['pagination']['total'], 3)
        self.assertEqual(response.data['pagination']['pages'], 2)

    def test_filter_by_department(self):
        """Test the department filter"""
        TestDataFactory.create_employee(department='Cutting')
        TestDataFactory.create_employee(department='Finishing')
        response = self.client.get('/api/v1/employees/?department=Cutting')
        self.assertEqual(len(response.data['data']), 1)

    def test_update_employee_user_fields(self):
        """Test updating user name and employee fields together"""
        employee = TestDataFactory.create_employee()
        response = self.client.patch(
            f'/api/v1/employees/{employee.id}/', {'first_name': 'Ravi', 'designation': 'Supervisor'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        employee.refresh_from_db()
        employee.user.refresh_from_db()
        self.assertEqual(employee.user.first_name, 'Ravi')
        self.assertEqual(employee.designation, 'Supervisor')

    def test_delete_employee_removes_user(self):
        """Test deleting an employee deletes the login as well"""
        employee = TestDataFactory.create_employee()
        user_id = employee.user_id
        response = self.client.delete(f'/api/v1/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(User.objects.filter(id=user_id).exists())
        self.assertFalse(Employee.objects.filter(id=employee.id).exists())

    def test_departments(self):
        """Test distinct department listing"""
        TestDataFactory.create_employee(department='Cutting')
        TestDataFactory.create_employee(department='Cutting')
        TestDataFactory.create_employee(department='Stitching')
        response = self.client.get('/api/v1/employees/meta/departments/')
        self.assertEqual(response.data['data'], ['Cutting', 'Stitching'])

    def test_detail_includes_attendance(self):
        """Test the detail view carries recent attendance"""
        employee = TestDataFactory.create_employee()
        TestDataFactory.create_attendance(employee)
        response = self.client.get(f'/api/v1/employees/{employee.id}/')
        self.assertEqual(len(response.data['data']['attendances']), 1)
        self.assertEqual(response.data['data']['machine_assignments'], [])


class AttendanceAPITests(TestCase):
    """Test attendance endpoints"""

    def setUp(self):
        self.floor_manager = TestDataFactory.create_user(role=Role.FLOOR_MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.floor_manager)
        self.employee = TestDataFactory.create_employee()
        self.today = timezone.localdate()

    def test_mark_attendance_upserts(self):
        """Test marking twice for the same day updates the record"""
        data = {'employee': self.employee.id, 'date': self.today.isoformat(), 'status': Attendance.Status.PRESENT}
        response = self.client.post('/api/v1/attendance/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data['status'] = Attendance.Status.LATE
        response = self.client.post('/api/v1/attendance/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Attendance.objects.count(), 1)
        self.assertEqual(Attendance.objects.get().status, Attendance.Status.LATE)

    def test_mark_attendance_forbidden_for_employee(self):
        """Test employees cannot mark attendance"""
        self.client.authenticate_user(self.employee.user)
        data = {'employee': self.employee.id, 'date': self.today.isoformat(), 'status': Attendance.Status.PRESENT}
        response = self.client.post('/api/v1/attendance/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_check_out_before_check_in(self):
        """Test check-out must follow check-in"""
        data = {
            'employee': self.employee.id,
            'date': self.today.isoformat(),
            'status': Attendance.Status.PRESENT,
            'check_in': '2024-01-01T10:00:00Z',
            'check_out': '2024-01-01T09:00:00Z',
        }
        response = self.client.post('/api/v1/attendance/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_bulk_attendance(self):
        """Test bulk marking in one request"""
        other = TestDataFactory.create_employee()
        data = {'records': [
            {'employee': self.employee.id, 'date': self.today.isoformat(), 'status': Attendance.Status.PRESENT},
            {'employee': other.id, 'date': self.today.isoformat(), 'status': Attendance.Status.ON_LEAVE},
        ]}
        response = self.client.post('/api/v1/attendance/bulk/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['data']), 2)
        self.assertEqual(Attendance.objects.count(), 2)

    def test_bulk_attendance_rolls_back(self):
        """Test a bad record rejects the whole batch"""
        data = {'records': [
            {'employee': self.employee.id, 'date': self.today.isoformat(), 'status': Attendance.Status.PRESENT},
            {'employee': 99999, 'date': self.today.isoformat(), 'status': Attendance.Status.PRESENT},
        ]}
        response = self.client.post('/api/v1/attendance/bulk/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Attendance.objects.exists())

    def test_list_unpaginated_and_filtered(self):
        """Test listing by month without pagination"""
        TestDataFactory.create_attendance(self.employee, date=date(2024, 3, 5))
        TestDataFactory.create_attendance(self.employee, date=date(2024, 3, 6), status=Attendance.Status.LATE)
        TestDataFactory.create_attendance(self.employee, date=date(2024, 4, 1))
        response = self.client.get('/api/v1/attendance/?year=2024&month=3')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['date'] for row in response.data['data']], ['2024-03-05', '2024-03-06'])
        self.assertNotIn('pagination', response.data)

        response = self.client.get(f'/api/v1/attendance/?status={Attendance.Status.LATE}&page=1')
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_today_summary(self):
        """Test unmarked employees count as absent"""
        late = TestDataFactory.create_employee()
        TestDataFactory.create_employee()
        TestDataFactory.create_attendance(self.employee, status=Attendance.Status.PRESENT)
        TestDataFactory.create_attendance(late, status=Attendance.Status.LATE)
        response = self.client.get('/api/v1/attendance/today/')
        summary = response.data['data']['summary']
        self.assertEqual(summary['total'], 3)
        self.assertEqual(summary['present'], 1)
        self.assertEqual(summary['late'], 1)
        self.assertEqual(summary['absent'], 1)
        self.assertEqual(len(response.data['data']['attendances']), 2)

    def test_report_requires_dates(self):
        """Test the report needs a date range"""
        response = self.client.get('/api/v1/attendance/report/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Start and end date required')

    def test_report_groups_per_employee(self):
        """Test the report counts statuses per employee"""
        start = self.today - timedelta(days=3)
        TestDataFactory.create_attendance(self.employee, date=start)
        TestDataFactory.create_attendance(self.employee, date=start + timedelta(days=1), status=Attendance.Status.HALF_DAY)
        TestDataFactory.create_attendance(self.employee, date=start - timedelta(days=10))
        response = self.client.get(
            f'/api/v1/attendance/report/?start_date={start.isoformat()}&end_date={self.today.isoformat()}'
        )
        self.assertEqual(len(response.data['data']), 1)
        entry = response.data['data'][0]
        self.assertEqual(entry['employee']['employee_id'], self.employee.employee_id)
        self.assertEqual(entry['summary']['present'], 1)
        self.assertEqual(entry['summary']['half_day'], 1)
        self.assertEqual(len(entry['records']), 2)
