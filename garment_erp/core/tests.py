"""
Test suite for the core module
Tests: code generation, authentication, the response envelope, pagination, users and settings
"""
from datetime import date
from io import StringIO

from django.core.management import call_command
from django.test import TestCase, override_settings
from rest_framework import status

from garment_erp.core.codes import (
    next_code, next_monthly_code, parse_code_number, allocate_code, allocate_monthly_code,
)
from garment_erp.core.models import Role, Setting, CodeSequence, User
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.employees.models import Employee
from garment_erp.inventory.models import Material
from garment_erp.parties.models import Customer, Supplier
from garment_erp.purchasing.models import PurchaseOrder


class CodeGeneratorTests(TestCase):
    """Test sequential code helpers"""

    def test_next_code_increments_suffix(self):
        """Test the next code after CUST0042 is CUST0043"""
        self.assertEqual(next_code('CUST', 'CUST0042'), 'CUST0043')

    def test_next_code_empty_namespace(self):
        """Test an empty namespace starts at 0001"""
        self.assertEqual(next_code('SUP', None), 'SUP0001')

    def test_next_code_custom_width(self):
        """Test codes can be padded to other widths"""
        self.assertEqual(next_code('MSR', 'MSR00009', width=5), 'MSR00010')

    def test_malformed_code_counts_as_zero(self):
        """Test a code with a non numeric suffix does not advance the sequence"""
        self.assertEqual(parse_code_number('CUSTABC', 'CUST'), 0)
        self.assertEqual(parse_code_number('OTHER0005', 'CUST'), 0)

    def test_monthly_code_continues_within_month(self):
        """Test PO numbers continue inside the same month"""
        self.assertEqual(next_monthly_code('PO', 'PO2024010007', date(2024, 1, 20)), 'PO2024010008')

    def test_monthly_code_restarts_each_month(self):
        """Test a new month restarts the sequence at 0001"""
        self.assertEqual(next_monthly_code('PO', 'PO2024010007', date(2024, 2, 1)), 'PO2024020001')
        self.assertEqual(next_monthly_code('PO', None, date(2024, 2, 1)), 'PO2024020001')

    def test_allocate_code_is_sequential(self):
        """Test saved customers receive consecutive codes"""
        first = TestDataFactory.create_customer()
        second = TestDataFactory.create_customer()
        self.assertEqual(first.customer_code, 'CUST0001')
        self.assertEqual(second.customer_code, 'CUST0002')
        self.assertEqual(CodeSequence.objects.get(namespace='CUST').last_value, 2)

    def test_allocate_code_skips_codes_written_outside_allocator(self):
        """Test codes already stored push the counter forward"""
        Customer.objects.bulk_create([Customer(customer_code='CUST0042', name='Imported', phone='1')])
        self.assertEqual(allocate_code(Customer, 'customer_code', 'CUST'), 'CUST0043')

    def test_allocate_code_never_reuses_numbers(self):
        """Test a deleted highest code is not handed out again"""
        supplier = TestDataFactory.create_supplier()
        self.assertEqual(supplier.supplier_code, 'SUP0001')
        supplier.delete()
        self.assertEqual(TestDataFactory.create_supplier().supplier_code, 'SUP0002')

    def test_allocate_monthly_code_separates_months(self):
        """Test monthly namespaces never collide"""
        self.assertEqual(allocate_monthly_code(PurchaseOrder, 'po_number', 'PO', date(2024, 1, 5)), 'PO2024010001')
        self.assertEqual(allocate_monthly_code(PurchaseOrder, 'po_number', 'PO', date(2024, 1, 9)), 'PO2024010002')
        self.assertEqual(allocate_monthly_code(PurchaseOrder, 'po_number', 'PO', date(2024, 2, 1)), 'PO2024020001')


class AuthAPITests(TestCase):
    """Test login, registration and token handling"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.user = TestDataFactory.create_user(email='admin@test.com', password='secret123')

    def test_login_returns_tokens(self):
        """Test login with valid credentials"""
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'admin@test.com', 'password': 'secret123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertIn('token', response.data['data'])
        self.assertIn('refresh', response.data['data'])
        self.assertEqual(response.data['data']['user']['email'], 'admin@test.com')

    def test_login_wrong_password(self):
        """Test login with a wrong password returns 401"""
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'admin@test.com', 'password': 'wrong'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['message'], 'Invalid credentials')

    def test_login_inactive_user(self):
        """Test a deactivated account cannot log in"""
        TestDataFactory.create_user(email='gone@test.com', password='secret123', is_active=False)
        response = self.client.post(
            '/api/v1/auth/login/', {'email': 'gone@test.com', 'password': 'secret123'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Account is deactivated')

    def test_register_forces_employee_role(self):
        """Test public registration cannot pick a privileged role"""
        data = {
            'email': 'new@test.com', 'password': 'secret123',
            'first_name': 'New', 'last_name': 'Person', 'role': Role.ADMIN,
        }
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['role'], Role.EMPLOYEE)

    def test_register_duplicate_email(self):
        """Test registering an existing email fails"""
        data = {'email': 'admin@test.com', 'password': 'secret123', 'first_name': 'A', 'last_name': 'B'}
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data['errors'])

    def test_register_short_password(self):
        """Test passwords shorter than six characters are rejected"""
        data = {'email': 'short@test.com', 'password': '123', 'first_name': 'A', 'last_name': 'B'}
        response = self.client.post('/api/v1/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_me_requires_token(self):
        """Test missing token gives a 401 envelope"""
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertFalse(response.data['success'])
        self.assertIn('message', response.data)

    def test_me_returns_current_user(self):
        """Test the profile endpoint"""
        self.client.authenticate_user(self.user)
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['email'], 'admin@test.com')

    def test_change_password(self):
        """Test changing the password with the current one"""
        self.client.authenticate_user(self.user)
        response = self.client.post(
            '/api/v1/auth/change-password/',
            {'current_password': 'secret123', 'new_password': 'newsecret123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('newsecret123'))

    def test_change_password_wrong_current(self):
        """Test a wrong current password is rejected"""
        self.client.authenticate_user(self.user)
        response = self.client.post(
            '/api/v1/auth/change-password/',
            {'current_password': 'nope', 'new_password': 'newsecret123'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_health_is_public(self):
        """Test the health check needs no token"""
        response = self.client.get('/api/v1/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], 'ok')


class UserAPITests(TestCase):
    """Test user management endpoints and role checks"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=Role.ADMIN)
        self.employee = TestDataFactory.create_user(role=Role.EMPLOYEE)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_list_users_paginated(self):
        """Test the pagination block of a list response"""
        for _ in range(3):
            TestDataFactory.create_user(role=Role.EMPLOYEE)
        response = self.client.get('/api/v1/users/?page=2&limit=2')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination'], {'page': 2, 'limit': 2, 'total': 5, 'pages': 3})
        self.assertEqual(len(response.data['data']), 2)

    def test_list_users_defaults(self):
        """Test default page and limit"""
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.data['pagination']['page'], 1)
        self.assertEqual(response.data['pagination']['limit'], 10)

    def test_list_users_invalid_page(self):
        """Test a non numeric page is a 400"""
        response = self.client.get('/api/v1/users/?page=abc')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        response = self.client.get('/api/v1/users/?limit=0')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    @override_settings(API_MAX_PAGE_SIZE=5)
    def test_list_users_limit_above_maximum(self):
        """Test a limit above the configured maximum is a 400"""
        response = self.client.get('/api/v1/users/?limit=6')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

        response = self.client.get('/api/v1/users/?limit=5')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['pagination']['limit'], 5)

    def test_list_users_forbidden_for_employee(self):
        """Test role violations give a 403 envelope"""
        self.client.authenticate_user(self.employee)
        response = self.client.get('/api/v1/users/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(response.data['success'])

    def test_filter_users_by_role(self):
        """Test the role filter"""
        response = self.client.get(f'/api/v1/users/?role={Role.EMPLOYEE}')
        emails = [row['email'] for row in response.data['data']]
        self.assertEqual(emails, [self.employee.email])

    def test_user_cannot_change_own_role(self):
        """Test only admins may change role"""
        self.client.authenticate_user(self.employee)
        response = self.client.patch(
            f'/api/v1/users/{self.employee.id}/', {'first_name': 'Renamed', 'role': Role.ADMIN}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.employee.refresh_from_db()
        self.assertEqual(self.employee.first_name, 'Renamed')
        self.assertEqual(self.employee.role, Role.EMPLOYEE)

    def test_user_cannot_update_others(self):
        """Test editing another user's profile is forbidden"""
        self.client.authenticate_user(self.employee)
        response = self.client.patch(f'/api/v1/users/{self.admin.id}/', {'first_name': 'X'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_cannot_delete_self(self):
        """Test admins cannot delete their own account"""
        response = self.client.delete(f'/api/v1/users/{self.admin.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_deletes_user(self):
        """Test deleting a user"""
        response = self.client.delete(f'/api/v1/users/{self.employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_missing_user_returns_404(self):
        """Test unknown ids give a 404 envelope"""
        response = self.client.get('/api/v1/users/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data['success'])


class SettingAPITests(TestCase):
    """Test settings endpoints"""

    def setUp(self):
        self.admin = TestDataFactory.create_user(role=Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_upsert_setting(self):
        """Test creating then updating a setting by key"""
        response = self.client.put('/api/v1/settings/currency/', {'value': 'INR'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.put('/api/v1/settings/currency/', {'value': 'USD'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Setting.objects.get(key='currency').value, 'USD')

    def test_bulk_settings_and_company_info(self):
        """Test bulk upsert and the company info view"""
        response = self.client.put(
            '/api/v1/settings/',
            {'settings': {'company_name': 'Acme Garments', 'company_city': 'Surat', 'theme': 'dark'}},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        response = self.client.get('/api/v1/settings/company/info/')
        self.assertEqual(response.data['data'], {'name': 'Acme Garments', 'city': 'Surat'})

    def test_bulk_settings_requires_object(self):
        """Test bulk upsert without a settings object"""
        response = self.client.put('/api/v1/settings/', {}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_non_admin_cannot_write_settings(self):
        """Test settings writes are admin only"""
        manager = TestDataFactory.create_user(role=Role.MANAGER)
        self.client.authenticate_user(manager)
        response = self.client.put('/api/v1/settings/currency/', {'value': 'INR'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_get_all_settings(self):
        """Test settings are returned as a key/value object"""
        Setting.objects.create(key='currency', value='INR')
        response = self.client.get('/api/v1/settings/')
        self.assertEqual(response.data['data'], {'currency': 'INR'})


class SeedDemoCommandTests(TestCase):
    """Test the demo data command"""

    def test_seed_demo_is_idempotent(self):
        """Test running the command twice creates everything once"""
        call_command('seed_demo', stdout=StringIO())
        call_command('seed_demo', stdout=StringIO())
        self.assertEqual(User.objects.filter(role=Role.ADMIN).count(), 1)
        self.assertEqual(Employee.objects.count(), 4)
        self.assertEqual(Material.objects.get(name='Shirt Buttons').status, 'OUT_OF_STOCK')
        self.assertEqual(Supplier.objects.count(), 2)
        self.assertTrue(Setting.objects.filter(key='company_name').exists())
