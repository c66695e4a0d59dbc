"""
Test suite for the Parties module
Tests: customer and supplier CRUD, code assignment and role checks
"""
from django.test import TestCase
from rest_framework import status

from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.parties.models import Customer


class CustomerAPITests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.EMPLOYEE)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_customer(self):
        """Test any signed in user can add customers"""
        response = self.client.post(
            '/api/v1/customers/', {'name': 'Meera Shah', 'phone': '9800000001', 'city': 'Pune'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['customer_code'], 'CUST0001')
        self.assertEqual(response.data['data']['country'], 'India')

    def test_create_customer_requires_phone(self):
        """Test phone is mandatory"""
        response = self.client.post('/api/v1/customers/', {'name': 'No Phone'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone', response.data['errors'])

    def test_code_is_immutable(self):
        """Test the customer code cannot be edited"""
        customer = TestDataFactory.create_customer()
        response = self.client.patch(
            f'/api/v1/customers/{customer.id}/', {'customer_code': 'CUST9999', 'city': 'Delhi'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        customer.refresh_from_db()
        self.assertEqual(customer.customer_code, 'CUST0001')
        self.assertEqual(customer.city, 'Delhi')

    def test_search(self):
        """Test search across code, name and phone"""
        TestDataFactory.create_customer(name='Kavita Rao')
        TestDataFactory.create_customer(name='Arjun Das', phone='9111111111')
        response = self.client.get('/api/v1/customers/?search=kavita')
        self.assertEqual(len(response.data['data']), 1)
        response = self.client.get('/api/v1/customers/?search=91111')
        self.assertEqual(response.data['data'][0]['name'], 'Arjun Das')

    def test_delete_requires_management(self):
        """Test only admins and managers delete customers"""
        customer = TestDataFactory.create_customer()
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.MANAGER))
        response = self.client.delete(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Customer.objects.exists())

    def test_detail_includes_measurements(self):
        """Test the detail view lists recent measurements"""
        customer = TestDataFactory.create_customer()
        TestDataFactory.create_measurement(customer=customer)
        response = self.client.get(f'/api/v1/customers/{customer.id}/')
        self.assertEqual(len(response.data['data']['measurements']), 1)


class SupplierAPITests(TestCase):
    """Test supplier endpoints"""

    def setUp(self):
        self.manager = TestDataFactory.create_user(role=Role.MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_supplier(self):
        """Test creating a supplier with bank details"""
        data = {
            'name': 'Surat Silk Mills',
            'phone': '9820000000',
            'bank_details': {'account_number': '0001', 'ifsc': 'HDFC0000001'},
        }
        response = self.client.post('/api/v1/suppliers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['supplier_code'], 'SUP0001')

    def test_bank_details_must_be_object(self):
        """Test bank details reject non objects"""
        data = {'name': 'Bad Bank', 'phone': '1', 'bank_details': ['not', 'an', 'object']}
        response = self.client.post('/api/v1/suppliers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_supplier_forbidden_for_accountant(self):
        """Test accountants cannot add suppliers"""
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ACCOUNTANT))
        response = self.client.post('/api/v1/suppliers/', {'name': 'X', 'phone': '1'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_includes_po_count(self):
        """Test suppliers carry their purchase order count"""
        supplier = TestDataFactory.create_supplier()
        TestDataFactory.create_purchase_order(supplier=supplier)
        TestDataFactory.create_purchase_order(supplier=supplier)
        response = self.client.get('/api/v1/suppliers/')
        self.assertEqual(response.data['data'][0]['po_count'], 2)

    def test_detail_includes_purchase_orders(self):
        """Test the detail view lists recent purchase orders"""
        supplier = TestDataFactory.create_supplier()
        purchase_order = TestDataFactory.create_purchase_order(supplier=supplier)
        response = self.client.get(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.data['data']['purchase_orders'][0]['po_number'], purchase_order.po_number)

    def test_delete_unused_supplier(self):
        """Test admins can delete suppliers without orders"""
        supplier = TestDataFactory.create_supplier()
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ADMIN))
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
