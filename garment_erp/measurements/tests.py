"""
Test suite for the Measurements module
Tests: measurement recording, validation, listings and garment types
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status

from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.measurements.models import COMMON_GARMENT_TYPES


class MeasurementAPITests(TestCase):
    """Test measurement endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.EMPLOYEE)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.customer = TestDataFactory.create_customer(name='Rohan Mehta')
        self.tailor = TestDataFactory.create_employee()

    def test_create_measurement(self):
        """Test recording a measurement assigns a five digit code"""
        data = {
            'customer': self.customer.id,
            'taken_by': self.tailor.id,
            'garment_type': 'Sherwani',
            'chest': '40.5',
            'sleeve_length': '24',
            'custom_fields': {'collar_style': 'mandarin'},
        }
        response = self.client.post('/api/v1/measurements/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['measurement_code'], 'MSR00001')
        self.assertEqual(response.data['data']['customer_name'], 'Rohan Mehta')
        self.assertEqual(Decimal(str(response.data['data']['chest'])), Decimal('40.50'))

    def test_create_with_unknown_customer(self):
        """Test the customer must exist"""
        data = {'customer': 99999, 'taken_by': self.tailor.id, 'garment_type': 'Shirt'}
        response = self.client.post('/api/v1/measurements/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('customer', response.data['errors'])

    def test_negative_measurement_rejected(self):
        """Test body measurements cannot be negative"""
        data = {'customer': self.customer.id, 'taken_by': self.tailor.id, 'garment_type': 'Shirt', 'waist': '-1'}
        response = self.client.post('/api/v1/measurements/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_custom_fields_must_be_object(self):
        """Test custom fields reject non objects"""
        data = {'customer': self.customer.id, 'taken_by': self.tailor.id, 'garment_type': 'Shirt', 'custom_fields': [1]}
        response = self.client.post('/api/v1/measurements/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_list_filters(self):
        """Test customer, garment type and search filters"""
        TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor, garment_type='Suit')
        TestDataFactory.create_measurement(taken_by=self.tailor, garment_type='Kurta')
        response = self.client.get(f'/api/v1/measurements/?customer={self.customer.id}')
        self.assertEqual(response.data['pagination']['total'], 1)
        response = self.client.get('/api/v1/measurements/?garment_type=kurta')
        self.assertEqual(response.data['pagination']['total'], 1)
        response = self.client.get('/api/v1/measurements/?search=rohan')
        self.assertEqual(response.data['data'][0]['garment_type'], 'Suit')

    def test_customer_measurements(self):
        """Test listing all measurements of a customer"""
        TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor)
        TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor)
        response = self.client.get(f'/api/v1/measurements/customer/{self.customer.id}/')
        self.assertEqual(len(response.data['data']), 2)
        response = self.client.get('/api/v1/measurements/customer/99999/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_garment_types_merge(self):
        """Test stored garment types come first, then the unused common ones"""
        TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor, garment_type='Achkan')
        TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor, garment_type='Shirt')
        response = self.client.get('/api/v1/measurements/meta/garment-types/')
        types = response.data['data']
        self.assertEqual(types[:2], ['Achkan', 'Shirt'])
        self.assertEqual(types.count('Shirt'), 1)
        self.assertEqual(len(types), 2 + len(COMMON_GARMENT_TYPES) - 1)

    def test_delete_requires_management(self):
        """Test only admins and managers delete measurements"""
        measurement = TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor)
        response = self.client.delete(f'/api/v1/measurements/{measurement.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ADMIN))
        response = self.client.delete(f'/api/v1/measurements/{measurement.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_employee_with_measurements_cannot_be_deleted(self):
        """Test employees referenced by measurements are protected"""
        TestDataFactory.create_measurement(customer=self.customer, taken_by=self.tailor)
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ADMIN))
        response = self.client.delete(f'/api/v1/employees/{self.tailor.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
