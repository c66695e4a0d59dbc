"""
Test suite for the Inventory module
Tests: material status derivation, stock movements and the ledger, summaries
"""
from decimal import Decimal

from django.test import TestCase
from rest_framework import status
from rest_framework.exceptions import ValidationError

from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.inventory.models import Material, MaterialTransaction
from garment_erp.inventory.services import record_stock_movement


class MaterialModelTests(TestCase):
    """Test status derivation and stock movements"""

    def test_status_for(self):
        """Test status thresholds"""
        self.assertEqual(Material.status_for(Decimal('0'), Decimal('5')), Material.Status.OUT_OF_STOCK)
        self.assertEqual(Material.status_for(Decimal('5'), Decimal('5')), Material.Status.LOW_STOCK)
        self.assertEqual(Material.status_for(Decimal('6'), Decimal('5')), Material.Status.AVAILABLE)

    def test_stock_out_and_ledger(self):
        """Test an OUT movement reduces stock and records the balance"""
        material = TestDataFactory.create_material(quantity=Decimal('20'), min_quantity=Decimal('5'))
        material, entry = record_stock_movement(material, MaterialTransaction.Type.OUT, Decimal('16'), reference='CUT-7')
        self.assertEqual(material.quantity, Decimal('4'))
        self.assertEqual(material.status, Material.Status.LOW_STOCK)
        self.assertEqual(entry.balance_after, Decimal('4'))
        self.assertEqual(entry.reference, 'CUT-7')

    def test_insufficient_stock(self):
        """Test taking more than is in stock fails without a ledger entry"""
        material = TestDataFactory.create_material(quantity=Decimal('3'))
        with self.assertRaises(ValidationError):
            record_stock_movement(material, MaterialTransaction.Type.OUT, Decimal('5'))
        material.refresh_from_db()
        self.assertEqual(material.quantity, Decimal('3'))
        self.assertFalse(MaterialTransaction.objects.exists())

    def test_adjustment_sets_absolute_quantity(self):
        """Test ADJUSTMENT replaces the quantity"""
        material = TestDataFactory.create_material(quantity=Decimal('30'))
        material, _ = record_stock_movement(material, MaterialTransaction.Type.ADJUSTMENT, Decimal('0'))
        self.assertEqual(material.quantity, Decimal('0'))
        self.assertEqual(material.status, Material.Status.OUT_OF_STOCK)

    def test_discontinued_is_kept(self):
        """Test stock movements do not revive discontinued materials"""
        material = TestDataFactory.create_material(quantity=Decimal('0'))
        material.status = Material.Status.DISCONTINUED
        material.save()
        material, _ = record_stock_movement(material, MaterialTransaction.Type.RETURN, Decimal('5'))
        self.assertEqual(material.status, Material.Status.DISCONTINUED)


class MaterialAPITests(TestCase):
    """Test material endpoints"""

    def setUp(self):
        self.manager = TestDataFactory.create_user(role=Role.MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_material_derives_status(self):
        """Test the opening quantity decides the status"""
        response = self.client.post(
            '/api/v1/materials/',
            {'name': 'Poplin', 'category': 'Fabric', 'unit': 'meters', 'quantity': '3', 'min_quantity': '10'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['material_code'], 'MAT0001')
        self.assertEqual(response.data['data']['status'], Material.Status.LOW_STOCK)

    def test_update_cannot_change_quantity(self):
        """Test quantity is ignored on update"""
        material = TestDataFactory.create_material(quantity=Decimal('10'))
        response = self.client.patch(
            f'/api/v1/materials/{material.id}/', {'quantity': '999', 'location': 'Rack B'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        material.refresh_from_db()
        self.assertEqual(material.quantity, Decimal('10'))
        self.assertEqual(material.location, 'Rack B')

    def test_update_discontinue(self):
        """Test a material can be discontinued and reinstated"""
        material = TestDataFactory.create_material(quantity=Decimal('50'), min_quantity=Decimal('10'))
        self.client.patch(f'/api/v1/materials/{material.id}/', {'status': Material.Status.DISCONTINUED}, format='json')
        material.refresh_from_db()
        self.assertEqual(material.status, Material.Status.DISCONTINUED)
        self.client.patch(f'/api/v1/materials/{material.id}/', {'status': Material.Status.AVAILABLE}, format='json')
        material.refresh_from_db()
        self.assertEqual(material.status, Material.Status.AVAILABLE)

    def test_transaction_endpoint(self):
        """Test recording a stock IN through the API"""
        material = TestDataFactory.create_material(quantity=Decimal('0'), min_quantity=Decimal('5'))
        response = self.client.post(
            f'/api/v1/materials/{material.id}/transaction/',
            {'type': MaterialTransaction.Type.IN, 'quantity': '25', 'reference': 'GRN-1'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(str(response.data['data']['material']['quantity'])), Decimal('25'))
        self.assertEqual(response.data['data']['material']['status'], Material.Status.AVAILABLE)

        response = self.client.get(f'/api/v1/materials/{material.id}/transactions/')
        self.assertEqual(response.data['pagination']['total'], 1)

    def test_transaction_insufficient_stock(self):
        """Test OUT beyond stock is a 400"""
        material = TestDataFactory.create_material(quantity=Decimal('2'))
        response = self.client.post(
            f'/api/v1/materials/{material.id}/transaction/',
            {'type': MaterialTransaction.Type.OUT, 'quantity': '5'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])

    def test_transaction_forbidden_for_employee(self):
        """Test employees cannot move stock"""
        material = TestDataFactory.create_material()
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.EMPLOYEE))
        response = self.client.post(
            f'/api/v1/materials/{material.id}/transaction/',
            {'type': MaterialTransaction.Type.IN, 'quantity': '5'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detail_includes_transactions(self):
        """Test the detail view carries ledger entries"""
        material = TestDataFactory.create_material()
        record_stock_movement(material, MaterialTransaction.Type.OUT, Decimal('1'))
        response = self.client.get(f'/api/v1/materials/{material.id}/')
        self.assertEqual(len(response.data['data']['transactions']), 1)

    def test_categories_and_summary(self):
        """Test category listing and the inventory summary"""
        TestDataFactory.create_material(category='Fabric', quantity=Decimal('10'), unit_price=Decimal('2'))
        TestDataFactory.create_material(category='Trims', quantity=Decimal('0'), unit_price=Decimal('1'))
        response = self.client.get('/api/v1/materials/meta/categories/')
        self.assertEqual(response.data['data'], ['Fabric', 'Trims'])

        response = self.client.get('/api/v1/materials/summary/inventory/')
        data = response.data['data']
        self.assertEqual(data['total_materials'], 2)
        self.assertEqual(data['total_value'], Decimal('20.00'))
        counts = {row['status']: row['count'] for row in data['by_status']}
        self.assertEqual(counts[Material.Status.OUT_OF_STOCK], 1)

    def test_filter_by_status(self):
        """Test the status filter and invalid values"""
        TestDataFactory.create_material(quantity=Decimal('0'))
        TestDataFactory.create_material()
        response = self.client.get(f'/api/v1/materials/?status={Material.Status.OUT_OF_STOCK}')
        self.assertEqual(response.data['pagination']['total'], 1)
        response = self.client.get('/api/v1/materials/?status=BOGUS')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
