"""
Test suite for the Purchasing module
Tests: totals, PO numbering, the approval and edit rules, receiving with stock updates, cancel and delete
"""
from decimal import Decimal

from django.test import TestCase
from django.utils import timezone
from rest_framework import status

from garment_erp.core.codes import monthly_prefix
from garment_erp.core.models import Role
from garment_erp.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from garment_erp.inventory.models import Material, MaterialTransaction
from garment_erp.purchasing.models import PurchaseOrder, POItem, calculate_totals

Status = PurchaseOrder.Status


class PurchaseOrderModelTests(TestCase):
    """Test PurchaseOrder and POItem model methods"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.supplier = TestDataFactory.create_supplier()

    def test_calculate_totals(self):
        """Test subtotal, tax and total for one line with tax and shipping"""
        totals = calculate_totals([(Decimal('10'), Decimal('5'))], Decimal('10'), Decimal('2'))
        self.assertEqual(totals['subtotal'], Decimal('50.00'))
        self.assertEqual(totals['tax_amount'], Decimal('5.00'))
        self.assertEqual(totals['total_amount'], Decimal('57.00'))

    def test_calculate_totals_rounds_tax(self):
        """Test tax is rounded half up to two places"""
        totals = calculate_totals([(Decimal('1'), Decimal('0.05'))], Decimal('10'), Decimal('0'))
        self.assertEqual(totals['tax_amount'], Decimal('0.01'))

    def test_po_number_format(self):
        """Test PO numbers carry the year and month and a four digit sequence"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        self.assertEqual(purchase_order.po_number, f'{monthly_prefix("PO")}0001')
        second = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        self.assertEqual(second.po_number, f'{monthly_prefix("PO")}0002')
        self.assertEqual(str(purchase_order), purchase_order.po_number)

    def test_item_amount_is_line_total(self):
        """Test item amount equals quantity times unit price"""
        purchase_order = TestDataFactory.create_purchase_order(
            user=self.user, supplier=self.supplier,
            items=[{'quantity': Decimal('2.50'), 'unit_price': Decimal('4.00')}],
        )
        item = purchase_order.items.get()
        self.assertEqual(item.amount, Decimal('10.00'))
        self.assertEqual(item.pending_qty, Decimal('2.50'))
        self.assertFalse(item.is_fully_received)


class PurchaseOrderAPITests(TestCase):
    """Test purchase order creation, listing and editing"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.ADMIN)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier()
        self.material = TestDataFactory.create_material(quantity=Decimal('0'))

    def _payload(self, **overrides):
        data = {
            'supplier': self.supplier.id,
            'tax_rate': '10',
            'shipping_cost': '2',
            'items': [
                {'material': self.material.id, 'description': 'Cotton fabric', 'quantity': '10', 'unit_price': '5'},
            ],
        }
        data.update(overrides)
        return data

    def test_create_purchase_order(self):
        """Test creating a purchase order computes totals"""
        response = self.client.post('/api/v1/purchase-orders/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        data = response.data['data']
        self.assertEqual(data['status'], Status.DRAFT)
        self.assertEqual(Decimal(str(data['subtotal'])), Decimal('50.00'))
        self.assertEqual(Decimal(str(data['tax_amount'])), Decimal('5.00'))
        self.assertEqual(Decimal(str(data['total_amount'])), Decimal('57.00'))
        self.assertEqual(len(data['items']), 1)
        self.assertEqual(data['created_by'], self.user.id)
        self.assertTrue(data['po_number'].startswith(monthly_prefix('PO')))

    def test_create_with_initial_status(self):
        """Test an allowed explicit initial status"""
        response = self.client.post(
            '/api/v1/purchase-orders/', self._payload(status=Status.PENDING_APPROVAL), format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['data']['status'], Status.PENDING_APPROVAL)

    def test_create_with_disallowed_status(self):
        """Test orders cannot be created already received"""
        response = self.client.post('/api/v1/purchase-orders/', self._payload(status=Status.RECEIVED), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(PurchaseOrder.objects.exists())

    def test_create_without_items(self):
        """Test creating a purchase order without items should fail"""
        response = self.client.post('/api/v1/purchase-orders/', self._payload(items=[]), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data['errors'])

    def test_create_with_unknown_supplier(self):
        """Test a missing supplier is a 400"""
        response = self.client.post('/api/v1/purchase-orders/', self._payload(supplier=99999), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('supplier', response.data['errors'])

    def test_create_with_zero_quantity(self):
        """Test item quantities must be positive"""
        items = [{'description': 'Buttons', 'quantity': '0', 'unit_price': '1'}]
        response = self.client.post('/api/v1/purchase-orders/', self._payload(items=items), format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_forbidden_for_floor_manager(self):
        """Test only admin, manager and accountant can raise orders"""
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.FLOOR_MANAGER))
        response = self.client.post('/api/v1/purchase-orders/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_accountant_can_create(self):
        """Test accountants can raise orders"""
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ACCOUNTANT))
        response = self.client.post('/api/v1/purchase-orders/', self._payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

    def test_list_and_filter(self):
        """Test listing with status and search filters"""
        TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        other = TestDataFactory.create_supplier(name='Zari Traders')
        TestDataFactory.create_purchase_order(user=self.user, supplier=other, status=Status.APPROVED)

        response = self.client.get('/api/v1/purchase-orders/')
        self.assertEqual(response.data['pagination']['total'], 2)

        response = self.client.get(f'/api/v1/purchase-orders/?status={Status.APPROVED}')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['supplier_name'], 'Zari Traders')

        response = self.client.get('/api/v1/purchase-orders/?search=zari')
        self.assertEqual(len(response.data['data']), 1)

        response = self.client.get(f'/api/v1/purchase-orders/?supplier={self.supplier.id}')
        self.assertEqual(len(response.data['data']), 1)
        self.assertEqual(response.data['data'][0]['item_count'], 1)

    def test_detail(self):
        """Test retrieving a purchase order with its items"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.get(f'/api/v1/purchase-orders/{purchase_order.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['po_number'], purchase_order.po_number)
        self.assertEqual(len(response.data['data']['items']), 1)

    def test_edit_replaces_items(self):
        """Test a supplied item list replaces the old one and totals follow"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        old_ids = list(purchase_order.items.values_list('id', flat=True))
        items = [
            {'description': 'Thread', 'quantity': '4', 'unit_price': '2.50'},
            {'description': 'Zips', 'quantity': '10', 'unit_price': '1'},
        ]
        response = self.client.put(f'/api/v1/purchase-orders/{purchase_order.id}/', {'items': items}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.subtotal, Decimal('20.00'))
        self.assertEqual(purchase_order.total_amount, Decimal('20.00'))
        self.assertEqual(purchase_order.items.count(), 2)
        self.assertFalse(POItem.objects.filter(id__in=old_ids).exists())

    def test_edit_tax_only_recomputes_from_subtotal(self):
        """Test changing tax and shipping keeps the subtotal"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.put(
            f'/api/v1/purchase-orders/{purchase_order.id}/',
            {'tax_rate': '10', 'shipping_cost': '2'},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.subtotal, Decimal('50.00'))
        self.assertEqual(purchase_order.tax_amount, Decimal('5.00'))
        self.assertEqual(purchase_order.total_amount, Decimal('57.00'))

    def test_edit_notes_leaves_totals(self):
        """Test editing descriptive fields does not touch totals"""
        purchase_order = TestDataFactory.create_purchase_order(
            user=self.user, supplier=self.supplier, tax_rate=Decimal('10'), shipping_cost=Decimal('2'),
        )
        response = self.client.put(
            f'/api/v1/purchase-orders/{purchase_order.id}/', {'notes': 'Deliver to unit 2'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.notes, 'Deliver to unit 2')
        self.assertEqual(purchase_order.total_amount, Decimal('57.00'))

    def test_edit_submits_for_approval(self):
        """Test a draft can be moved to pending approval through an edit"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.put(
            f'/api/v1/purchase-orders/{purchase_order.id}/', {'status': Status.PENDING_APPROVAL}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], Status.PENDING_APPROVAL)

    def test_edit_cannot_skip_approval(self):
        """Test a draft cannot be approved through an edit"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.put(
            f'/api/v1/purchase-orders/{purchase_order.id}/', {'status': Status.APPROVED}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.status, Status.DRAFT)

    def test_edit_received_order_rejected(self):
        """Test received and cancelled orders are immutable"""
        for terminal in (Status.RECEIVED, Status.CANCELLED):
            purchase_order = TestDataFactory.create_purchase_order(
                user=self.user, supplier=self.supplier, status=terminal
            )
            response = self.client.put(
                f'/api/v1/purchase-orders/{purchase_order.id}/',
                {'notes': 'late change', 'tax_rate': '18', 'shipping_cost': '25'},
                format='json'
            )
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

            purchase_order.refresh_from_db()
            self.assertEqual(purchase_order.status, terminal)
            self.assertIsNone(purchase_order.notes)
            self.assertEqual(purchase_order.subtotal, Decimal('50.00'))
            self.assertEqual(purchase_order.tax_amount, Decimal('0.00'))
            self.assertEqual(purchase_order.total_amount, Decimal('50.00'))

    def test_edit_cannot_change_supplier(self):
        """Test the supplier of an order is fixed once created"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        other_supplier = TestDataFactory.create_supplier()

        response = self.client.put(
            f'/api/v1/purchase-orders/{purchase_order.id}/',
            {'supplier': other_supplier.id, 'notes': 'Rush delivery'},
            format='json'
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.supplier_id, self.supplier.id)
        self.assertEqual(purchase_order.notes, 'Rush delivery')

    def test_edit_empty_items_rejected(self):
        """Test an empty item list on edit is a 400"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.put(f'/api/v1/purchase-orders/{purchase_order.id}/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_edit_forbidden_for_accountant(self):
        """Test accountants cannot edit orders"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ACCOUNTANT))
        response = self.client.put(f'/api/v1/purchase-orders/{purchase_order.id}/', {'notes': 'x'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class PurchaseOrderLifecycleTests(TestCase):
    """Test approve, receive, cancel and delete"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role=Role.MANAGER)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.supplier = TestDataFactory.create_supplier()
        self.material = TestDataFactory.create_material(
            quantity=Decimal('0'), min_quantity=Decimal('5')
        )
        self.purchase_order = TestDataFactory.create_purchase_order(
            user=self.user,
            supplier=self.supplier,
            status=Status.ORDERED,
            items=[{'material': self.material, 'quantity': Decimal('10'), 'unit_price': Decimal('5')}],
        )
        self.item = self.purchase_order.items.get()

    def _receive(self, *lines):
        return self.client.post(
            f'/api/v1/purchase-orders/{self.purchase_order.id}/receive/',
            {'items': [{'id': item_id, 'quantity': str(qty)} for item_id, qty in lines]},
            format='json',
        )

    def test_approve_pending(self):
        """Test approving a pending order"""
        purchase_order = TestDataFactory.create_purchase_order(
            user=self.user, supplier=self.supplier, status=Status.PENDING_APPROVAL
        )
        response = self.client.post(f'/api/v1/purchase-orders/{purchase_order.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], Status.APPROVED)

    def test_approve_draft_rejected(self):
        """Test only pending orders can be approved"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.post(f'/api/v1/purchase-orders/{purchase_order.id}/approve/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        purchase_order.refresh_from_db()
        self.assertEqual(purchase_order.status, Status.DRAFT)

    def test_partial_then_full_receipt(self):
        """Test receiving 4 then 6 of 10 units"""
        response = self._receive((self.item.id, 4))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], Status.PARTIALLY_RECEIVED)
        self.assertIsNone(response.data['data']['received_date'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.received_qty, Decimal('4'))

        response = self._receive((self.item.id, 6))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], Status.RECEIVED)
        self.assertIsNotNone(response.data['data']['received_date'])
        self.item.refresh_from_db()
        self.assertEqual(self.item.received_qty, Decimal('10'))

        self.material.refresh_from_db()
        self.assertEqual(self.material.quantity, Decimal('10'))
        self.assertEqual(self.material.status, Material.Status.AVAILABLE)
        entries = MaterialTransaction.objects.filter(material=self.material).order_by('id')
        self.assertEqual([e.quantity for e in entries], [Decimal('4'), Decimal('6')])
        self.assertTrue(all(e.type == MaterialTransaction.Type.IN for e in entries))
        self.assertTrue(all(e.reference == self.purchase_order.po_number for e in entries))

    def test_partial_receipt_sets_low_stock(self):
        """Test material status follows the received quantity"""
        self._receive((self.item.id, 3))
        self.material.refresh_from_db()
        self.assertEqual(self.material.status, Material.Status.LOW_STOCK)

    def test_over_receipt_rejected(self):
        """Test receiving more than ordered leaves everything unchanged"""
        self._receive((self.item.id, 8))
        response = self._receive((self.item.id, 3))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.item.refresh_from_db()
        self.material.refresh_from_db()
        self.purchase_order.refresh_from_db()
        self.assertEqual(self.item.received_qty, Decimal('8'))
        self.assertEqual(self.material.quantity, Decimal('8'))
        self.assertEqual(self.purchase_order.status, Status.PARTIALLY_RECEIVED)

    def test_receipt_is_all_or_nothing(self):
        """Test one bad line rolls back the good ones"""
        extra = POItem.objects.create(
            purchase_order=self.purchase_order, description='Lining', quantity=Decimal('2'), unit_price=Decimal('1')
        )
        response = self._receive((self.item.id, 5), (extra.id, 3))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.item.refresh_from_db()
        self.material.refresh_from_db()
        self.assertEqual(self.item.received_qty, Decimal('0'))
        self.assertEqual(self.material.quantity, Decimal('0'))
        self.assertFalse(MaterialTransaction.objects.exists())

    def test_receive_unknown_item(self):
        """Test an item id from another order is rejected"""
        other = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self._receive((other.items.get().id, 1))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receive_non_positive_quantity(self):
        """Test zero and negative quantities are rejected"""
        self.assertEqual(self._receive((self.item.id, 0)).status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(self._receive((self.item.id, -2)).status_code, status.HTTP_400_BAD_REQUEST)

    def test_receive_requires_items(self):
        """Test an empty receipt is a 400"""
        response = self.client.post(
            f'/api/v1/purchase-orders/{self.purchase_order.id}/receive/', {'items': []}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receive_cancelled_rejected(self):
        """Test goods cannot be received on a cancelled order"""
        self.purchase_order.status = Status.CANCELLED
        self.purchase_order.save()
        response = self._receive((self.item.id, 1))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receive_item_without_material(self):
        """Test items without a material only update the order"""
        purchase_order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        item = purchase_order.items.get()
        response = self.client.post(
            f'/api/v1/purchase-orders/{purchase_order.id}/receive/',
            {'items': [{'id': item.id, 'quantity': '10'}]},
            format='json',
        )
        self.assertEqual(response.data['data']['status'], Status.RECEIVED)
        self.assertFalse(MaterialTransaction.objects.exists())

    def test_receive_repeated_ids_accumulate(self):
        """Test repeated lines for one item add up"""
        response = self._receive((self.item.id, 5), (self.item.id, 5))
        self.assertEqual(response.data['data']['status'], Status.RECEIVED)
        self.assertEqual(MaterialTransaction.objects.count(), 1)

    def test_items_locked_after_receipt(self):
        """Test items cannot be replaced once goods arrived"""
        self._receive((self.item.id, 2))
        response = self.client.put(
            f'/api/v1/purchase-orders/{self.purchase_order.id}/',
            {'items': [{'description': 'Other', 'quantity': '1', 'unit_price': '1'}]},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(POItem.objects.filter(id=self.item.id).exists())

    def test_cancel(self):
        """Test cancelling an open order"""
        response = self.client.post(f'/api/v1/purchase-orders/{self.purchase_order.id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['status'], Status.CANCELLED)

    def test_cancel_terminal_rejected(self):
        """Test received orders cannot be cancelled"""
        self._receive((self.item.id, 10))
        response = self.client.post(f'/api/v1/purchase-orders/{self.purchase_order.id}/cancel/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.purchase_order.refresh_from_db()
        self.assertEqual(self.purchase_order.status, Status.RECEIVED)

    def test_delete_draft_only(self):
        """Test only drafts can be deleted, and only by admins"""
        admin = TestDataFactory.create_user(role=Role.ADMIN)
        draft = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)

        response = self.client.delete(f'/api/v1/purchase-orders/{draft.id}/')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.authenticate_user(admin)
        response = self.client.delete(f'/api/v1/purchase-orders/{self.purchase_order.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(PurchaseOrder.objects.filter(id=self.purchase_order.id).exists())

        response = self.client.delete(f'/api/v1/purchase-orders/{draft.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(PurchaseOrder.objects.filter(id=draft.id).exists())
        self.assertFalse(POItem.objects.filter(purchase_order_id=draft.id).exists())

    def test_summary(self):
        """Test counts per status, total spent and recent orders"""
        self._receive((self.item.id, 10))
        TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier)
        response = self.client.get('/api/v1/purchase-orders/summary/stats/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        data = response.data['data']
        by_status = {row['status']: row['count'] for row in data['by_status']}
        self.assertEqual(by_status[Status.RECEIVED], 1)
        self.assertEqual(by_status[Status.DRAFT], 1)
        self.assertEqual(by_status[Status.CANCELLED], 0)
        self.assertEqual(Decimal(str(data['total_spent'])), Decimal('50.00'))
        self.assertEqual(len(data['recent_orders']), 2)

    def test_supplier_with_orders_cannot_be_deleted(self):
        """Test suppliers referenced by orders are protected"""
        self.client.authenticate_user(TestDataFactory.create_user(role=Role.ADMIN))
        response = self.client.delete(f'/api/v1/suppliers/{self.supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_receipt_timestamp_is_recent(self):
        """Test received_date is stamped on full receipt"""
        before = timezone.now()
        self._receive((self.item.id, 10))
        self.purchase_order.refresh_from_db()
        self.assertGreaterEqual(self.purchase_order.received_date, before)

    def test_full_receipt_in_one_call(self):
        """Test receiving the whole quantity at once restocks the material"""
        response = self._receive((self.item.id, 10))
        self.assertEqual(response.data['data']['status'], Status.RECEIVED)
        self.assertEqual(Decimal(str(response.data['data']['items'][0]['received_qty'])), Decimal('10'))
        self.material.refresh_from_db()
        self.assertEqual(self.material.quantity, Decimal('10'))
        entry = MaterialTransaction.objects.get(material=self.material)
        self.assertEqual(entry.type, MaterialTransaction.Type.IN)
        self.assertEqual(entry.reference, self.purchase_order.po_number)
