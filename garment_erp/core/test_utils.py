"""
Test utilities and factories for creating test data
"""
import random
import string
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from garment_erp.core.models import Role
from garment_erp.employees.models import Employee, Attendance
from garment_erp.inventory.models import Material
from garment_erp.machines.models import Machine
from garment_erp.measurements.models import Measurement
from garment_erp.notifications.models import Notification
from garment_erp.parties.models import Customer, Supplier
from garment_erp.purchasing.models import PurchaseOrder, POItem

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(email=None, password='testpass123', role=Role.ADMIN, is_active=True, **extra):
        """Create a test user (admin unless another role is given)"""
        if not email:
            email = f'user_{TestDataFactory.random_string(6).lower()}@test.com'
        return User.objects.create_user(
            email=email,
            password=password,
            first_name=extra.pop('first_name', 'Test'),
            last_name=extra.pop('last_name', 'User'),
            role=role,
            is_active=is_active,
            **extra
        )

    @staticmethod
    def create_employee(user=None, department='Stitching', designation='Tailor', **extra):
        """Create a test employee with its login user"""
        if user is None:
            user = TestDataFactory.create_user(role=Role.EMPLOYEE)
        return Employee.objects.create(user=user, department=department, designation=designation, **extra)

    @staticmethod
    def create_attendance(employee, date=None, status=Attendance.Status.PRESENT, **extra):
        return Attendance.objects.create(
            employee=employee, date=date or timezone.localdate(), status=status, **extra
        )

    @staticmethod
    def create_machine(name=None, type='Sewing', status=Machine.Status.IDLE, **extra):
        """Create a test machine"""
        if not name:
            name = f'Machine_{TestDataFactory.random_string(6)}'
        return Machine.objects.create(name=name, type=type, status=status, **extra)

    @staticmethod
    def create_material(name=None, quantity=Decimal('100.00'), min_quantity=Decimal('10.00'),
                        unit_price=Decimal('50.00'), category='Fabric', unit='meters'):
        """Create a test material with status derived from its quantity"""
        if not name:
            name = f'Material_{TestDataFactory.random_string(6)}'
        material = Material(
            name=name,
            category=category,
            unit=unit,
            quantity=quantity,
            min_quantity=min_quantity,
            unit_price=unit_price,
        )
        material.refresh_status()
        material.save()
        return material

    @staticmethod
    def create_customer(name=None, phone='9876543210', **extra):
        """Create a test customer"""
        if not name:
            name = f'Customer_{TestDataFactory.random_string(6)}'
        return Customer.objects.create(name=name, phone=phone, **extra)

    @staticmethod
    def create_supplier(name=None, phone='9123456780', **extra):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        return Supplier.objects.create(name=name, phone=phone, **extra)

    @staticmethod
    def create_measurement(customer=None, taken_by=None, garment_type='Shirt', **extra):
        """Create a test measurement"""
        return Measurement.objects.create(
            customer=customer or TestDataFactory.create_customer(),
            taken_by=taken_by or TestDataFactory.create_employee(),
            garment_type=garment_type,
            **extra
        )

    @staticmethod
    def create_purchase_order(user=None, supplier=None, items=None, status=PurchaseOrder.Status.DRAFT,
                              tax_rate=Decimal('0.00'), shipping_cost=Decimal('0.00')):
        """
        Create a test purchase order. ``items`` is a list of dicts with
        ``quantity``, ``unit_price`` and optional ``material``/``description``;
        totals are computed from them.
        """
        purchase_order = PurchaseOrder(
            created_by=user or TestDataFactory.create_user(),
            supplier=supplier or TestDataFactory.create_supplier(),
            status=status,
            tax_rate=tax_rate,
            shipping_cost=shipping_cost,
        )
        items = items or [{'quantity': Decimal('10.00'), 'unit_price': Decimal('5.00')}]
        po_items = [
            POItem(
                purchase_order=purchase_order,
                material=item.get('material'),
                description=item.get('description', f'Item {index + 1}'),
                quantity=item['quantity'],
                unit_price=item['unit_price'],
            )
            for index, item in enumerate(items)
        ]
        purchase_order.recalculate_totals(po_items)
        purchase_order.save()
        for item in po_items:
            item.purchase_order = purchase_order
            item.save()
        return purchase_order

    @staticmethod
    def create_notification(user, title='Test notification', message='Hello', **extra):
        return Notification.objects.create(user=user, title=title, message=message, **extra)


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
