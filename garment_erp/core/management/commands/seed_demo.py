"""
Management command to load demo users and master data
"""
from decimal import Decimal

from django.db import transaction
from django.core.management.base import BaseCommand

from garment_erp.core.models import User, Role, Setting
from garment_erp.employees.models import Employee
from garment_erp.inventory.models import Material
from garment_erp.machines.models import Machine
from garment_erp.parties.models import Customer, Supplier

DEMO_DOMAIN = 'demo.garment-erp.local'

STAFF = [
    # email, first name, last name, role, password
    ('admin', 'Admin', 'User', Role.ADMIN, 'admin123'),
    ('manager', 'Pablo', 'Rodriguez', Role.MANAGER, 'manager123'),
    ('floor', 'Nisha', 'Verma', Role.FLOOR_MANAGER, 'floor123'),
    ('accounts', 'Kiran', 'Joshi', Role.ACCOUNTANT, 'accounts123'),
]

EMPLOYEES = [
    ('darina', 'Darina', 'Sharma', 'Production', 'Production Lead'),
    ('selena', 'Selena', 'Patel', 'Production', 'Tailor'),
    ('arthur', 'Arthur', 'Pramad', 'Operations', 'Machine Operator'),
    ('michael', 'Michael', 'Singh', 'Operations', 'Machine Operator'),
]

MACHINES = [
    ('Machine #1', 'Sewing Machine', Machine.Status.IDLE),
    ('Machine #2', 'Cutting Machine', Machine.Status.MAINTENANCE_REQUIRED),
    ('Machine #3', 'Overlock Machine', Machine.Status.IDLE),
    ('Machine #4', 'Button Machine', Machine.Status.IDLE),
]

MATERIALS = [
    # name, category, unit, quantity, min quantity, unit price
    ('Cotton Poplin', 'Fabric', 'meters', '500', '100', '120.00'),
    ('Linen Blend', 'Fabric', 'meters', '80', '100', '340.00'),
    ('Polyester Thread', 'Thread', 'spools', '200', '50', '35.00'),
    ('Shirt Buttons', 'Trims', 'pcs', '0', '500', '1.50'),
]

SETTINGS = {
    'company_name': 'Demo Garments Pvt Ltd',
    'company_city': 'Surat',
    'company_gst_number': '24AAAAA0000A1Z5',
    'currency': 'INR',
}


class Command(BaseCommand):
    help = "Creates demo users, employees, machines, materials, parties and settings"

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            help='Use this password for every demo account instead of the built-in ones',
        )

    def handle(self, *args, **options):
        password = options.get('password')

        self.stdout.write(self.style.SUCCESS("=" * 80))
        self.stdout.write(self.style.SUCCESS("SEEDING DEMO DATA"))
        self.stdout.write(self.style.SUCCESS("=" * 80))

        with transaction.atomic():
            for key, first_name, last_name, role, default_password in STAFF:
                self._user(key, first_name, last_name, role, password or default_password)
            self.stdout.write(f"Staff users: {len(STAFF)}")

            for key, first_name, last_name, department, designation in EMPLOYEES:
                user = self._user(key, first_name, last_name, Role.EMPLOYEE, password or 'employee123')
                Employee.objects.get_or_create(
                    user=user,
                    defaults={'department': department, 'designation': designation, 'salary': Decimal('35000')},
                )
            self.stdout.write(f"Employees: {Employee.objects.count()}")

            for name, machine_type, machine_status in MACHINES:
                Machine.objects.get_or_create(name=name, defaults={'type': machine_type, 'status': machine_status})
            self.stdout.write(f"Machines: {Machine.objects.count()}")

            for name, category, unit, quantity, min_quantity, unit_price in MATERIALS:
                if Material.objects.filter(name=name).exists():
                    continue
                material = Material(
                    name=name,
                    category=category,
                    unit=unit,
                    quantity=Decimal(quantity),
                    min_quantity=Decimal(min_quantity),
                    unit_price=Decimal(unit_price),
                )
                material.refresh_status()
                material.save()
            self.stdout.write(f"Materials: {Material.objects.count()}")

            Supplier.objects.get_or_create(
                name='Surat Silk Mills',
                defaults={'contact_person': 'Ramesh Desai', 'phone': '+91 9820000001', 'city': 'Surat'},
            )
            Supplier.objects.get_or_create(
                name='Tirupur Threads',
                defaults={'contact_person': 'Lakshmi Iyer', 'phone': '+91 9820000002', 'city': 'Tirupur'},
            )
            Customer.objects.get_or_create(
                name='Rohan Mehta', defaults={'phone': '+91 9810000001', 'city': 'Mumbai'},
            )
            self.stdout.write(f"Suppliers: {Supplier.objects.count()}, customers: {Customer.objects.count()}")

            for key, value in SETTINGS.items():
                Setting.objects.get_or_create(key=key, defaults={'value': value})

        self.stdout.write(self.style.SUCCESS(f"Done. Log in as admin@{DEMO_DOMAIN}"))

    def _user(self, key, first_name, last_name, role, password):
        email = f'{key}@{DEMO_DOMAIN}'
        user = User.objects.filter(email=email).first()
        if user is not None:
            self.stdout.write(self.style.WARNING(f"  exists: {email}"))
            return user
        if role == Role.ADMIN:
            user = User.objects.create_superuser(email=email, password=password, first_name=first_name, last_name=last_name)
        else:
            user = User.objects.create_user(
                email=email, password=password, first_name=first_name, last_name=last_name, role=role,
            )
        self.stdout.write(f"  created: {email} ({role})")
        return user
