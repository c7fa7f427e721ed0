"""Seed sample data for local development.

Creates:
- one staff user per role (password from ``--password``)
- clients (a fixed set plus ``--clients`` generated with Faker), a supplier,
  materials and a product
- an invoice and sample orders created through the order services, some of
  them completed so the stock ledger has usage rows

Existing rows are reused (get_or_create), so the command can run repeatedly.

Usage:
  python manage.py seed_data
  python manage.py seed_data --orders 20 --clients 10 --seed 7
"""

from __future__ import annotations

import random
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from faker import Faker

from accounts.models import ADMIN, DESIGNER, FINANCIAL, RECEPTIONIST, WORKER
from clients.models import Client
from inventory.models import Material
from inventory.exceptions import InsufficientStockError
from invoices.models import Invoice
from invoices.services import recalculate_invoice
from orders import services
from orders.models import Order
from products.models import Product, ProductMaterial
from purchases.models import Supplier

CLIENTS = [
    ('Nile Packaging', '01001234567', 'Nile Packaging Co.'),
    ('Delta Prints', '01112345678', 'Delta Prints Factory'),
    ('Cairo Labels', '01223456789', ''),
    ('Alex Cartons', '01534567890', 'Alex Cartons'),
]

MATERIALS = [
    # name, category, unit, selling price, stock, min stock
    ('Offset Film', 'paper', 'sheet', Decimal('12.50'), Decimal('500'), Decimal('50')),
    ('Cyan Ink', 'ink', 'liter', Decimal('40.00'), Decimal('30'), Decimal('5')),
    ('Plate Developer', 'chemicals', 'liter', None, Decimal('20'), Decimal('4')),
    ('Kraft Roll', 'paper', 'roll', Decimal('8.00'), Decimal('200'), Decimal('25')),
]


class Command(BaseCommand):
    help = 'Seed staff users, clients, materials, a product and sample orders.'

    def add_arguments(self, parser):
        parser.add_argument('--orders', type=int, default=12, help='Number of orders to create.')
        parser.add_argument('--clients', type=int, default=4, help='Extra clients generated with Faker.')
        parser.add_argument('--seed', type=int, default=None, help='Random seed for reproducible data.')
        parser.add_argument('--password', default='Password123!', help='Password for seeded users.')

    def _user(self, username, role, password):
        User = get_user_model()
        user, created = User.objects.get_or_create(
            username=username,
            defaults={'role': role, 'full_name': username.title(), 'is_staff': role == ADMIN},
        )
        if created:
            user.set_password(password)
            user.save()
        return user

    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        fake = Faker('ar_EG')
        if options['seed'] is not None:
            fake.seed_instance(options['seed'])
        password = options['password']
        self.stdout.write(self.style.NOTICE('--- Seeding database ---'))

        with transaction.atomic():
            users = {role: self._user(role, role, password) for role in (ADMIN, RECEPTIONIST, DESIGNER, WORKER, FINANCIAL)}
            admin = users[ADMIN]

            clients = [
                Client.objects.get_or_create(name=name, defaults={'phone': phone, 'factory_name': factory, 'created_by': admin})[0]
                for name, phone, factory in CLIENTS
            ]
            for _ in range(options['clients']):
                clients.append(Client.objects.create(
                    name=fake.name(),
                    phone=fake.phone_number()[:30],
                    factory_name=fake.company(),
                    address=fake.address()[:500],
                    created_by=admin,
                ))
            supplier, _ = Supplier.objects.get_or_create(
                name='Misr Supplies', defaults={'phone': '0223456789', 'contact_person': 'Hany', 'created_by': admin},
            )

            materials = []
            for name, category, unit, price, stock, minimum in MATERIALS:
                material, _ = Material.objects.get_or_create(
                    name=name,
                    defaults={
                        'category': category,
                        'unit': unit,
                        'selling_price': price,
                        'current_stock': stock,
                        'min_stock_level': minimum,
                        'cost_per_unit': (price or Decimal('10')) / 2,
                        'is_order_type': price is not None,
                        'supplier': supplier,
                        'created_by': admin,
                    },
                )
                materials.append(material)
            priced = [m for m in materials if m.has_selling_price]

            product, created = Product.objects.get_or_create(
                name='Printed Carton Box', defaults={'selling_price': Decimal('250'), 'category': 'Boxes', 'created_by': admin},
            )
            if created:
                ProductMaterial.objects.create(product=product, material=materials[3], quantity=Decimal('2'))

            invoice = Invoice(tax=Decimal('10'), shipping=Decimal('5'), created_by=admin, updated_by=admin)
            invoice.apply_client_snapshot(clients[0])
            invoice.save()

        created_orders = []
        for i in range(options['orders']):
            actor = rng.choice([users[ADMIN], users[RECEPTIONIST], users[DESIGNER]])
            data = {
                'client': rng.choice(clients),
                'repeats': rng.randint(1, 10),
                'sheet_width': Decimal(rng.randint(20, 100)),
                'sheet_height': Decimal(rng.randint(1, 5)),
                'deposit': Decimal(rng.choice([0, 25, 50])),
                'notes': fake.sentence(nb_words=6) if rng.random() < 0.5 else '',
            }
            if i % 4 == 0:
                data['product'] = product
            else:
                data['material'] = rng.choice(priced)
            if i % 3 == 0:
                data['invoice'] = invoice
                data['client'] = invoice.client
            created_orders.append(services.create_order(data, actor=actor))

        for order in created_orders[: len(created_orders) // 3]:
            try:
                services.update_order(order, {'order_state': Order.DONE}, actor=users[WORKER])
            except InsufficientStockError as exc:
                self.stdout.write(self.style.WARNING(f'Order #{order.pk} left open: {exc.detail}'))

        recalculate_invoice(invoice)
        self.stdout.write(self.style.NOTICE(f'Seeded users: {", ".join(users)} | password={password}'))
        self.stdout.write(self.style.SUCCESS(f'Seeding completed: {len(created_orders)} orders.'))
