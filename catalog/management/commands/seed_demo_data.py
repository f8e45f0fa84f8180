"""
Catalog — Management Command: seed_demo_data

Creates demo users for every role, a small grocery catalog and opening
stock for each product.

Usage::

    python manage.py seed_demo_data

Idempotent: safe to re-run (existing users, products and stock records
are left as they are).

@file catalog/management/commands/seed_demo_data.py
"""

import logging
from collections import Counter
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from catalog.models import Product
from stock.models import ChangeKind, StockRecord
from stock.services import StockLedger
from users.models import User

logger = logging.getLogger('eafoods')

DEMO_USERS = [
    ('admin@eafoods.com', 'Admin User', User.RoleChoices.OPS_MANAGER),
    ('customer1@example.com', 'John Doe', User.RoleChoices.CUSTOMER),
    ('customer2@example.com', 'Jane Smith', User.RoleChoices.CUSTOMER),
    ('tsu1@eafoods.com', 'Mike Johnson', User.RoleChoices.TSU),
    ('tsu2@eafoods.com', 'Sarah Wilson', User.RoleChoices.TSU),
    ('sr1@eafoods.com', 'David Brown', User.RoleChoices.SR),
    ('sr2@eafoods.com', 'Lisa Davis', User.RoleChoices.SR),
]

# (name, description, price, category, opening stock)
DEMO_PRODUCTS = [
    ('Fresh Organic Apples', 'Crisp and sweet organic apples from local farms', '4.99', 'Fruits', 50),
    ('Premium Bananas', 'Fresh yellow bananas, perfect for snacking', '2.49', 'Fruits', 75),
    ('Organic Spinach', 'Fresh organic spinach leaves, great for salads', '3.99', 'Vegetables', 30),
    ('Carrots (1 lb)', 'Fresh orange carrots, perfect for cooking', '1.99', 'Vegetables', 100),
    ('Whole Grain Bread', 'Artisan whole grain bread, freshly baked', '3.49', 'Bakery', 25),
    ('Organic Milk (1 gallon)', 'Fresh organic milk from grass-fed cows', '5.99', 'Dairy', 40),
    ('Free-Range Eggs (dozen)', 'Fresh eggs from free-range chickens', '4.49', 'Dairy', 60),
    ('Organic Chicken Breast', 'Fresh organic chicken breast, antibiotic-free', '8.99', 'Meat', 20),
    ('Salmon Fillet', 'Fresh Atlantic salmon fillet', '12.99', 'Seafood', 15),
    ('Quinoa (1 lb)', 'Organic quinoa, high in protein', '6.99', 'Grains', 35),
]


class Command(BaseCommand):
    help = 'Seed demo users, products and opening stock.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--password',
            type=str,
            default=None,
            help='Password for every demo user (unusable password when omitted).',
        )

    def handle(self, *args, **options):
        counter = Counter()
        with transaction.atomic():
            admin = self._seed_users(options.get('password'), counter)
            self._seed_products(admin, counter)

        self.stdout.write(self.style.SUCCESS(
            f'Done. Users: {counter["users"]}, Products: {counter["products"]}, '
            f'Stock records: {counter["stock"]}'
        ))

    def _seed_users(self, password, counter):
        admin = None
        for email, name, role in DEMO_USERS:
            user = User.objects.filter(email=email).first()
            if user is None:
                user = User.objects.create_user(email=email, password=password, name=name, role=role)
                counter['users'] += 1
            if role == User.RoleChoices.OPS_MANAGER and admin is None:
                admin = user
        return admin

    def _seed_products(self, actor, counter):
        for name, description, price, category, quantity in DEMO_PRODUCTS:
            product, created = Product.objects.get_or_create(
                name=name,
                defaults={
                    'description': description,
                    'price': Decimal(price),
                    'category': category,
                    'created_by': actor,
                },
            )
            if created:
                counter['products'] += 1
            if not StockRecord.objects.filter(product=product).exists():
                StockLedger.set_quantity(product.pk, quantity, actor=actor, change_kind=ChangeKind.MANUAL)
                counter['stock'] += 1
        logger.info('Demo catalog seeded: %d products, %d stock records.', counter['products'], counter['stock'])
