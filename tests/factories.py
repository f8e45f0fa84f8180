"""
EA Foods — Test Factories

Factory Boy factories for generating test data. Used across all test
modules.

@file tests/factories.py
"""

from datetime import timedelta
from decimal import Decimal

import factory
from django.utils import timezone

from catalog.models import Product
from core.models import AuditLog
from orders.models import Order, OrderLine
from stock.models import StockRecord
from users.models import User


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User
        skip_postgeneration_save = True

    email = factory.Sequence(lambda n: f'user-{n}@eafoods.test')
    name = factory.Faker('name')
    role = User.RoleChoices.CUSTOMER
    is_active = True

    @factory.post_generation
    def password(self, create, extracted, **kwargs):
        password = extracted or 'TestPass2026!'
        self.set_password(password)
        if create:
            self.save(update_fields=['password'])


class TsuFactory(UserFactory):
    role = User.RoleChoices.TSU


class SrFactory(UserFactory):
    role = User.RoleChoices.SR


class OpsManagerFactory(UserFactory):
    role = User.RoleChoices.OPS_MANAGER
    is_staff = True


class SuperuserFactory(OpsManagerFactory):
    is_superuser = True


# ---------------------------------------------------------------------------
# Catalog & stock
# ---------------------------------------------------------------------------

class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    name = factory.Sequence(lambda n: f'Product-{n}')
    description = factory.Faker('sentence')
    price = factory.LazyFunction(lambda: Decimal('2.50'))
    category = 'Vegetables'
    is_active = True


class StockRecordFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = StockRecord

    product = factory.SubFactory(ProductFactory)
    quantity = 100


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

class OrderFactory(factory.django.DjangoModelFactory):
    """Bare order row; stock is not reserved. Use OrderService for that."""

    class Meta:
        model = Order

    order_number = factory.Sequence(lambda n: f'EA-20260101120000-{n:04d}')
    user = factory.SubFactory(UserFactory)
    delivery_date = factory.LazyFunction(lambda: (timezone.now() + timedelta(days=2)).date())
    delivery_slot = Order.DeliverySlotChoices.MORNING
    status = Order.StatusChoices.PENDING
    total_amount = factory.LazyFunction(lambda: Decimal('0.00'))


class OrderLineFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = OrderLine

    order = factory.SubFactory(OrderFactory)
    product = factory.SubFactory(ProductFactory)
    quantity = 1
    unit_price = factory.LazyAttribute(lambda o: o.product.price)
    line_total = factory.LazyAttribute(lambda o: o.product.price * o.quantity)


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = AuditLog

    actor = factory.SubFactory(UserFactory)
    action = AuditLog.ActionChoices.CREATE
    model_name = 'Product'
    object_id = factory.Sequence(lambda n: str(n + 1))
