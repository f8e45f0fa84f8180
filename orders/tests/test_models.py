"""
Tests — Order / OrderLine model rules.

@file orders/tests/test_models.py
"""

import pytest
from django.db import IntegrityError, transaction

from orders.models import Order, OrderLine
from tests.factories import OrderFactory, OrderLineFactory


pytestmark = pytest.mark.django_db


class TestOrder:

    def test_default_status_pending(self):
        assert OrderFactory().status == Order.StatusChoices.PENDING

    def test_order_number_unique(self):
        order = OrderFactory()
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                OrderFactory(order_number=order.order_number)

    def test_delete_raises(self):
        order = OrderFactory()
        with pytest.raises(NotImplementedError):
            order.delete()

    def test_terminal_statuses(self):
        assert OrderFactory(status=Order.StatusChoices.DELIVERED).is_terminal
        assert OrderFactory(status=Order.StatusChoices.CANCELLED).is_terminal
        assert not OrderFactory(status=Order.StatusChoices.PREPARING).is_terminal


class TestOrderLine:

    def test_update_raises(self):
        line = OrderLineFactory()
        line.quantity = 5
        with pytest.raises(NotImplementedError):
            line.save()

    def test_one_line_per_product(self):
        line = OrderLineFactory()
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                OrderLine.objects.create(
                    order=line.order, product=line.product,
                    quantity=1, unit_price=line.unit_price, line_total=line.unit_price,
                )
