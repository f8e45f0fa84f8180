"""
Tests — OrderService: create (reserve + pricing + delivery policy),
cancel (release), status state machine, order numbers. OrderQueryService.

@file orders/tests/test_services.py
"""

import re
from datetime import date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from core.exceptions import (
    BusinessRuleViolation,
    DeliveryPolicyError,
    DuplicateResourceError,
    InsufficientStockError,
    InvalidStateTransition,
    ResourceNotFoundError,
)
from core.models import AuditLog
from orders.models import Order
from orders.serializers import OrderReadSerializer
from orders.services import OrderQueryService, OrderService, generate_order_number
from stock.models import ChangeKind, StockChangeEntry
from stock.services import StockLedger
from tests.factories import (
    OpsManagerFactory,
    OrderFactory,
    ProductFactory,
    StockRecordFactory,
    UserFactory,
)


pytestmark = pytest.mark.django_db

NAIROBI = ZoneInfo('Africa/Nairobi')
MORNING = Order.DeliverySlotChoices.MORNING


def _at(hour, minute=0):
    return datetime(2026, 3, 10, hour, minute, tzinfo=NAIROBI)


def _create(user, items, **kwargs):
    kwargs.setdefault('now', _at(10))
    return OrderService.create_order(
        user_id=user.pk, delivery_slot=kwargs.pop('delivery_slot', MORNING), items=items, **kwargs,
    )


def _advance(order, *statuses):
    for status in statuses:
        order = OrderService.update_status(order_id=order.pk, new_status=status)
    return order


class TestOrderNumber:

    def test_format(self):
        number = generate_order_number(_at(9, 5))
        assert re.fullmatch(r'EA-20260310090500-[0-9A-Z]{4}', number)


class TestCreateOrder:

    def test_reserves_stock_and_prices_lines(self):
        record = StockRecordFactory(quantity=10, product=ProductFactory(price=Decimal('2.50')))
        user = UserFactory()
        order = _create(user, [{'product_id': record.product_id, 'quantity': 3}])

        record.refresh_from_db()
        assert record.quantity == 7
        assert order.status == Order.StatusChoices.PENDING
        assert order.total_amount == Decimal('7.50')
        assert order.delivery_date == date(2026, 3, 11)
        line = order.lines.get()
        assert (line.quantity, line.unit_price, line.line_total) == (3, Decimal('2.50'), Decimal('7.50'))
        entry = StockChangeEntry.objects.get(product_id=record.product_id)
        assert entry.change_kind == ChangeKind.ORDER_RESERVE
        assert entry.reference == order.order_number

    def test_total_equals_sum_of_lines(self):
        a = StockRecordFactory(quantity=10, product=ProductFactory(price=Decimal('1.99')))
        b = StockRecordFactory(quantity=10, product=ProductFactory(price=Decimal('12.99')))
        order = _create(UserFactory(), [
            {'product_id': a.product_id, 'quantity': 3},
            {'product_id': b.product_id, 'quantity': 2},
        ])
        assert sum(line.line_total for line in order.lines.all()) == order.total_amount
        assert order.total_amount == Decimal('31.95')

    def test_duplicate_items_merged(self):
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [
            {'product_id': record.product_id, 'quantity': 2},
            {'product_id': record.product_id, 'quantity': 3},
        ])
        assert order.lines.get().quantity == 5
        assert StockLedger.get_quantity(record.product_id) == 5

    def test_insufficient_stock_leaves_nothing(self):
        record = StockRecordFactory(quantity=2)
        with pytest.raises(InsufficientStockError) as exc_info:
            _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 5}])
        assert exc_info.value.product_id == record.product_id
        assert StockLedger.get_quantity(record.product_id) == 2
        assert Order.objects.count() == 0
        assert StockChangeEntry.objects.count() == 0

    def test_partial_shortage_rolls_back_every_line(self):
        enough = StockRecordFactory(quantity=10)
        short = StockRecordFactory(quantity=1)
        with pytest.raises(InsufficientStockError):
            _create(UserFactory(), [
                {'product_id': enough.product_id, 'quantity': 3},
                {'product_id': short.product_id, 'quantity': 3},
            ])
        assert StockLedger.get_quantity(enough.product_id) == 10
        assert Order.objects.count() == 0

    def test_after_cutoff_without_confirmation(self):
        record = StockRecordFactory(quantity=10)
        with pytest.raises(DeliveryPolicyError):
            _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 1}], now=_at(19))
        assert StockLedger.get_quantity(record.product_id) == 10

    def test_after_cutoff_confirmed_delivers_in_two_days(self):
        record = StockRecordFactory(quantity=10)
        order = _create(
            UserFactory(), [{'product_id': record.product_id, 'quantity': 1}],
            now=_at(19), force_after_cutoff=True,
        )
        assert order.delivery_date == date(2026, 3, 12)

    def test_after_cutoff_next_day_rejected(self):
        record = StockRecordFactory(quantity=10)
        with pytest.raises(DeliveryPolicyError):
            _create(
                UserFactory(), [{'product_id': record.product_id, 'quantity': 1}],
                now=_at(19), force_after_cutoff=True, delivery_date=date(2026, 3, 11),
            )

    def test_unknown_product_is_not_found(self):
        with pytest.raises(ResourceNotFoundError):
            _create(UserFactory(), [{'product_id': 999999, 'quantity': 1}])

    def test_inactive_product_is_not_found(self):
        record = StockRecordFactory(quantity=10, product=ProductFactory(is_active=False))
        with pytest.raises(ResourceNotFoundError):
            _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 1}])

    def test_inactive_user_rejected(self):
        record = StockRecordFactory(quantity=10)
        with pytest.raises(ResourceNotFoundError):
            _create(UserFactory(is_active=False), [{'product_id': record.product_id, 'quantity': 1}])

    def test_invalid_slot(self):
        record = StockRecordFactory(quantity=10)
        with pytest.raises(BusinessRuleViolation):
            _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 1}], delivery_slot='night')

    @pytest.mark.parametrize('items', [[], [{'product_id': 1, 'quantity': 0}]])
    def test_invalid_items(self, items):
        with pytest.raises(BusinessRuleViolation):
            _create(UserFactory(), items)

    def test_price_change_does_not_touch_existing_order(self):
        record = StockRecordFactory(quantity=10, product=ProductFactory(price=Decimal('3.00')))
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 2}])
        record.product.price = Decimal('9.00')
        record.product.save()
        order.refresh_from_db()
        assert order.total_amount == Decimal('6.00')
        assert order.lines.get().unit_price == Decimal('3.00')

    def test_audited(self):
        record = StockRecordFactory(quantity=10)
        user = UserFactory()
        order = _create(user, [{'product_id': record.product_id, 'quantity': 1}])
        log = AuditLog.objects.get(model_name='Order', object_id=str(order.pk))
        assert log.action == AuditLog.ActionChoices.CREATE
        assert log.actor == user

    def test_order_number_collision_retried(self, monkeypatch):
        OrderFactory(order_number='EA-20260310100000-DUPE')
        numbers = iter(['EA-20260310100000-DUPE', 'EA-20260310100000-FRSH'])
        monkeypatch.setattr('orders.services.generate_order_number', lambda now=None: next(numbers))
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 1}])
        assert order.order_number == 'EA-20260310100000-FRSH'

    def test_order_number_exhausted(self, monkeypatch):
        OrderFactory(order_number='EA-20260310100000-DUPE')
        monkeypatch.setattr('orders.services.generate_order_number', lambda now=None: 'EA-20260310100000-DUPE')
        record = StockRecordFactory(quantity=10)
        with pytest.raises(DuplicateResourceError):
            _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 1}])
        assert StockLedger.get_quantity(record.product_id) == 10
        assert Order.objects.count() == 1


class TestCancelOrder:

    def test_cancel_restores_stock(self):
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 3}])
        assert StockLedger.get_quantity(record.product_id) == 7

        order = OrderService.cancel_order(order_id=order.pk)
        assert order.status == Order.StatusChoices.CANCELLED
        assert StockLedger.get_quantity(record.product_id) == 10
        release = StockChangeEntry.objects.get(change_kind=ChangeKind.ORDER_RELEASE)
        assert release.reference == order.order_number

    def test_cancel_twice_is_noop(self):
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 3}])
        OrderService.cancel_order(order_id=order.pk)
        again = OrderService.cancel_order(order_id=order.pk)
        assert again.status == Order.StatusChoices.CANCELLED
        assert StockLedger.get_quantity(record.product_id) == 10
        assert StockChangeEntry.objects.filter(change_kind=ChangeKind.ORDER_RELEASE).count() == 1

    def test_cancel_delivered_rejected(self):
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 3}])
        _advance(order, 'confirmed', 'preparing', 'out_for_delivery', 'delivered')
        with pytest.raises(InvalidStateTransition):
            OrderService.cancel_order(order_id=order.pk)
        assert StockLedger.get_quantity(record.product_id) == 7

    @pytest.mark.parametrize('path', [
        (),
        ('confirmed',),
        ('confirmed', 'preparing'),
        ('confirmed', 'preparing', 'out_for_delivery'),
    ])
    def test_cancel_from_every_open_status(self, path):
        first = StockRecordFactory(quantity=10)
        second = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [
            {'product_id': first.product_id, 'quantity': 3},
            {'product_id': second.product_id, 'quantity': 5},
        ])
        order = _advance(order, *path)

        order = OrderService.cancel_order(order_id=order.pk)
        assert order.status == Order.StatusChoices.CANCELLED
        for record in (first, second):
            assert StockLedger.get_quantity(record.product_id) == 10
            releases = StockChangeEntry.objects.filter(
                product_id=record.product_id, change_kind=ChangeKind.ORDER_RELEASE,
            )
            assert releases.count() == 1

    def test_cancel_unknown(self):
        with pytest.raises(ResourceNotFoundError):
            OrderService.cancel_order(order_id=999999)


class TestUpdateStatus:

    def test_full_lifecycle(self):
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 1}])
        order = _advance(order, 'confirmed', 'preparing', 'out_for_delivery', 'delivered')
        assert order.status == Order.StatusChoices.DELIVERED
        assert StockLedger.get_quantity(record.product_id) == 9

    def test_skipping_a_step_rejected(self):
        order = OrderFactory()
        with pytest.raises(InvalidStateTransition):
            OrderService.update_status(order_id=order.pk, new_status='delivered')

    def test_unknown_status(self):
        order = OrderFactory()
        with pytest.raises(BusinessRuleViolation):
            OrderService.update_status(order_id=order.pk, new_status='lost')

    def test_delivered_is_terminal(self):
        order = OrderFactory(status=Order.StatusChoices.DELIVERED)
        with pytest.raises(InvalidStateTransition):
            OrderService.update_status(order_id=order.pk, new_status='pending')

    def test_cancel_via_status_releases_stock(self):
        record = StockRecordFactory(quantity=10)
        order = _create(UserFactory(), [{'product_id': record.product_id, 'quantity': 4}])
        order = OrderService.update_status(order_id=order.pk, new_status='cancelled')
        assert order.status == Order.StatusChoices.CANCELLED
        assert StockLedger.get_quantity(record.product_id) == 10

    def test_status_change_audited(self):
        order = OrderFactory()
        ops = OpsManagerFactory()
        OrderService.update_status(order_id=order.pk, new_status='confirmed', actor=ops)
        log = AuditLog.objects.get(model_name='Order', action=AuditLog.ActionChoices.STATUS_CHANGE)
        assert log.old_values == {'status': 'pending'}
        assert log.new_values == {'status': 'confirmed'}
        assert log.actor == ops


class TestOrderViewAndQueries:

    def test_read_serializer_renders_order_view(self):
        record = StockRecordFactory(quantity=10, product=ProductFactory(name='Carrots', price=Decimal('1.99')))
        user = UserFactory()
        order = _create(user, [{'product_id': record.product_id, 'quantity': 2}])
        data = OrderReadSerializer(OrderQueryService.get_order(order.pk)).data
        assert data['order_number'] == order.order_number
        assert data['user_id'] == user.pk
        assert data['status'] == Order.StatusChoices.PENDING
        assert data['total_amount'] == Decimal('3.98')
        assert [dict(line) for line in data['lines']] == [{
            'product_id': record.product_id,
            'product_name': 'Carrots',
            'quantity': 2,
            'unit_price': Decimal('1.99'),
            'line_total': Decimal('3.98'),
        }]

    def test_lookups(self):
        order = OrderFactory()
        OrderFactory(status=Order.StatusChoices.CONFIRMED)
        assert OrderQueryService.get_order(order.pk) == order
        assert OrderQueryService.by_number(order.order_number) == order
        assert list(OrderQueryService.for_user(order.user_id)) == [order]
        assert OrderQueryService.by_status('confirmed').count() == 1
        with pytest.raises(ResourceNotFoundError):
            OrderQueryService.by_number('EA-NOPE')
        with pytest.raises(BusinessRuleViolation):
            OrderQueryService.by_status('lost')

    def test_statistics(self):
        OrderFactory(total_amount=Decimal('10.00'))
        OrderFactory(total_amount=Decimal('5.50'), status=Order.StatusChoices.DELIVERED)
        OrderFactory(total_amount=Decimal('100.00'), status=Order.StatusChoices.CANCELLED)
        stats = OrderQueryService.statistics()
        assert stats['total_orders'] == 3
        assert stats['total_revenue'] == Decimal('15.50')
        by_status = {row['status']: row for row in stats['by_status']}
        assert by_status['pending']['count'] == 1
        assert by_status['cancelled']['total_amount'] == Decimal('100.00')
        assert by_status['preparing']['count'] == 0
