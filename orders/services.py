"""
Orders — Service Layer

Order lifecycle: create (reserve stock, snapshot prices), cancel
(release stock) and the fulfilment state machine. Each operation is one
atomic block; a failure leaves neither an order row nor a stock change.

@file orders/services.py
"""

import logging
import secrets
import string
from decimal import Decimal

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Sum
from django.utils import timezone

from catalog.services import PricingService, ProductService
from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_STATUS_CHANGE
from core.exceptions import (
    BusinessRuleViolation,
    DuplicateResourceError,
    InvalidStateTransition,
    ResourceNotFoundError,
)
from core.services import AuditService
from stock.services import StockLedger, merge_items
from users.models import User

from .delivery import resolve_delivery_date
from .models import Order, OrderLine

logger = logging.getLogger('eafoods')

# Valid status transitions: from_status -> set of allowed to_status
ORDER_TRANSITIONS = {
    Order.StatusChoices.PENDING: {Order.StatusChoices.CONFIRMED, Order.StatusChoices.CANCELLED},
    Order.StatusChoices.CONFIRMED: {Order.StatusChoices.PREPARING, Order.StatusChoices.CANCELLED},
    Order.StatusChoices.PREPARING: {
        Order.StatusChoices.OUT_FOR_DELIVERY,
        Order.StatusChoices.CANCELLED,
    },
    Order.StatusChoices.OUT_FOR_DELIVERY: {
        Order.StatusChoices.DELIVERED,
        Order.StatusChoices.CANCELLED,
    },
    Order.StatusChoices.DELIVERED: set(),
    Order.StatusChoices.CANCELLED: set(),
}

ORDER_NUMBER_ALPHABET = string.digits + string.ascii_uppercase


def generate_order_number(now=None) -> str:
    """EA-YYYYMMDDHHMMSS-XXXX with a random base-36 suffix."""
    stamp = timezone.localtime(now or timezone.now()).strftime('%Y%m%d%H%M%S')
    suffix = ''.join(secrets.choice(ORDER_NUMBER_ALPHABET) for _ in range(4))
    return f'EA-{stamp}-{suffix}'


def _assert_transition(order: Order, new_status: str) -> None:
    allowed = ORDER_TRANSITIONS.get(order.status, set())
    if new_status not in allowed:
        raise InvalidStateTransition(
            detail=f'Cannot transition order from {order.status} to {new_status}.',
        )


def _get_locked(order_id) -> Order:
    try:
        return Order.objects.select_for_update().get(pk=order_id)
    except (Order.DoesNotExist, ValueError, TypeError):
        raise ResourceNotFoundError(detail=f'Order not found: {order_id}.')


def _insert_order(**fields) -> Order:
    """Insert with a fresh order number, retrying on a number collision."""
    max_attempts = settings.ORDER_NUMBER_MAX_ATTEMPTS
    now = fields.pop('now', None)
    for attempt in range(1, max_attempts + 1):
        order = Order(order_number=generate_order_number(now), **fields)
        try:
            with transaction.atomic():
                order.save(force_insert=True)
        except IntegrityError:
            logger.warning('Order number collision on %s (attempt %d).', order.order_number, attempt)
            continue
        return order
    raise DuplicateResourceError(detail='Could not allocate a unique order number.')


class OrderService:
    """Order lifecycle and its stock side effects."""

    @staticmethod
    @transaction.atomic
    def create_order(
        *,
        user_id,
        delivery_slot: str,
        items: list[dict],
        delivery_date=None,
        force_after_cutoff: bool = False,
        now=None,
        actor=None,
    ) -> Order:
        """
        Place an order in PENDING: reserve stock for every item, snapshot
        prices onto the lines and store the total. Duplicate product ids
        in ``items`` are merged into one line.
        """
        now = now or timezone.now()
        user = User.objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            raise ResourceNotFoundError(detail=f'User not found: {user_id}.')
        if delivery_slot not in Order.DeliverySlotChoices.values:
            raise BusinessRuleViolation(
                detail=f'Delivery slot must be one of: {", ".join(Order.DeliverySlotChoices.values)}.',
            )
        if not items:
            raise BusinessRuleViolation(detail='At least one item is required.')

        requested = merge_items(items)
        lines_in = [{'product_id': pid, 'quantity': qty} for pid, qty in requested.items()]
        products = ProductService.resolve_orderable(list(requested))
        delivery_date = resolve_delivery_date(delivery_date, now=now, force_after_cutoff=force_after_cutoff)

        priced = PricingService.price_lines(lines_in, products=products)
        total = sum((line.line_total for line in priced), Decimal('0.00'))

        order = _insert_order(
            user=user,
            delivery_date=delivery_date,
            delivery_slot=delivery_slot,
            status=Order.StatusChoices.PENDING,
            total_amount=total,
            now=now,
        )
        StockLedger.reserve(lines_in, actor=actor or user, reference=order.order_number)
        OrderLine.objects.bulk_create([
            OrderLine(
                order=order,
                product=line.product,
                quantity=line.quantity,
                unit_price=line.unit_price,
                line_total=line.line_total,
            )
            for line in priced
        ])

        AuditService.log(
            actor=actor or user,
            action=AUDIT_ACTION_CREATE,
            model_name='Order',
            object_id=order.pk,
            new_values={
                'order_number': order.order_number,
                'user_id': user.pk,
                'status': order.status,
                'delivery_date': delivery_date.isoformat(),
                'delivery_slot': delivery_slot,
                'total_amount': str(total),
                'items': lines_in,
            },
        )
        logger.info(
            'Order %s created for user %s: %d lines, total %s, delivery %s %s.',
            order.order_number, user.pk, len(priced), total, delivery_date, delivery_slot,
        )
        return order

    @staticmethod
    @transaction.atomic
    def cancel_order(*, order_id, actor=None) -> Order:
        """
        Cancel and return every line's quantity to stock. Cancelling an
        already cancelled order changes nothing.
        """
        order = _get_locked(order_id)
        if order.status == Order.StatusChoices.CANCELLED:
            return order
        _assert_transition(order, Order.StatusChoices.CANCELLED)

        lines = [
            {'product_id': line.product_id, 'quantity': line.quantity}
            for line in order.lines.all()
        ]
        if lines:
            StockLedger.release(lines, actor=actor, reference=order.order_number)

        old_status = order.status
        order.status = Order.StatusChoices.CANCELLED
        order.save(update_fields=['status', 'updated_at'])
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_STATUS_CHANGE,
            model_name='Order',
            object_id=order.pk,
            old_values={'status': old_status},
            new_values={'status': order.status},
        )
        logger.info('Order %s cancelled (was %s); %d lines released.', order.order_number, old_status, len(lines))
        return order

    @staticmethod
    @transaction.atomic
    def update_status(*, order_id, new_status: str, actor=None) -> Order:
        """Advance the fulfilment status. Cancellation goes through cancel_order."""
        if new_status not in Order.StatusChoices.values:
            raise BusinessRuleViolation(detail=f'Invalid order status: {new_status}.')
        if new_status == Order.StatusChoices.CANCELLED:
            return OrderService.cancel_order(order_id=order_id, actor=actor)

        order = _get_locked(order_id)
        _assert_transition(order, new_status)
        old_status = order.status
        order.status = new_status
        order.save(update_fields=['status', 'updated_at'])
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_STATUS_CHANGE,
            model_name='Order',
            object_id=order.pk,
            old_values={'status': old_status},
            new_values={'status': new_status},
        )
        logger.info('Order %s status %s -> %s.', order.order_number, old_status, new_status)
        return order


class OrderQueryService:
    """Read-side access to orders."""

    @staticmethod
    def all():
        return Order.objects.select_related('user').prefetch_related('lines__product')

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return OrderQueryService.all().get(pk=order_id)
        except (Order.DoesNotExist, ValueError, TypeError):
            raise ResourceNotFoundError(detail=f'Order not found: {order_id}.')

    @staticmethod
    def by_number(order_number: str) -> Order:
        try:
            return OrderQueryService.all().get(order_number=order_number)
        except Order.DoesNotExist:
            raise ResourceNotFoundError(detail=f'Order not found: {order_number}.')

    @staticmethod
    def for_user(user_id):
        return OrderQueryService.all().filter(user_id=user_id)

    @staticmethod
    def by_status(status: str):
        if status not in Order.StatusChoices.values:
            raise BusinessRuleViolation(detail=f'Invalid order status: {status}.')
        return OrderQueryService.all().filter(status=status)

    @staticmethod
    def statistics() -> dict:
        rows = {
            row['status']: row
            for row in Order.objects.values('status').order_by().annotate(
                count=Count('id'), total_amount=Sum('total_amount'),
            )
        }
        by_status = [
            {
                'status': status,
                'count': rows[status]['count'] if status in rows else 0,
                'total_amount': rows[status]['total_amount'] if status in rows else Decimal('0.00'),
            }
            for status in Order.StatusChoices.values
        ]
        revenue = (
            Order.objects.exclude(status=Order.StatusChoices.CANCELLED)
            .aggregate(total=Sum('total_amount'))['total']
        )
        return {
            'total_orders': sum(entry['count'] for entry in by_status),
            'total_revenue': revenue or Decimal('0.00'),
            'by_status': by_status,
        }
