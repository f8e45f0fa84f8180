"""
Stock — Service Layer

The stock ledger: reserve, release and absolute set of product
quantities. Every mutation locks the affected StockRecord rows and
appends one StockChangeEntry per product. Reservations are all-or-nothing
across the whole item list.

@file stock/services.py
"""

import logging
from collections.abc import Iterable

from django.conf import settings
from django.db import transaction
from django.db.models import Avg, Count, IntegerField, Q, Sum
from django.db.models.functions import Coalesce
from django.utils import timezone

from catalog.models import Product
from core.exceptions import (
    BusinessRuleViolation,
    DuplicateResourceError,
    InsufficientStockError,
    ResourceNotFoundError,
)

from .models import RESTOCK_KINDS, ChangeKind, StockChangeEntry, StockRecord

logger = logging.getLogger('eafoods')


def _actor(actor):
    """Anonymous or unsaved users are recorded as no actor."""
    return actor if getattr(actor, 'pk', None) else None


def merge_items(items: Iterable[dict]) -> dict[int, int]:
    """
    Collapse [{'product_id', 'quantity'}] into {product_id: total_quantity},
    keeping first-appearance order.
    """
    merged: dict[int, int] = {}
    for item in items:
        try:
            product_id = int(item['product_id'])
            quantity = int(item['quantity'])
        except (KeyError, TypeError, ValueError):
            raise BusinessRuleViolation(detail='Each item needs an integer product_id and quantity.')
        if quantity < 1:
            raise BusinessRuleViolation(detail=f'Quantity for product {product_id} must be at least 1.')
        merged[product_id] = merged.get(product_id, 0) + quantity
    return merged


def _lock_records(product_ids) -> dict[int, StockRecord]:
    """Lock stock rows in ascending product order so concurrent callers cannot deadlock."""
    qs = (
        StockRecord.objects
        .select_for_update()
        .filter(product_id__in=list(product_ids))
        .order_by('product_id')
    )
    return {record.product_id: record for record in qs}


def _apply(record: StockRecord, new_quantity: int, *, actor, change_kind: str, reference: str = '') -> StockChangeEntry:
    old_quantity = record.quantity
    record.quantity = new_quantity
    record.updated_by = actor
    record.save(update_fields=['quantity', 'updated_by', 'updated_at'])
    return StockChangeEntry.objects.create(
        product_id=record.product_id,
        old_quantity=old_quantity,
        new_quantity=new_quantity,
        actor=actor,
        change_kind=change_kind,
        reference=reference or '',
    )


def resolve_change_kind(now=None) -> str:
    """Scheduled kind when called at a configured count time, manual otherwise."""
    current = timezone.localtime(now or timezone.now()).strftime('%H:%M')
    times = settings.STOCK_UPDATE_TIMES
    if current == times['morning']:
        return ChangeKind.SCHEDULED_MORNING
    if current == times['evening']:
        return ChangeKind.SCHEDULED_EVENING
    return ChangeKind.MANUAL


class StockLedger:
    """Quantity per product plus its append-only change history."""

    @staticmethod
    def get_quantity(product_id) -> int:
        """Recorded quantity; a product without a record has zero stock."""
        quantity = (
            StockRecord.objects.filter(product_id=product_id)
            .values_list('quantity', flat=True)
            .first()
        )
        return quantity or 0

    @staticmethod
    def check_availability(items) -> list[dict]:
        requested = merge_items(items)
        available = dict(
            StockRecord.objects.filter(product_id__in=list(requested))
            .values_list('product_id', 'quantity')
        )
        return [
            {
                'product_id': product_id,
                'requested': quantity,
                'available': available.get(product_id, 0),
                'sufficient': available.get(product_id, 0) >= quantity,
            }
            for product_id, quantity in requested.items()
        ]

    @staticmethod
    @transaction.atomic
    def reserve(items, *, actor=None, reference: str = '') -> list[StockChangeEntry]:
        """
        Decrement stock for every item or for none. Raises
        InsufficientStockError naming the first product that cannot be
        satisfied; no row is written in that case.
        """
        requested = merge_items(items)
        if not requested:
            raise BusinessRuleViolation(detail='At least one item is required.')
        records = _lock_records(requested)

        for product_id, quantity in requested.items():
            record = records.get(product_id)
            available = record.quantity if record else 0
            if available < quantity:
                raise InsufficientStockError(
                    detail=(
                        f'Insufficient stock for product ID {product_id}: '
                        f'available={available}, requested={quantity}.'
                    ),
                    product_id=product_id,
                    requested=quantity,
                    available=available,
                )

        actor = _actor(actor)
        entries = [
            _apply(
                records[product_id],
                records[product_id].quantity - quantity,
                actor=actor,
                change_kind=ChangeKind.ORDER_RESERVE,
                reference=reference,
            )
            for product_id, quantity in requested.items()
        ]
        logger.info('Reserved stock for %d products ref=%s.', len(entries), reference or '-')
        return entries

    @staticmethod
    @transaction.atomic
    def release(items, *, actor=None, reference: str = '') -> list[StockChangeEntry]:
        """Return previously reserved units to stock. No upper bound is enforced."""
        requested = merge_items(items)
        records = _lock_records(requested)
        for product_id in requested:
            if product_id not in records:
                records[product_id], _ = StockRecord.objects.get_or_create(product_id=product_id)

        actor = _actor(actor)
        entries = [
            _apply(
                records[product_id],
                records[product_id].quantity + quantity,
                actor=actor,
                change_kind=ChangeKind.ORDER_RELEASE,
                reference=reference,
            )
            for product_id, quantity in requested.items()
        ]
        logger.info('Released stock for %d products ref=%s.', len(entries), reference or '-')
        return entries

    @staticmethod
    @transaction.atomic
    def set_quantity(product_id, new_quantity: int, *, actor=None, change_kind: str | None = None, now=None) -> StockRecord:
        """Absolute set used by scheduled counts and manual adjustments."""
        if new_quantity is None or int(new_quantity) < 0:
            raise BusinessRuleViolation(detail='Quantity cannot be negative.')
        change_kind = change_kind or resolve_change_kind(now)
        if change_kind not in RESTOCK_KINDS:
            raise BusinessRuleViolation(detail=f'Invalid change kind: {change_kind}.')
        if not Product.objects.filter(pk=product_id).exists():
            raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')

        record, _ = StockRecord.objects.select_for_update().get_or_create(product_id=product_id)
        entry = _apply(record, int(new_quantity), actor=_actor(actor), change_kind=change_kind)
        logger.info(
            'Stock set product=%s %s -> %s kind=%s.',
            product_id, entry.old_quantity, entry.new_quantity, change_kind,
        )
        return record

    @staticmethod
    @transaction.atomic
    def initialize(product_id, quantity: int, *, actor=None) -> StockRecord:
        if StockRecord.objects.filter(product_id=product_id).exists():
            raise DuplicateResourceError(detail=f'Stock already exists for product {product_id}.')
        return StockLedger.set_quantity(product_id, quantity, actor=actor, change_kind=ChangeKind.MANUAL)

    @staticmethod
    @transaction.atomic
    def bulk_set(updates, *, actor=None, change_kind: str | None = None, now=None) -> list[StockRecord]:
        """Apply several absolute sets; any failure rolls back the whole batch."""
        change_kind = change_kind or resolve_change_kind(now)
        return [
            StockLedger.set_quantity(
                update['product_id'], update['quantity'],
                actor=actor, change_kind=change_kind,
            )
            for update in updates
        ]


class StockQueryService:
    """Read-side views of stock."""

    @staticmethod
    def for_product(product_id) -> dict:
        try:
            product = Product.objects.get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')
        record = StockRecord.objects.filter(product=product).first()
        return {
            'product_id': product.pk,
            'product_name': product.name,
            'quantity': record.quantity if record else 0,
            'updated_at': record.updated_at if record else None,
            'updated_by': record.updated_by_id if record else None,
        }

    @staticmethod
    def all_active():
        return StockRecord.objects.filter(product__is_active=True).select_related('product')

    @staticmethod
    def active_products_with_quantity():
        """Active products annotated with stock_quantity; no record counts as 0."""
        return Product.objects.filter(is_active=True).annotate(
            stock_quantity=Coalesce('stock__quantity', 0, output_field=IntegerField()),
        )

    @staticmethod
    def low_stock(threshold: int | None = None):
        if threshold is None:
            threshold = settings.LOW_STOCK_THRESHOLD
        return (
            StockQueryService.active_products_with_quantity()
            .filter(stock_quantity__lte=threshold)
            .order_by('stock_quantity', 'id')
        )

    @staticmethod
    def history(product_id):
        if not Product.objects.filter(pk=product_id).exists():
            raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')
        return (
            StockChangeEntry.objects.filter(product_id=product_id)
            .select_related('product', 'actor')
            .order_by('-created_at', '-id')
        )

    @staticmethod
    def statistics() -> dict:
        threshold = settings.LOW_STOCK_THRESHOLD
        stats = StockQueryService.active_products_with_quantity().aggregate(
            total_products=Count('id'),
            total_quantity=Sum('stock_quantity'),
            average_quantity=Avg('stock_quantity'),
            low_stock_count=Count('id', filter=Q(stock_quantity__lte=threshold)),
            out_of_stock_count=Count('id', filter=Q(stock_quantity=0)),
        )
        return {
            'total_products': stats['total_products'] or 0,
            'total_quantity': stats['total_quantity'] or 0,
            'average_quantity': float(stats['average_quantity'] or 0),
            'low_stock_count': stats['low_stock_count'] or 0,
            'out_of_stock_count': stats['out_of_stock_count'] or 0,
        }
