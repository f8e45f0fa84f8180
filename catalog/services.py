"""
Catalog — Service Layer

Product management and the pricing lookup used at checkout. Prices are
resolved here once per order and snapshotted onto order lines.

@file catalog/services.py
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import Count

from core.constants import AUDIT_ACTION_CREATE, AUDIT_ACTION_DEACTIVATE, AUDIT_ACTION_UPDATE
from core.exceptions import BusinessRuleViolation, ResourceNotFoundError
from core.services import AuditService

from .models import Product

logger = logging.getLogger('eafoods')

PRODUCT_FIELDS = ('name', 'description', 'price', 'category', 'is_active')


@dataclass(frozen=True)
class LinePrice:
    product: Product
    quantity: int
    unit_price: Decimal
    line_total: Decimal


def _validate_price(price) -> Decimal:
    if price is None or Decimal(price) <= 0:
        raise BusinessRuleViolation(detail='Price must be greater than 0.')
    return Decimal(price)


class ProductService:
    """Catalog management for Product."""

    @staticmethod
    @transaction.atomic
    def create_product(*, name: str, price, category: str, description: str = '', actor=None) -> Product:
        if not name or not category:
            raise BusinessRuleViolation(detail='Name, price, and category are required.')
        product = Product.objects.create(
            name=name,
            description=description or '',
            price=_validate_price(price),
            category=category,
            created_by=actor,
        )
        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_CREATE,
            model_name='Product',
            object_id=product.pk,
            new_values=AuditService.snapshot(product, fields=PRODUCT_FIELDS),
        )
        logger.info('Product %s created: %s @ %s.', product.pk, product.name, product.price)
        return product

    @staticmethod
    @transaction.atomic
    def update_product(*, product_id, actor=None, **fields) -> Product:
        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')

        if 'price' in fields:
            fields['price'] = _validate_price(fields['price'])
        old = AuditService.snapshot(product, fields=PRODUCT_FIELDS)
        for field, value in fields.items():
            if field in PRODUCT_FIELDS:
                setattr(product, field, value)
        product.updated_by = actor
        product.save()

        new = AuditService.snapshot(product, fields=PRODUCT_FIELDS)
        if new != old:
            AuditService.log(
                actor=actor,
                action=AUDIT_ACTION_UPDATE,
                model_name='Product',
                object_id=product.pk,
                old_values=old,
                new_values=new,
            )
        return product

    @staticmethod
    @transaction.atomic
    def deactivate_product(*, product_id, actor=None) -> Product:
        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')
        if product.is_active:
            product.is_active = False
            product.updated_by = actor
            product.save(update_fields=['is_active', 'updated_by', 'updated_at'])
            AuditService.log(
                actor=actor,
                action=AUDIT_ACTION_DEACTIVATE,
                model_name='Product',
                object_id=product.pk,
                old_values={'is_active': True},
                new_values={'is_active': False},
            )
        return product

    @staticmethod
    def categories() -> list[dict]:
        """Distinct active categories with their product counts."""
        rows = (
            Product.objects.filter(is_active=True)
            .values('category')
            .order_by('category')
            .annotate(product_count=Count('id'))
        )
        return [{'category': r['category'], 'product_count': r['product_count']} for r in rows]

    @staticmethod
    def resolve_orderable(product_ids) -> dict[int, Product]:
        """
        Return active products keyed by id. Raises on the first id (in
        request order) that is unknown or deactivated.
        """
        products = Product.objects.in_bulk(list(product_ids))
        for product_id in product_ids:
            product = products.get(product_id)
            if product is None or not product.is_active:
                raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')
        return products


class PricingService:
    """Resolves unit prices and order totals at order time."""

    @staticmethod
    def price_line(product_id, quantity: int, products: dict | None = None) -> LinePrice:
        if quantity is None or quantity < 1:
            raise BusinessRuleViolation(detail='Quantity must be at least 1.')
        product = (products or {}).get(product_id)
        if product is None:
            product = Product.objects.filter(pk=product_id, is_active=True).first()
        if product is None or not product.is_active:
            raise ResourceNotFoundError(detail=f'Product not found: {product_id}.')
        return LinePrice(
            product=product,
            quantity=quantity,
            unit_price=product.price,
            line_total=product.price * quantity,
        )

    @classmethod
    def price_lines(cls, items, products: dict | None = None) -> list[LinePrice]:
        return [
            cls.price_line(item['product_id'], item['quantity'], products=products)
            for item in items
        ]

    @classmethod
    def price_order(cls, items, products: dict | None = None) -> Decimal:
        """Sum of line totals; fails fast on the first missing product."""
        return sum(
            (line.line_total for line in cls.price_lines(items, products=products)),
            Decimal('0.00'),
        )
