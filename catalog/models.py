"""
Catalog — Models

Grocery products offered for pre-order. Prices are copied onto order
lines when an order is placed, so editing a product never changes an
existing order.

@file catalog/models.py
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Product(BaseModel):
    """
    A sellable product. Products are never hard-deleted once they exist;
    deactivating one removes it from the catalog and from checkout.
    """

    name = models.CharField(_('name'), max_length=200)
    description = models.TextField(_('description'), blank=True)
    price = models.DecimalField(
        _('price'), max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))],
    )
    category = models.CharField(_('category'), max_length=100, db_index=True)
    is_active = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['category', 'is_active'], name='product_category_active_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name='product_price_positive',
            ),
        ]

    def __str__(self):
        return f'{self.name} ({self.category})'

    def delete(self, *args, **kwargs):
        raise NotImplementedError('Products cannot be deleted; deactivate them instead.')
