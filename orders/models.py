"""
Orders — Models

Customer pre-orders and their lines. Line prices are snapshots taken at
order time; lines are written once together with their order and never
modified afterwards.

@file orders/models.py
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin


class Order(TimestampMixin):
    """
    A pre-order for delivery on a given date and slot.

    State machine: PENDING → CONFIRMED → PREPARING → OUT_FOR_DELIVERY →
    DELIVERED, or any non-terminal status → CANCELLED.
    """

    class StatusChoices(models.TextChoices):
        PENDING = 'pending', _('Pending')
        CONFIRMED = 'confirmed', _('Confirmed')
        PREPARING = 'preparing', _('Preparing')
        OUT_FOR_DELIVERY = 'out_for_delivery', _('Out for delivery')
        DELIVERED = 'delivered', _('Delivered')
        CANCELLED = 'cancelled', _('Cancelled')

    class DeliverySlotChoices(models.TextChoices):
        MORNING = 'morning', _('Morning')
        AFTERNOON = 'afternoon', _('Afternoon')
        EVENING = 'evening', _('Evening')

    order_number = models.CharField(_('order number'), max_length=40, unique=True)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='orders',
        verbose_name=_('user'),
    )
    delivery_date = models.DateField(_('delivery date'), db_index=True)
    delivery_slot = models.CharField(
        _('delivery slot'), max_length=10,
        choices=DeliverySlotChoices.choices,
    )
    status = models.CharField(
        _('status'), max_length=20,
        choices=StatusChoices.choices, default=StatusChoices.PENDING,
        db_index=True,
    )
    total_amount = models.DecimalField(
        _('total amount'), max_digits=12, decimal_places=2, default=0,
    )

    class Meta:
        verbose_name = _('order')
        verbose_name_plural = _('orders')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='order_user_created_idx'),
            models.Index(fields=['status', 'delivery_date'], name='order_status_date_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(total_amount__gte=0),
                name='order_total_non_negative',
            ),
        ]

    def __str__(self):
        return f'{self.order_number} ({self.status})'

    @property
    def is_terminal(self) -> bool:
        return self.status in (self.StatusChoices.DELIVERED, self.StatusChoices.CANCELLED)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('Orders cannot be deleted; cancel them instead.')


class OrderLine(models.Model):
    """One product of an order with its price snapshot (insert only)."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('order'),
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='order_lines',
        verbose_name=_('product'),
    )
    quantity = models.PositiveIntegerField(_('quantity'))
    unit_price = models.DecimalField(_('unit price'), max_digits=10, decimal_places=2)
    line_total = models.DecimalField(_('line total'), max_digits=12, decimal_places=2)

    class Meta:
        verbose_name = _('order line')
        verbose_name_plural = _('order lines')
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(fields=['order', 'product'], name='order_line_unique_product'),
            models.CheckConstraint(
                condition=models.Q(quantity__gte=1),
                name='order_line_quantity_positive',
            ),
        ]

    def __str__(self):
        return f'{self.order_id}: {self.quantity} x {self.product_id}'

    def save(self, *args, **kwargs):
        if self.pk and OrderLine.objects.filter(pk=self.pk).exists():
            raise NotImplementedError('OrderLine is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)
