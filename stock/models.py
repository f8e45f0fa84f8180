"""
Stock — Models

Current quantity per product (StockRecord) plus an append-only history
of every quantity change (StockChangeEntry). History rows are INSERT
ONLY: never update or delete.

@file stock/models.py
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class ChangeKind(models.TextChoices):
    SCHEDULED_MORNING = 'scheduled_morning', _('Scheduled morning count')
    SCHEDULED_EVENING = 'scheduled_evening', _('Scheduled evening count')
    MANUAL = 'manual', _('Manual adjustment')
    ORDER_RESERVE = 'order_reserve', _('Order reservation')
    ORDER_RELEASE = 'order_release', _('Order cancellation release')


# Kinds accepted by an absolute set; order kinds are written by the ledger only.
RESTOCK_KINDS = frozenset({
    ChangeKind.SCHEDULED_MORNING,
    ChangeKind.SCHEDULED_EVENING,
    ChangeKind.MANUAL,
})


class StockRecord(models.Model):
    """Recorded on-hand quantity of one product. Quantity is never negative."""

    product = models.OneToOneField(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='stock',
        verbose_name=_('product'),
    )
    quantity = models.PositiveIntegerField(_('quantity'), default=0)
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('last updated by'),
    )
    updated_at = models.DateTimeField(_('last updated at'), auto_now=True)

    class Meta:
        verbose_name = _('stock record')
        verbose_name_plural = _('stock records')
        ordering = ['-updated_at']
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name='stock_quantity_non_negative',
            ),
        ]

    def __str__(self):
        return f'{self.product_id}: {self.quantity}'


class StockChangeEntry(models.Model):
    """
    One quantity change of one product (insert only).

    reference holds the order number for reservation/release entries and
    is blank for restocks.
    """

    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='stock_changes',
        verbose_name=_('product'),
    )
    old_quantity = models.PositiveIntegerField(_('old quantity'))
    new_quantity = models.PositiveIntegerField(_('new quantity'))
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True, blank=True,
        on_delete=models.SET_NULL,
        related_name='+',
        verbose_name=_('actor'),
    )
    change_kind = models.CharField(
        _('change kind'), max_length=20,
        choices=ChangeKind.choices, db_index=True,
    )
    reference = models.CharField(_('reference'), max_length=40, blank=True, db_index=True)
    created_at = models.DateTimeField(_('created at'), auto_now_add=True, db_index=True)
    # No updated_at: immutable record.

    class Meta:
        verbose_name = _('stock change entry')
        verbose_name_plural = _('stock change entries')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='stock_change_product_idx'),
        ]

    def __str__(self):
        return f'{self.change_kind} {self.product_id}: {self.old_quantity} -> {self.new_quantity}'

    @property
    def delta(self) -> int:
        return self.new_quantity - self.old_quantity

    def save(self, *args, **kwargs):
        if self.pk and StockChangeEntry.objects.filter(pk=self.pk).exists():
            raise NotImplementedError('StockChangeEntry is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError('StockChangeEntry records cannot be deleted.')
