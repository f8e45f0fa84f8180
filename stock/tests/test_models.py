"""
Tests — StockRecord constraints and StockChangeEntry (insert-only, no delete).

@file stock/tests/test_models.py
"""

import pytest
from django.db import IntegrityError, transaction

from stock.models import ChangeKind, StockChangeEntry, StockRecord
from tests.factories import ProductFactory, StockRecordFactory


pytestmark = pytest.mark.django_db


def _entry(**kwargs):
    defaults = {
        'old_quantity': 10,
        'new_quantity': 7,
        'change_kind': ChangeKind.ORDER_RESERVE,
        'reference': 'EA-20260101120000-AAAA',
    }
    defaults.update(kwargs)
    if 'product' not in defaults:
        defaults['product'] = ProductFactory()
    return StockChangeEntry.objects.create(**defaults)


class TestStockRecord:

    def test_one_record_per_product(self):
        record = StockRecordFactory()
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                StockRecord.objects.create(product=record.product, quantity=5)

    def test_negative_quantity_rejected_by_database(self):
        record = StockRecordFactory(quantity=3)
        with pytest.raises(IntegrityError):
            with transaction.atomic():
                StockRecord.objects.filter(pk=record.pk).update(quantity=-1)


class TestStockChangeEntryInsertOnly:

    def test_create_entry(self):
        entry = _entry()
        assert entry.pk is not None
        assert entry.delta == -3

    def test_update_raises(self):
        entry = _entry()
        entry.new_quantity = 999
        with pytest.raises(NotImplementedError) as exc_info:
            entry.save()
        assert 'insert-only' in str(exc_info.value).lower()

    def test_delete_raises(self):
        entry = _entry()
        with pytest.raises(NotImplementedError) as exc_info:
            entry.delete()
        assert 'deleted' in str(exc_info.value).lower()
