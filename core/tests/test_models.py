"""
Core — Model Tests

Tests for AuditLog and the audit snapshot helper.

@file core/tests/test_models.py
"""

from decimal import Decimal

import pytest

from core.models import AuditLog
from core.services import AuditService
from tests.factories import AuditLogFactory, ProductFactory, UserFactory


@pytest.mark.django_db
class TestAuditLog:
    def test_create_audit_log(self):
        user = UserFactory()
        log = AuditService.log(
            actor=user,
            action=AuditLog.ActionChoices.CREATE,
            model_name='Order',
            object_id=42,
            new_values={'key': 'value'},
        )
        assert log.pk is not None
        assert log.action == 'CREATE'
        assert log.object_id == '42'

    def test_unsaved_actor_recorded_as_none(self):
        log = AuditService.log(
            actor=UserFactory.build(),
            action=AuditLog.ActionChoices.UPDATE,
            model_name='Product',
            object_id=1,
        )
        assert log.actor is None

    def test_update_raises(self):
        log = AuditLogFactory()
        log.model_name = 'Changed'
        with pytest.raises(NotImplementedError):
            log.save()

    def test_snapshot_serialises_decimal_and_dates(self):
        product = ProductFactory(price=Decimal('4.99'))
        snapshot = AuditService.snapshot(product)
        assert snapshot['price'] == '4.99'
        assert snapshot['name'] == product.name

    def test_snapshot_selected_fields(self):
        product = ProductFactory()
        assert set(AuditService.snapshot(product, fields=['name', 'category'])) == {'name', 'category'}
