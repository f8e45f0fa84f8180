"""
Core — Exception Handler Tests

The standard error envelope produced for domain exceptions.

@file core/tests/test_exceptions.py
"""

from django.http import Http404

from core.exceptions import (
    BusinessRuleViolation,
    DeliveryPolicyError,
    InsufficientStockError,
    InvalidStateTransition,
    standard_exception_handler,
)


class TestStandardExceptionHandler:

    def test_business_rule_violation(self):
        resp = standard_exception_handler(BusinessRuleViolation(detail='Nope.'), {})
        assert resp.status_code == 400
        assert resp.data['success'] is False
        assert resp.data['code'] == 'BUSINESS_RULE_VIOLATION'
        assert resp.data['errors']['detail'] == 'Nope.'

    def test_delivery_policy_code(self):
        resp = standard_exception_handler(DeliveryPolicyError(detail='Too late.'), {})
        assert resp.status_code == 400
        assert resp.data['code'] == 'DELIVERY_POLICY_VIOLATION'

    def test_insufficient_stock_carries_product(self):
        exc = InsufficientStockError(detail='Short.', product_id=7, requested=5, available=2)
        resp = standard_exception_handler(exc, {})
        assert resp.status_code == 409
        assert resp.data['code'] == 'INSUFFICIENT_STOCK'
        assert resp.data['errors']['product_id'] == 7
        assert resp.data['errors']['available'] == 2

    def test_invalid_transition(self):
        resp = standard_exception_handler(InvalidStateTransition(), {})
        assert resp.status_code == 409
        assert resp.data['code'] == 'INVALID_STATE_TRANSITION'

    def test_http404_mapped(self):
        resp = standard_exception_handler(Http404(), {})
        assert resp.status_code == 404
        assert resp.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_unhandled_is_500(self):
        resp = standard_exception_handler(RuntimeError('boom'), {})
        assert resp.status_code == 500
        assert resp.data['code'] == 'INTERNAL_ERROR'
