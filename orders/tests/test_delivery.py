"""
Tests — Delivery policy: cutoff, next available date, date validation,
delivery slots.

@file orders/tests/test_delivery.py
"""

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest
from django.test import override_settings

from core.exceptions import DeliveryPolicyError
from orders.delivery import (
    delivery_slots,
    is_after_cutoff,
    is_valid_delivery_date,
    next_available_date,
    resolve_delivery_date,
)

NAIROBI = ZoneInfo('Africa/Nairobi')


def _at(hour, minute=0):
    return datetime(2026, 3, 10, hour, minute, tzinfo=NAIROBI)


class TestCutoff:

    @pytest.mark.parametrize('hour, minute, expected', [
        (9, 0, False),
        (17, 59, False),
        (18, 0, True),
        (19, 0, True),
        (23, 59, True),
    ])
    def test_is_after_cutoff(self, hour, minute, expected):
        assert is_after_cutoff(_at(hour, minute)) is expected

    def test_cutoff_uses_local_time(self):
        # 15:30 UTC is 18:30 in Nairobi.
        now = datetime(2026, 3, 10, 15, 30, tzinfo=ZoneInfo('UTC'))
        assert is_after_cutoff(now) is True

    @override_settings(ORDER_CUTOFF_TIME='20:00')
    def test_cutoff_is_configurable(self):
        assert is_after_cutoff(_at(19, 0)) is False


class TestNextAvailableDate:

    def test_before_cutoff_is_next_day(self):
        assert next_available_date(_at(10)) == date(2026, 3, 11)

    def test_after_cutoff_is_two_days_out(self):
        assert next_available_date(_at(19)) == date(2026, 3, 12)

    def test_is_valid_delivery_date(self):
        now = _at(19)
        assert is_valid_delivery_date(date(2026, 3, 11), now) is False
        assert is_valid_delivery_date(date(2026, 3, 12), now) is True
        assert is_valid_delivery_date(date(2026, 4, 1), now) is True


class TestResolveDeliveryDate:

    def test_defaults_to_next_available(self):
        assert resolve_delivery_date(None, now=_at(10)) == date(2026, 3, 11)

    def test_accepts_later_date(self):
        assert resolve_delivery_date(date(2026, 3, 15), now=_at(10)) == date(2026, 3, 15)

    def test_accepts_iso_string(self):
        assert resolve_delivery_date('2026-03-15', now=_at(10)) == date(2026, 3, 15)

    def test_rejects_same_day(self):
        with pytest.raises(DeliveryPolicyError):
            resolve_delivery_date(date(2026, 3, 10), now=_at(10))

    def test_rejects_garbage(self):
        with pytest.raises(DeliveryPolicyError):
            resolve_delivery_date('next tuesday', now=_at(10))

    def test_after_cutoff_requires_confirmation(self):
        with pytest.raises(DeliveryPolicyError):
            resolve_delivery_date(None, now=_at(19))

    def test_after_cutoff_confirmed_moves_two_days(self):
        assert resolve_delivery_date(None, now=_at(19), force_after_cutoff=True) == date(2026, 3, 12)

    def test_after_cutoff_next_day_rejected_even_when_confirmed(self):
        with pytest.raises(DeliveryPolicyError):
            resolve_delivery_date(date(2026, 3, 11), now=_at(19), force_after_cutoff=True)


class TestDeliverySlots:

    def test_three_slots_with_ranges(self):
        slots = delivery_slots()
        assert [s['slot'] for s in slots] == ['morning', 'afternoon', 'evening']
        assert slots[0]['time_range'] == '8:00 AM - 11:00 AM'
        assert slots[1]['time_range'] == '12:00 PM - 3:00 PM'
        assert slots[2]['time_range'] == '4:00 PM - 7:00 PM'
        assert all(s['available'] for s in slots)
