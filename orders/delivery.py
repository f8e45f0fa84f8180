"""
Orders — Delivery Policy

Order cutoff and earliest delivery date. Orders placed before the daily
cutoff can be delivered the next day; from the cutoff onwards the
earliest date moves one day further out. All times are evaluated in the
project timezone.

@file orders/delivery.py
"""

from datetime import date, datetime, time, timedelta

from django.conf import settings
from django.utils import timezone

from core.exceptions import DeliveryPolicyError

from .models import Order

SLOT_TIME_RANGES = {
    Order.DeliverySlotChoices.MORNING: '8:00 AM - 11:00 AM',
    Order.DeliverySlotChoices.AFTERNOON: '12:00 PM - 3:00 PM',
    Order.DeliverySlotChoices.EVENING: '4:00 PM - 7:00 PM',
}


def cutoff_time() -> time:
    return datetime.strptime(settings.ORDER_CUTOFF_TIME, '%H:%M').time()


def is_after_cutoff(now: datetime | None = None) -> bool:
    """True at or after the cutoff (18:00 itself counts as after)."""
    return timezone.localtime(now or timezone.now()).time() >= cutoff_time()


def next_available_date(now: datetime | None = None) -> date:
    now = now or timezone.now()
    days = 2 if is_after_cutoff(now) else 1
    return timezone.localtime(now).date() + timedelta(days=days)


def is_valid_delivery_date(candidate: date, now: datetime | None = None) -> bool:
    return candidate >= next_available_date(now)


def resolve_delivery_date(
    requested: date | str | None = None,
    now: datetime | None = None,
    force_after_cutoff: bool = False,
) -> date:
    """
    Return the delivery date to store on a new order.

    After the cutoff an order is refused unless ``force_after_cutoff`` is
    set, even when an explicit date is supplied. A missing date defaults
    to the next available one.
    """
    now = now or timezone.now()
    if is_after_cutoff(now) and not force_after_cutoff:
        raise DeliveryPolicyError(
            detail=(
                f'Orders after {settings.ORDER_CUTOFF_TIME} are delivered from '
                f'{next_available_date(now).isoformat()}. Confirm to proceed.'
            ),
        )

    if requested is None or requested == '':
        return next_available_date(now)
    if isinstance(requested, str):
        try:
            requested = date.fromisoformat(requested)
        except ValueError:
            raise DeliveryPolicyError(detail=f'Invalid delivery date: {requested}.')
    if not is_valid_delivery_date(requested, now):
        raise DeliveryPolicyError(
            detail=(
                f'Delivery date {requested.isoformat()} is not available; '
                f'earliest is {next_available_date(now).isoformat()}.'
            ),
        )
    return requested


def delivery_slots() -> list[dict]:
    return [
        {
            'slot': value,
            'label': str(label),
            'time_range': SLOT_TIME_RANGES[value],
            'available': True,
        }
        for value, label in Order.DeliverySlotChoices.choices
    ]
