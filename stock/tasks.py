"""
Stock — Celery Tasks

Entry point for the morning and evening stock counts. The schedule itself
lives outside this project; the task only applies the counted quantities.

@file stock/tasks.py
"""

import logging

from celery import shared_task

logger = logging.getLogger('eafoods')


@shared_task(name='stock.apply_scheduled_count')
def apply_scheduled_count_task(updates, change_kind=None, actor_id=None):
    """
    Apply a batch of counted quantities: ``updates`` is a list of
    ``{'product_id': int, 'quantity': int}``. The change kind defaults to
    the one derived from the current clock.
    """
    from users.models import User

    from .services import StockLedger

    actor = User.objects.filter(pk=actor_id).first() if actor_id else None
    records = StockLedger.bulk_set(updates, actor=actor, change_kind=change_kind)
    logger.info('apply_scheduled_count_task completed: %d products updated.', len(records))
    return {'updated_count': len(records)}
