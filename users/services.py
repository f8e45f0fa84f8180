"""
Users — Service Layer

User account management. No HTTP context: services receive plain
Python arguments and raise typed exceptions.

@file users/services.py
"""

import logging

from django.db import transaction
from django.db.models import Count

from core.exceptions import DuplicateResourceError, ResourceNotFoundError

from .models import User

logger = logging.getLogger('eafoods')


class UserService:
    """CRUD and role statistics for User accounts."""

    @staticmethod
    @transaction.atomic
    def create_user(*, email: str, name: str, role: str, password: str | None = None, **extra_fields) -> User:
        email = User.objects.normalize_email(email)
        if User.objects.filter(email__iexact=email).exists():
            raise DuplicateResourceError(detail=f'Email {email} already registered.')
        user = User.objects.create_user(
            email=email, password=password, name=name, role=role, **extra_fields,
        )
        logger.info('User %s created with role %s.', user.pk, role)
        return user

    @staticmethod
    @transaction.atomic
    def update_user(*, user_id, password: str | None = None, **fields) -> User:
        try:
            user = User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise ResourceNotFoundError(detail='User not found.')

        email = fields.get('email')
        if email and User.objects.filter(email__iexact=email).exclude(pk=user.pk).exists():
            raise DuplicateResourceError(detail=f'Email {email} already registered.')

        for field, value in fields.items():
            if hasattr(user, field) and field not in ('id', 'pk'):
                setattr(user, field, value)
        if password:
            user.set_password(password)
        user.save()
        return user

    @staticmethod
    @transaction.atomic
    def deactivate_user(*, user_id) -> User:
        try:
            user = User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise ResourceNotFoundError(detail='User not found.')
        user.is_active = False
        user.save(update_fields=['is_active', 'updated_at'])
        logger.info('User %s deactivated.', user.pk)
        return user

    @staticmethod
    def statistics() -> dict:
        counts = dict(
            User.objects.filter(is_active=True)
            .values('role')
            .order_by()
            .annotate(n=Count('id'))
            .values_list('role', 'n')
        )
        return {
            'total_users': sum(counts.values()),
            'by_role': [
                {'role': role, 'count': counts.get(role, 0)}
                for role in User.RoleChoices.values
            ],
        }
