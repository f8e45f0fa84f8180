"""
Users — Models

Custom User model keyed by email with a single business role. Roles
decide who may place orders (customer, TSU, SR) and who runs
operations (ops manager).

@file users/models.py
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import TimestampMixin
from users.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin, TimestampMixin):
    """
    A customer or staff member of the pre-order business.

    TSU (territory sales unit) and SR (sales representative) staff place
    orders on behalf of shops; ops managers maintain catalog and stock.
    """

    class RoleChoices(models.TextChoices):
        CUSTOMER = 'customer', _('Customer')
        TSU = 'tsu', _('Territory sales unit')
        SR = 'sr', _('Sales representative')
        OPS_MANAGER = 'ops_manager', _('Operations manager')

    email = models.EmailField(_('email'), unique=True)
    name = models.CharField(_('name'), max_length=150)
    role = models.CharField(
        _('role'), max_length=16,
        choices=RoleChoices.choices, default=RoleChoices.CUSTOMER,
        db_index=True,
    )

    is_staff = models.BooleanField(_('staff status'), default=False)
    is_active = models.BooleanField(_('active'), default=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['role', 'is_active'], name='user_role_active_idx'),
        ]

    def __str__(self):
        return f'{self.name} ({self.role})'

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(' ')[0] if self.name else self.email

    def has_role(self, *roles: str) -> bool:
        return self.role in roles

    @property
    def can_place_orders(self) -> bool:
        return self.role in ORDERING_ROLES

    @property
    def is_ops_manager(self) -> bool:
        return self.role == self.RoleChoices.OPS_MANAGER


ORDERING_ROLES = frozenset({
    User.RoleChoices.CUSTOMER,
    User.RoleChoices.TSU,
    User.RoleChoices.SR,
})
