"""
Users — Header Authentication

Placeholder authentication: the caller identifies itself with the
``X-User-Id`` and ``X-User-Role`` headers. This is not a security
boundary; replace it with verifiable credentials before exposing the
API publicly.

@file users/authentication.py
"""

import logging

from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed

from .models import User

logger = logging.getLogger('eafoods')

USER_ID_HEADER = 'HTTP_X_USER_ID'
USER_ROLE_HEADER = 'HTTP_X_USER_ROLE'


class HeaderRoleAuthentication(BaseAuthentication):
    """Resolve the request user from X-User-Id / X-User-Role headers."""

    def authenticate(self, request):
        user_id = request.META.get(USER_ID_HEADER)
        role = request.META.get(USER_ROLE_HEADER)
        if not user_id and not role:
            return None
        if not user_id or not role:
            raise AuthenticationFailed('Both X-User-Id and X-User-Role headers are required.')
        if role not in User.RoleChoices.values:
            raise AuthenticationFailed('Invalid user role.')
        try:
            user = User.objects.get(pk=int(user_id), is_active=True)
        except (ValueError, User.DoesNotExist):
            raise AuthenticationFailed('Unknown or inactive user.')
        if user.role != role:
            logger.warning('Role header mismatch for user %s: claimed %s.', user.pk, role)
            raise AuthenticationFailed('Role does not match user.')
        return user, None

    def authenticate_header(self, request):
        return 'X-User-Id'
