"""
Users — DRF Permission Classes

Role-based permission checks for ViewSets.

@file users/permissions.py
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class HasRole(BasePermission):
    """
    Checks that the user holds one of the roles listed in
    ``view.required_roles``.

    Usage::

        class MyView(APIView):
            permission_classes = [IsAuthenticated, HasRole]
            required_roles = ['ops_manager']
    """

    def has_permission(self, request, view):
        required = getattr(view, 'required_roles', [])
        if not required:
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if user.is_superuser:
            return True
        return user.has_role(*required)


class IsOpsManager(BasePermission):
    """Shortcut: user must be superuser or hold the ops_manager role."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_superuser or user.is_ops_manager


class IsOpsManagerOrReadOnly(BasePermission):
    """Reads are public; writes require the ops_manager role."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_superuser or user.is_ops_manager


class CanPlaceOrder(BasePermission):
    """Customers, TSUs and SRs place orders."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.can_place_orders
