"""
Orders — Permissions

Order owners may read and cancel their own orders; operations managers
may act on any order.

@file orders/permissions.py
"""

from rest_framework.permissions import BasePermission


class IsOrderOwnerOrOpsManager(BasePermission):

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated)

    def has_object_permission(self, request, view, obj):
        user = request.user
        if user.is_superuser or user.is_ops_manager:
            return True
        return obj.user_id == user.pk
