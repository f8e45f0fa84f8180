"""
Users — Django Admin Configuration

Admin for User accounts with role badges.

@file users/admin.py
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('email', 'name', 'role_badge', 'is_active', 'is_staff', 'created_at')
    list_filter = ('role', 'is_active', 'is_staff', 'is_superuser')
    search_fields = ('email', 'name')
    readonly_fields = ('id', 'created_at', 'updated_at', 'last_login')
    date_hierarchy = 'created_at'
    list_per_page = 30
    ordering = ('-created_at',)

    fieldsets = (
        (None, {'fields': ('id', 'email', 'password')}),
        (_('Profile'), {'fields': ('name', 'role')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Dates'), {'fields': ('last_login', 'created_at', 'updated_at'), 'classes': ('collapse',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )

    @admin.display(description=_('Role'))
    def role_badge(self, obj):
        colors = {
            'customer': '#3b82f6',
            'tsu': '#8b5cf6',
            'sr': '#06b6d4',
            'ops_manager': '#eab308',
        }
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            colors.get(obj.role, '#6b7280'), obj.get_role_display(),
        )
