"""
Orders — Django Admin Configuration

@file orders/admin.py
"""

from django.contrib import admin

from .models import Order, OrderLine


class OrderLineInline(admin.TabularInline):
    model = OrderLine
    extra = 0
    fields = ('product', 'quantity', 'unit_price', 'line_total')
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = (
        'order_number', 'user', 'delivery_date', 'delivery_slot',
        'status', 'total_amount', 'created_at',
    )
    list_filter = ('status', 'delivery_slot', 'delivery_date')
    search_fields = ('order_number', 'user__email', 'user__name')
    list_select_related = ('user',)
    date_hierarchy = 'created_at'
    readonly_fields = (
        'order_number', 'user', 'status', 'delivery_date', 'delivery_slot',
        'total_amount', 'created_at', 'updated_at',
    )
    raw_id_fields = ('user',)
    inlines = [OrderLineInline]

    def has_delete_permission(self, request, obj=None):
        return False
