"""
Stock — Django Admin Configuration

Stock records are read-mostly; change history is fully read-only.

@file stock/admin.py
"""

from django.contrib import admin

from .models import StockChangeEntry, StockRecord


@admin.register(StockRecord)
class StockRecordAdmin(admin.ModelAdmin):
    list_display = ('product', 'quantity', 'updated_by', 'updated_at')
    search_fields = ('product__name',)
    list_filter = ('product__category',)
    list_select_related = ('product', 'updated_by')
    readonly_fields = ('product', 'quantity', 'updated_by', 'updated_at')
    raw_id_fields = ('product',)

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockChangeEntry)
class StockChangeEntryAdmin(admin.ModelAdmin):
    list_display = ('created_at', 'product', 'change_kind', 'old_quantity', 'new_quantity', 'actor', 'reference')
    list_filter = ('change_kind', 'created_at')
    search_fields = ('product__name', 'reference')
    list_select_related = ('product', 'actor')
    date_hierarchy = 'created_at'
    show_full_result_count = False

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
