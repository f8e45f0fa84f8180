"""
Stock — Serializers

Stock records, change history, and the payloads of stock operations.

@file stock/serializers.py
"""

from rest_framework import serializers

from catalog.models import Product

from .models import RESTOCK_KINDS, ChangeKind, StockChangeEntry, StockRecord


class StockRecordReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    category = serializers.CharField(source='product.category', read_only=True)
    price = serializers.DecimalField(source='product.price', max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = StockRecord
        fields = [
            'id', 'product', 'product_name', 'category', 'price',
            'quantity', 'updated_by', 'updated_at',
        ]
        read_only_fields = fields


class LowStockProductSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(source='pk', read_only=True)
    product_name = serializers.CharField(source='name', read_only=True)
    quantity = serializers.IntegerField(source='stock_quantity', read_only=True)

    class Meta:
        model = Product
        fields = ['product_id', 'product_name', 'category', 'price', 'quantity']
        read_only_fields = fields


class ProductStockSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True, allow_null=True)
    updated_by = serializers.IntegerField(read_only=True, allow_null=True)


class StockChangeEntrySerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    actor_name = serializers.CharField(source='actor.name', read_only=True)
    change_kind_display = serializers.CharField(source='get_change_kind_display', read_only=True)

    class Meta:
        model = StockChangeEntry
        fields = [
            'id', 'product', 'product_name', 'old_quantity', 'new_quantity',
            'actor', 'actor_name', 'change_kind', 'change_kind_display',
            'reference', 'created_at',
        ]
        read_only_fields = fields


RESTOCK_KIND_CHOICES = [(kind.value, kind.label) for kind in ChangeKind if kind in RESTOCK_KINDS]


class StockItemSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class AvailabilityRequestSerializer(serializers.Serializer):
    items = StockItemSerializer(many=True, allow_empty=False)


class StockSetSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=0)
    change_kind = serializers.ChoiceField(choices=RESTOCK_KIND_CHOICES, required=False)


class StockBulkEntrySerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=0)


class StockBulkSetSerializer(serializers.Serializer):
    updates = StockBulkEntrySerializer(many=True, allow_empty=False)
    change_kind = serializers.ChoiceField(choices=RESTOCK_KIND_CHOICES, required=False)


class StockInitializeSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=0)
