"""
Catalog — Serializers

Read and write serializers for Product. Explicit field lists; no __all__.

@file catalog/serializers.py
"""

from decimal import Decimal

from rest_framework import serializers

from .models import Product


class ProductReadSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = [
            'id', 'name', 'description', 'price', 'category', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class ProductWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    category = serializers.CharField(max_length=100)
    is_active = serializers.BooleanField(required=False)


class CategorySerializer(serializers.Serializer):
    category = serializers.CharField(read_only=True)
    product_count = serializers.IntegerField(read_only=True)
