"""
Orders — Serializers

Read serializers for orders and lines, plus the payloads of order
creation and status changes. Explicit field lists; no __all__.

@file orders/serializers.py
"""

from rest_framework import serializers

from .models import Order, OrderLine


class OrderLineReadSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)
    product_name = serializers.CharField(source='product.name', read_only=True)

    class Meta:
        model = OrderLine
        fields = ['product_id', 'product_name', 'quantity', 'unit_price', 'line_total']
        read_only_fields = fields


class OrderReadSerializer(serializers.ModelSerializer):
    user_id = serializers.IntegerField(read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    lines = OrderLineReadSerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'user_id', 'user_name',
            'delivery_date', 'delivery_slot', 'status', 'status_display',
            'total_amount', 'lines', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderItemWriteSerializer(serializers.Serializer):
    product_id = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1)


class OrderCreateSerializer(serializers.Serializer):
    delivery_slot = serializers.ChoiceField(choices=Order.DeliverySlotChoices.choices)
    delivery_date = serializers.DateField(required=False, allow_null=True)
    items = OrderItemWriteSerializer(many=True)
    force_after_cutoff = serializers.BooleanField(default=False)

    def validate_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one item is required.')
        return value


class OrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.StatusChoices.choices)


class DeliverySlotSerializer(serializers.Serializer):
    slot = serializers.CharField(read_only=True)
    label = serializers.CharField(read_only=True)
    time_range = serializers.CharField(read_only=True)
    available = serializers.BooleanField(read_only=True)
