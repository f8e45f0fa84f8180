"""
Orders — Views

DRF ViewSet for orders: create, list, retrieve and workflow actions
(cancel, status). Statistics and delivery slots.

@file orders/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from users.permissions import CanPlaceOrder, IsOpsManager

from .delivery import delivery_slots
from .permissions import IsOrderOwnerOrOpsManager
from .serializers import (
    DeliverySlotSerializer,
    OrderCreateSerializer,
    OrderReadSerializer,
    OrderStatusSerializer,
)
from .services import OrderQueryService, OrderService


class OrderViewSet(
    mixins.CreateModelMixin,
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """
    Orders: customers, TSUs and SRs create; everyone lists their own
    orders while ops managers see all. Workflow: cancel, status.
    """

    permission_classes = [IsOrderOwnerOrOpsManager]
    filterset_fields = ['status', 'user', 'delivery_date', 'delivery_slot']
    search_fields = ['order_number']
    ordering_fields = ['created_at', 'delivery_date', 'total_amount', 'status']
    ordering = ['-created_at']
    lookup_value_regex = r'\d+'

    def get_permissions(self):
        if self.action == 'create':
            return [CanPlaceOrder()]
        return super().get_permissions()

    def get_queryset(self):
        qs = OrderQueryService.all()
        user = self.request.user
        if self.action == 'list' and not (user.is_superuser or user.is_ops_manager):
            qs = qs.filter(user=user)
        return qs

    def get_serializer_class(self):
        if self.action == 'create':
            return OrderCreateSerializer
        if self.action == 'set_status':
            return OrderStatusSerializer
        return OrderReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = OrderService.create_order(
            user_id=request.user.pk,
            delivery_slot=serializer.validated_data['delivery_slot'],
            items=serializer.validated_data['items'],
            delivery_date=serializer.validated_data.get('delivery_date'),
            force_after_cutoff=serializer.validated_data['force_after_cutoff'],
            actor=request.user,
        )
        order = OrderQueryService.get_order(order.pk)
        return Response(OrderReadSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='cancel')
    def cancel(self, request, pk=None):
        order = self.get_object()
        order = OrderService.cancel_order(order_id=order.pk, actor=request.user)
        return Response(OrderReadSerializer(OrderQueryService.get_order(order.pk)).data)

    @action(
        detail=True,
        methods=['post', 'patch'],
        url_path='status',
        permission_classes=[IsOpsManager],
    )
    def set_status(self, request, pk=None):
        ser = OrderStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        order = OrderService.update_status(
            order_id=pk,
            new_status=ser.validated_data['status'],
            actor=request.user,
        )
        return Response(OrderReadSerializer(OrderQueryService.get_order(order.pk)).data)

    @action(detail=False, methods=['get'], url_path='statistics', permission_classes=[IsOpsManager])
    def statistics(self, request):
        return Response(OrderQueryService.statistics())

    @action(detail=False, methods=['get'], url_path='delivery-slots', permission_classes=[AllowAny])
    def delivery_slots(self, request):
        return Response(DeliverySlotSerializer(delivery_slots(), many=True).data)
