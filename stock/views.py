"""
Stock — Views

Stock read endpoints and ledger operations (set, bulk set, initialize,
availability check). Writes are restricted to operations managers.

@file stock/views.py
"""

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.exceptions import BusinessRuleViolation
from users.permissions import IsOpsManager

from .serializers import (
    AvailabilityRequestSerializer,
    LowStockProductSerializer,
    ProductStockSerializer,
    StockBulkSetSerializer,
    StockChangeEntrySerializer,
    StockInitializeSerializer,
    StockRecordReadSerializer,
    StockSetSerializer,
)
from .services import StockLedger, StockQueryService


class StockViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    list: all stock of active products (ops).
    retrieve: stock of one product by product id (authenticated).
    """

    serializer_class = StockRecordReadSerializer
    filterset_fields = ['product__category']
    search_fields = ['product__name']
    ordering_fields = ['quantity', 'updated_at']
    ordering = ['-updated_at']
    lookup_value_regex = r'\d+'

    AUTHENTICATED_ACTIONS = ('retrieve', 'check_availability')

    def get_permissions(self):
        if self.action in self.AUTHENTICATED_ACTIONS:
            return [IsAuthenticated()]
        return [IsOpsManager()]

    def get_queryset(self):
        return StockQueryService.all_active()

    def retrieve(self, request, pk=None):
        return Response(ProductStockSerializer(StockQueryService.for_product(pk)).data)

    @action(detail=True, methods=['get'], url_path='history')
    def history(self, request, pk=None):
        entries = StockQueryService.history(pk)
        page = self.paginate_queryset(entries)
        if page is not None:
            return self.get_paginated_response(StockChangeEntrySerializer(page, many=True).data)
        return Response(StockChangeEntrySerializer(entries, many=True).data)

    @action(detail=False, methods=['post', 'put'], url_path='set')
    def set_quantity(self, request):
        ser = StockSetSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = StockLedger.set_quantity(
            ser.validated_data['product_id'],
            ser.validated_data['quantity'],
            actor=request.user,
            change_kind=ser.validated_data.get('change_kind'),
        )
        return Response(StockRecordReadSerializer(record).data)

    @action(detail=False, methods=['post', 'put'], url_path='bulk-set')
    def bulk_set(self, request):
        ser = StockBulkSetSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        records = StockLedger.bulk_set(
            ser.validated_data['updates'],
            actor=request.user,
            change_kind=ser.validated_data.get('change_kind'),
        )
        return Response(StockRecordReadSerializer(records, many=True).data)

    @action(detail=False, methods=['post'], url_path='initialize')
    def initialize(self, request):
        ser = StockInitializeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        record = StockLedger.initialize(
            ser.validated_data['product_id'],
            ser.validated_data['quantity'],
            actor=request.user,
        )
        return Response(StockRecordReadSerializer(record).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], url_path='check-availability')
    def check_availability(self, request):
        ser = AvailabilityRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(StockLedger.check_availability(ser.validated_data['items']))

    @action(detail=False, methods=['get'], url_path='low-stock')
    def low_stock(self, request):
        threshold = request.query_params.get('threshold')
        if threshold is not None:
            try:
                threshold = int(threshold)
            except ValueError:
                raise BusinessRuleViolation(detail='threshold must be an integer.')
        products = StockQueryService.low_stock(threshold)
        return Response(LowStockProductSerializer(products, many=True).data)

    @action(detail=False, methods=['get'], url_path='statistics')
    def statistics(self, request):
        return Response(StockQueryService.statistics())
