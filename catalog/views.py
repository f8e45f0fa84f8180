"""
Catalog — Views

Public product browsing (list, search, filter by category, categories)
and product management for operations managers.

@file catalog/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from users.permissions import IsOpsManagerOrReadOnly

from .models import Product
from .serializers import CategorySerializer, ProductReadSerializer, ProductWriteSerializer
from .services import ProductService


class ProductViewSet(viewsets.ModelViewSet):
    """
    Products: list/retrieve/categories are public and show active products
    only. Create/update/destroy (deactivate) require ops_manager.
    """

    permission_classes = [IsOpsManagerOrReadOnly]
    filterset_fields = ['category']
    search_fields = ['name', 'description']
    ordering_fields = ['created_at', 'name', 'price']
    ordering = ['-created_at']

    def get_queryset(self):
        qs = Product.objects.all()
        user = self.request.user
        if not (user and user.is_authenticated and (user.is_superuser or user.is_ops_manager)):
            qs = qs.filter(is_active=True)
        return qs

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return ProductReadSerializer
        return ProductWriteSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('is_active', None)
        product = ProductService.create_product(actor=request.user, **data)
        return Response(ProductReadSerializer(product).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        product = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        product = ProductService.update_product(
            product_id=product.pk, actor=request.user, **serializer.validated_data,
        )
        return Response(ProductReadSerializer(product).data)

    def destroy(self, request, *args, **kwargs):
        product = ProductService.deactivate_product(product_id=self.get_object().pk, actor=request.user)
        return Response(ProductReadSerializer(product).data)

    @action(detail=False, methods=['get'], url_path='categories', permission_classes=[AllowAny])
    def categories(self, request):
        return Response(CategorySerializer(ProductService.categories(), many=True).data)
