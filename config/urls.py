"""
EA Foods — Root URL Configuration

All API endpoints are namespaced under /api/v1/.
The DRF browsable API is available for route inspection in development.

@file config/urls.py
"""

from django.contrib import admin
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.reverse import reverse

admin.site.site_header = 'EA Foods Administration'
admin.site.site_title = 'EA Foods'
admin.site.index_title = 'Pre-order operations'


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request, format=None):
    """EA Foods API v1 endpoint directory."""
    return Response({
        'catalog': {
            'products': reverse('api-v1:catalog:product-list', request=request, format=format),
            'categories': reverse('api-v1:catalog:product-categories', request=request, format=format),
        },
        'stock': {
            'list': reverse('api-v1:stock:stock-list', request=request, format=format),
            'check_availability': reverse('api-v1:stock:stock-check-availability', request=request, format=format),
            'low_stock': reverse('api-v1:stock:stock-low-stock', request=request, format=format),
        },
        'orders': {
            'list': reverse('api-v1:orders:order-list', request=request, format=format),
            'delivery_slots': reverse('api-v1:orders:order-delivery-slots', request=request, format=format),
        },
        'users': reverse('api-v1:users:user-list', request=request, format=format),
    })


api_v1_patterns = [
    path('', api_root, name='api-root'),
    path('catalog/', include('catalog.urls', namespace='catalog')),
    path('stock/', include('stock.urls', namespace='stock')),
    path('orders/', include('orders.urls', namespace='orders')),
    path('users/', include('users.urls', namespace='users')),
]

urlpatterns = [
    path('admin/', admin.site.urls),

    # DRF session auth (powers the "Log in" button on the browsable API)
    path('api/auth/', include('rest_framework.urls', namespace='rest_framework')),

    # Versioned API
    path('api/v1/', include((api_v1_patterns, 'api-v1'))),
]
