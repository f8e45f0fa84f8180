"""
Users — URL Configuration

CRUD ViewSet routed under /api/v1/users/.

@file users/urls.py
"""

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from .views import UserViewSet

app_name = 'users'

router = SimpleRouter()
router.register('', UserViewSet, basename='user')

urlpatterns = [
    path('', include(router.urls)),
]
