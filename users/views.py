"""
Users — Views

User management CRUD ViewSet, restricted to operations managers.

@file users/views.py
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import User
from .permissions import IsOpsManager
from .serializers import UserReadSerializer, UserWriteSerializer
from .services import UserService


class UserViewSet(viewsets.ModelViewSet):
    """CRUD for user accounts. Destroy deactivates instead of deleting."""

    permission_classes = [IsOpsManager]
    filterset_fields = ['role', 'is_active']
    search_fields = ['email', 'name']
    ordering_fields = ['created_at', 'name', 'role']
    ordering = ['-created_at']

    def get_queryset(self):
        return User.objects.all()

    def get_serializer_class(self):
        if self.action in ('list', 'retrieve'):
            return UserReadSerializer
        return UserWriteSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.create_user(**serializer.validated_data)
        return Response(UserReadSerializer(user).data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        user = self.get_object()
        serializer = self.get_serializer(data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)
        user = UserService.update_user(user_id=user.pk, **serializer.validated_data)
        return Response(UserReadSerializer(user).data)

    def destroy(self, request, *args, **kwargs):
        user = UserService.deactivate_user(user_id=self.get_object().pk)
        return Response(UserReadSerializer(user).data)

    @action(detail=False, methods=['get'], url_path='statistics')
    def statistics(self, request):
        return Response(UserService.statistics())
