"""
Users — Serializers

Read and write serializers for User accounts.

@file users/serializers.py
"""

from rest_framework import serializers

from .models import User


class UserReadSerializer(serializers.ModelSerializer):
    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'name', 'role', 'role_display', 'is_active',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class UserWriteSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150)
    role = serializers.ChoiceField(choices=User.RoleChoices.choices)
    password = serializers.CharField(write_only=True, required=False, allow_blank=False, min_length=10)
    is_active = serializers.BooleanField(required=False)
