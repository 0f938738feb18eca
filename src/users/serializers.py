"""Serializers for user profiles."""

from django.contrib.auth import get_user_model
from rest_framework import serializers

User = get_user_model()


class UserSummarySerializer(serializers.ModelSerializer):
    """Author block embedded in feeds and comments."""

    class Meta:
        model = User
        fields = ["id", "username", "avatar"]
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    """Caller identity returned by ``GET /user/profile``."""

    permission = serializers.BooleanField(source="is_admin", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = User
        fields = ["id", "username", "avatar", "permission", "createdAt", "updatedAt"]
        read_only_fields = fields


__all__ = ["UserSummarySerializer", "UserProfileSerializer"]
