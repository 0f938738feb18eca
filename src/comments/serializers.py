"""Serializers for comments."""

from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .models import Comment

MAX_COMMENT_LENGTH = 5000


class CommentSerializer(serializers.ModelSerializer):
    user = UserSummarySerializer(read_only=True)
    content = serializers.CharField(max_length=MAX_COMMENT_LENGTH, trim_whitespace=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Comment
        fields = ["id", "content", "user", "createdAt", "updatedAt"]
        read_only_fields = ["id", "user", "createdAt", "updatedAt"]


__all__ = ["CommentSerializer"]
