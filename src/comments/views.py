"""Comment endpoints: list/create under a feed, delete by id."""

import logging
from typing import Any

from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.permissions import SAFE_METHODS, IsAuthenticated

from core.permissions import IsAuthorOrAdmin
from core.response import BaseAPIView, api_response
from feeds.models import Feed
from .models import Comment
from .serializers import CommentSerializer

logger = logging.getLogger(__name__)


class FeedCommentsView(BaseAPIView):
    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return []
        return [IsAuthenticated()]

    def get(self, request, feed_id: int):
        """Comments of a visible feed, oldest first."""
        feed = self._get_feed(request, feed_id)
        comments = Comment.objects.filter(feed=feed).select_related("user")
        return api_response(CommentSerializer(comments, many=True).data)

    def post(self, request, feed_id: int):
        """Add a comment as the caller."""
        feed = self._get_feed(request, feed_id)
        serializer = CommentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        comment = serializer.save(feed=feed, user=request.user)
        logger.info("Comment %s added to feed %s", comment.pk, feed.pk)
        return api_response(CommentSerializer(comment).data, status=status.HTTP_201_CREATED)

    @staticmethod
    def _get_feed(request, feed_id: int) -> Feed:
        feed = Feed.objects.visible_to(request.user).filter(pk=feed_id).first()
        if feed is None:
            raise NotFound("Feed not found")
        return feed


class CommentDetailView(BaseAPIView):
    permission_classes: list[Any] = [IsAuthorOrAdmin]

    def delete(self, request, comment_id: int):
        """Delete a comment; only its author or the admin may."""
        if not request.user.is_authenticated:
            raise NotAuthenticated()
        comment = Comment.objects.filter(pk=comment_id).first()
        if comment is None:
            raise NotFound("Comment not found")
        self.check_object_permissions(request, comment)
        comment.delete()
        return api_response(None)


__all__ = ["FeedCommentsView", "CommentDetailView"]
