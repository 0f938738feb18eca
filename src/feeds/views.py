"""Feed and tag endpoints."""

import logging
from typing import Any

from django.db.models import Count, Q
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied

from core.permissions import PERMISSION_DENIED, IsAdminOrReadOnly
from core.response import BaseAPIView, api_response, paginate
from .models import Feed, Tag
from .serializers import FeedListSerializer, FeedSerializer, FeedWriteSerializer, TagSerializer

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50


def _feeds():
    return Feed.objects.select_related("owner").prefetch_related("tags")


class FeedListView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):
        """List feeds; ``type`` is normal (default), draft or unlisted."""
        kind = request.query_params.get("type", "normal")
        if kind == "normal":
            queryset = _feeds().listed()
        elif kind in ("draft", "unlisted"):
            if not getattr(request.user, "is_admin", False):
                raise PermissionDenied(PERMISSION_DENIED)
            queryset = _feeds().filter(draft=True) if kind == "draft" else _feeds().published().filter(listed=False)
        else:
            raise NotFound(f"Unknown feed type: {kind}")
        return api_response(paginate(request, queryset, FeedListSerializer, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE))

    def post(self, request):
        """Create a feed owned by the caller."""
        serializer = FeedWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        feed = serializer.save(owner=request.user)
        logger.info("Feed %s created by user %s", feed.pk, request.user.pk)
        return api_response(FeedSerializer(feed).data, status=status.HTTP_201_CREATED)


class FeedDetailView(BaseAPIView):
    permission_classes = [IsAdminOrReadOnly]

    def get(self, request, ident: str):
        """Fetch a feed by numeric id or alias; drafts only for the admin."""
        queryset = _feeds().visible_to(request.user)
        lookup = {"pk": int(ident)} if ident.isdecimal() else {"alias": ident}
        feed = queryset.filter(**lookup).first()
        if feed is None:
            raise NotFound("Feed not found")
        return api_response(FeedSerializer(feed).data)

    def post(self, request, ident: str):
        """Partially update a feed."""
        feed = self._get_for_write(ident)
        serializer = FeedWriteSerializer(feed, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        feed = serializer.save()
        logger.info("Feed %s updated by user %s", feed.pk, request.user.pk)
        return api_response(FeedSerializer(feed).data)

    def delete(self, request, ident: str):
        """Delete a feed and its comments."""
        feed = self._get_for_write(ident)
        feed.delete()
        logger.info("Feed %s deleted by user %s", ident, request.user.pk)
        return api_response(None, status=status.HTTP_200_OK)

    @staticmethod
    def _get_for_write(ident: str) -> Feed:
        if not ident.isdecimal():
            raise NotFound("Feed not found")
        feed = _feeds().filter(pk=int(ident)).first()
        if feed is None:
            raise NotFound("Feed not found")
        return feed


class TagListView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """All tags with the number of published, listed feeds using each."""
        tags = Tag.objects.annotate(
            count=Count("feeds", filter=Q(feeds__draft=False, feeds__listed=True))
        ).order_by("name")
        return api_response(TagSerializer(tags, many=True).data)


class TagDetailView(BaseAPIView):
    permission_classes: list[Any] = []

    # noinspection PyMethodMayBeStatic
    def get(self, request, name: str):
        """A tag with the feeds the caller may see."""
        tag = Tag.objects.filter(name=name).first()
        if tag is None:
            raise NotFound("Tag not found")
        feeds = _feeds().visible_to(request.user).filter(tags=tag)
        if not getattr(request.user, "is_admin", False):
            feeds = feeds.filter(listed=True)
        return api_response({"id": tag.id, "name": tag.name, "feeds": FeedListSerializer(feeds, many=True).data})


__all__ = ["FeedListView", "FeedDetailView", "TagListView", "TagDetailView"]
