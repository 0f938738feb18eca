"""Routing for feed, tag and RSS endpoints."""

from django.urls import path

from .rss import LatestFeedsRSS
from .views import FeedDetailView, FeedListView, TagDetailView, TagListView

urlpatterns = [
    path("feed", FeedListView.as_view(), name="feed-list"),
    path("feed/<str:ident>", FeedDetailView.as_view(), name="feed-detail"),
    path("tag", TagListView.as_view(), name="tag-list"),
    path("tag/<str:name>", TagDetailView.as_view(), name="tag-detail"),
    path("rss.xml", LatestFeedsRSS(), name="rss"),
]
