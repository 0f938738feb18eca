"""Routing for comment endpoints."""

from django.urls import path

from .views import CommentDetailView, FeedCommentsView

urlpatterns = [
    path("feed/<int:feed_id>/comments", FeedCommentsView.as_view(), name="feed-comments"),
    path("comment/<int:comment_id>", CommentDetailView.as_view(), name="comment-detail"),
]
