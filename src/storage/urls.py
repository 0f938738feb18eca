"""Routing for storage endpoints."""

from django.urls import path

from .views import PresignedUrlView, UploadView

urlpatterns = [
    path("storage", UploadView.as_view(), name="storage-upload"),
    path("storage/generate-presigned-url", PresignedUrlView.as_view(), name="storage-presign"),
]
