"""Storage endpoints: upload and presigned download URLs."""

from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated

from core.response import BaseAPIView, api_response
from .services import presigned_url, public_url, store_upload


class UploadView(BaseAPIView):
    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    # noinspection PyMethodMayBeStatic
    def post(self, request):
        """Store the ``file`` part and return its public URL.

        ``key`` is the client's file name; only its extension is kept.
        """
        upload = request.data.get("file")
        if upload is None or not hasattr(upload, "chunks"):
            raise ValidationError("file is required")
        key = request.data.get("key") or upload.name or ""
        stored, _ = store_upload(upload, key, uploader=request.user)
        return api_response(public_url(stored.key))


class PresignedUrlView(BaseAPIView):
    permission_classes = [IsAuthenticated]

    # noinspection PyMethodMayBeStatic
    def get(self, request):
        """Return ``{"url": ...}`` granting temporary read access."""
        object_key = request.query_params.get("objectKey")
        if not object_key:
            raise ValidationError("objectKey is required")
        return api_response({"url": presigned_url(object_key)})


__all__ = ["UploadView", "PresignedUrlView"]
