"""Record of every object written to the bucket."""

from django.conf import settings
from django.db import models


class StoredObject(models.Model):
    """An immutable upload, keyed by the SHA-1 of its bytes plus extension."""

    key = models.CharField(max_length=512, unique=True)
    sha1 = models.CharField(max_length=40, db_index=True)
    size = models.PositiveBigIntegerField()
    content_type = models.CharField(max_length=255, blank=True)
    original_name = models.CharField(max_length=255, blank=True)
    uploader = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="uploads",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.key


__all__ = ["StoredObject"]
