"""Comment model attached to a feed."""

from django.conf import settings
from django.db import models


class Comment(models.Model):
    """A signed-in reader's comment on a feed."""

    feed = models.ForeignKey("feeds.Feed", on_delete=models.CASCADE, related_name="comments")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="comments")
    content = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id} on {self.feed_id}"


__all__ = ["Comment"]
