"""Feed (blog post) and Tag models."""

from django.conf import settings
from django.db import models
from django.utils import timezone


class Tag(models.Model):
    """A tag name shared by any number of feeds."""

    name = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class FeedQuerySet(models.QuerySet):
    def published(self):
        return self.filter(draft=False)

    def listed(self):
        return self.published().filter(listed=True)

    def visible_to(self, user):
        """Admins see everything; everyone else only non-draft feeds."""
        if getattr(user, "is_admin", False):
            return self
        return self.published()


class Feed(models.Model):
    """A single article, published or draft, owned by one user."""

    title = models.CharField(max_length=255, blank=True)
    content = models.TextField(blank=True)
    summary = models.TextField(blank=True)
    alias = models.CharField(max_length=255, unique=True, null=True, blank=True)
    draft = models.BooleanField(default=False)
    listed = models.BooleanField(default=True)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="feeds")
    tags = models.ManyToManyField(Tag, related_name="feeds", blank=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    objects = FeedQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.title

    @property
    def canonical_path(self) -> str:
        """Path of the feed's page on the site, preferring the alias."""
        return f"/{self.alias}" if self.alias else f"/feed/{self.pk}"


__all__ = ["Feed", "Tag"]
