"""Feed-level helpers: summary generation and tag assignment."""

from django.conf import settings

from core.text import auto_summary, first_sentence
from .models import Feed, Tag


def make_summary(content: str) -> str:
    """Summarise a feed body with the configured strategy."""
    if getattr(settings, "SUMMARY_STRATEGY", "truncate") == "first_sentence":
        return first_sentence(content)
    return auto_summary(content, limit=settings.SUMMARY_LENGTH)


def set_feed_tags(feed: Feed, names: list[str]) -> None:
    """Replace the feed's tags, creating missing Tag rows."""
    tags = [Tag.objects.get_or_create(name=name)[0] for name in names]
    feed.tags.set(tags)


__all__ = ["make_summary", "set_feed_tags"]
