"""RSS 2.0 feed of the newest published, listed feeds."""

from django.conf import settings
from django.contrib.syndication.views import Feed as SyndicationFeed

from core.markdown import render_markdown
from .models import Feed


class LatestFeedsRSS(SyndicationFeed):
    """Items link to the site's canonical page, not to the API."""

    def title(self):
        return settings.SITE_NAME

    def link(self):
        return f"{settings.SITE_URL}/"

    def description(self):
        return settings.SITE_DESCRIPTION

    def items(self):
        return (
            Feed.objects.listed()
            .select_related("owner")
            .prefetch_related("tags")[: settings.RSS_ITEM_LIMIT]
        )

    def item_title(self, item):
        return item.title

    def item_description(self, item):
        return render_markdown(item.content)

    def item_link(self, item):
        return f"{settings.SITE_URL}{item.canonical_path}"

    def item_guid(self, item):
        return f"{settings.SITE_URL}/feed/{item.pk}"

    def item_author_name(self, item):
        return item.owner.username

    def item_pubdate(self, item):
        return item.created_at

    def item_updateddate(self, item):
        return item.updated_at

    def item_categories(self, item):
        return [tag.name for tag in item.tags.all()]
