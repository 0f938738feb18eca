"""Regenerate feed summaries from their Markdown bodies."""

from django.core.management.base import BaseCommand

from feeds.models import Feed
from feeds.services import make_summary


class Command(BaseCommand):
    """Management command to refill feed summaries."""

    help = (
        "Regenerate summaries for feeds whose summary is blank. "
        "Use --all to rebuild every summary, --dry-run to only report."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--all",
            action="store_true",
            dest="rebuild_all",
            help="Rebuild summaries for every feed, not only blank ones.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the feeds that would change without saving them.",
        )

    def handle(self, *args, **options):
        """Entrypoint for the management command."""
        feeds = Feed.objects.all()
        if not options.get("rebuild_all"):
            feeds = feeds.filter(summary="")

        changed = 0
        for feed in feeds.iterator():
            summary = make_summary(feed.content)
            if summary == feed.summary:
                continue
            changed += 1
            if options.get("dry_run"):
                self.stdout.write(f"Would update feed {feed.pk}: {summary!r}")
                continue
            # update() skips auto_now so the feed keeps its edit timestamp.
            Feed.objects.filter(pk=feed.pk).update(summary=summary)

        verb = "would be updated" if options.get("dry_run") else "updated"
        self.stdout.write(self.style.SUCCESS(f"{changed} feed summaries {verb}."))
