"""App configuration for feeds, tags and the RSS endpoint."""

from django.apps import AppConfig


class FeedsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "feeds"
