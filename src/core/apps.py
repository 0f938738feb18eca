"""App configuration for the shared inkfeed utilities."""

from django.apps import AppConfig


class CoreConfig(AppConfig):
    """Core app holds settings, URLs, middleware and the text utilities."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "core"
