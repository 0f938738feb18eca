"""App configuration for user accounts and GitHub sign-in."""

from django.apps import AppConfig


class UsersConfig(AppConfig):
    """Users app holds the custom User model, session tokens and OAuth views."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "users"
