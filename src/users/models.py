"""Custom User model for accounts created through GitHub sign-in.

Accounts never carry a usable password. The ``permission`` level decides
whether the user may write feeds and upload files; only the first registrant
receives the admin level.
"""

from typing import ClassVar

from django.contrib.auth.models import AbstractBaseUser
from django.db import models

from .managers import UserManager


class User(AbstractBaseUser):
    """User identified by the OAuth provider's subject id."""

    PERMISSION_NONE = 0
    PERMISSION_ADMIN = 1
    PERMISSION_CHOICES = [
        (PERMISSION_NONE, "None"),
        (PERMISSION_ADMIN, "Admin"),
    ]

    openid = models.CharField(max_length=64, unique=True)
    username = models.CharField(max_length=150)
    avatar = models.URLField(max_length=500, blank=True)
    permission = models.PositiveSmallIntegerField(choices=PERMISSION_CHOICES, default=PERMISSION_NONE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "openid"
    REQUIRED_FIELDS: ClassVar[list[str]] = []

    objects = UserManager()

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.username

    @property
    def is_admin(self) -> bool:
        return self.permission == self.PERMISSION_ADMIN


__all__ = ["User"]
