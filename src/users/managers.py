"""User manager enforcing the single-admin registration policy."""

import logging

from django.conf import settings
from django.contrib.auth.base_user import BaseUserManager
from django.db import transaction

from .exceptions import RegistrationClosed

logger = logging.getLogger(__name__)


class UserManager(BaseUserManager):
    """Create users identified by their OAuth subject id (``openid``)."""

    use_in_migrations = True

    def create_user(self, openid: str, username: str = "", avatar: str = "", **extra_fields):
        """Create a user without a usable password; sign-in happens via OAuth."""
        if not openid:
            raise ValueError("The openid must be set")
        user = self.model(openid=str(openid), username=username or str(openid), avatar=avatar, **extra_fields)
        user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, openid: str, username: str = "", avatar: str = "", **extra_fields):
        """Create a user holding the admin permission level."""
        extra_fields["permission"] = self.model.PERMISSION_ADMIN
        return self.create_user(openid, username, avatar, **extra_fields)

    def sign_in_from_provider(self, openid: str, username: str, avatar: str):
        """Return the user for an OAuth identity, registering it if allowed.

        - A known ``openid`` signs in unchanged; locally edited names/avatars
          are not overwritten by the provider profile.
        - The very first registrant becomes the admin.
        - Once any user exists, new identities are refused unless
          ``settings.OPEN_REGISTRATION`` is enabled, in which case they are
          created without permission.
        """
        with transaction.atomic():
            existing = self.filter(openid=openid).first()
            if existing is not None:
                return existing

            if not self.exists():
                logger.info("Registering first user %s as admin", openid)
                return self.create_superuser(openid, username, avatar)

            if not getattr(settings, "OPEN_REGISTRATION", False):
                logger.warning("Refused registration for %s: registration is closed", openid)
                raise RegistrationClosed()

            return self.create_user(openid, username, avatar)


__all__ = ["UserManager"]
