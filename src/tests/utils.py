"""Shared helpers for tests (user/feed creation, fake Redis)."""

from __future__ import annotations

from typing import Dict
from unittest import mock

from django.test import TestCase
from rest_framework.test import APIClient

from feeds.models import Feed
from feeds.services import set_feed_tags
from users.models import User
from users.services import TokenService


class FakeRedis:
    """Minimal Redis stub supporting the commands used by TokenService."""

    def __init__(self):
        self._store: Dict[str, str] = {}

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        """Mimic Redis SETEX; TTL is ignored in tests, value stored in-memory."""
        self._store[key] = value

    def get(self, key: str):
        """Return stored value for key or None, matching Redis GET semantics."""
        return self._store.get(key)


class FakeRedisTestCase(TestCase):
    """TestCase with the Redis clients patched to an in-memory fake."""

    @classmethod
    def setUpClass(cls):
        """Patch Redis clients to use in-memory fake for all tests."""
        super().setUpClass()
        cls.fake_redis = FakeRedis()
        cls.patchers = [
            mock.patch("core.redis_client.get_redis_client", return_value=cls.fake_redis),
            mock.patch("users.services.get_redis_client", return_value=cls.fake_redis),
        ]
        for patcher in cls.patchers:
            patcher.start()

    @classmethod
    def tearDownClass(cls):
        """Stop Redis patches after all tests complete."""
        for patcher in cls.patchers:
            patcher.stop()
        super().tearDownClass()


def create_user(openid: str, admin: bool = False, **extra) -> User:
    """Create a GitHub-identified user, optionally holding the admin level."""

    if admin:
        return User.objects.create_superuser(openid, **extra)
    return User.objects.create_user(openid, **extra)


def auth_client(user: User) -> APIClient:
    """APIClient sending a fresh bearer session token for ``user``."""

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {TokenService.generate_token(user)}")
    return client


def create_feed(owner: User, tags=(), **fields) -> Feed:
    """Create a feed directly in the database."""

    fields.setdefault("title", "Hello")
    fields.setdefault("content", "Hello world.")
    feed = Feed.objects.create(owner=owner, **fields)
    set_feed_tags(feed, list(tags))
    return feed
