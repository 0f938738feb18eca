"""Tests for content-addressed uploads and presigned URLs (boto3 mocked)."""

from __future__ import annotations

import hashlib
from unittest import mock

from botocore.exceptions import ClientError
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, override_settings
from rest_framework.test import APIClient

from storage.models import StoredObject
from storage.services import content_key
from tests.utils import FakeRedisTestCase, auth_client, create_user

PNG_BYTES = b"\x89PNG\r\n\x1a\nnot-really-a-png"


def _upload(name="photo.png", data=PNG_BYTES):
    return SimpleUploadedFile(name, data, content_type="image/png")


class ContentKeyTests(SimpleTestCase):
    """Key layout: folder, SHA-1 and the lower-cased extension."""

    def test_key_joins_folder_digest_and_extension(self):
        self.assertEqual(content_key("abc", "Photo.JPG", "images"), "images/abc.jpg")

    def test_key_without_extension_or_folder(self):
        self.assertEqual(content_key("abc", "README"), "abc")
        self.assertEqual(content_key("abc", "a.png"), "abc.png")

    def test_unsafe_extension_is_dropped(self):
        """Path separators or other symbols after the last dot never reach the key."""
        self.assertEqual(content_key("abc", "x./a/b", "images"), "images/abc")
        self.assertEqual(content_key("abc", "photo.pn g"), "abc")
        self.assertEqual(content_key("abc", "trailing."), "abc")


class UploadTests(FakeRedisTestCase):
    """POST /storage with a mocked S3 client."""

    @classmethod
    def setUpTestData(cls):
        """A signed-in uploader."""
        cls.user = create_user("1", admin=True)

    def setUp(self):
        """Patch the S3 client factory for every test."""
        patcher = mock.patch("storage.services.get_s3_client")
        self.get_client = patcher.start()
        self.addCleanup(patcher.stop)
        self.s3 = self.get_client.return_value
        self.api_client = auth_client(self.user)

    def test_upload_returns_public_url(self):
        """The URL is the access host plus the content key."""
        response = self.api_client.post("/storage", {"key": "photo.png", "file": _upload()}, format="multipart")
        body = response.json()

        digest = hashlib.sha1(PNG_BYTES).hexdigest()
        self.assertEqual(response.status_code, 200)
        self.assertEqual(body["data"], f"https://cdn.test/images/{digest}.png")
        self.s3.put_object.assert_called_once()
        kwargs = self.s3.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "blog")
        self.assertEqual(kwargs["Key"], f"images/{digest}.png")
        self.assertEqual(kwargs["Body"], PNG_BYTES)
        self.assertEqual(kwargs["ContentType"], "image/png")

    def test_same_bytes_twice_give_same_key(self):
        """A repeated upload reuses the stored object without a second PUT."""
        first = self.api_client.post("/storage", {"key": "a.png", "file": _upload("a.png")}, format="multipart")
        second = self.api_client.post("/storage", {"key": "b.png", "file": _upload("b.png")}, format="multipart")

        self.assertEqual(first.json()["data"], second.json()["data"])
        self.assertEqual(self.s3.put_object.call_count, 1)
        self.assertEqual(StoredObject.objects.count(), 1)

    def test_different_bytes_give_different_keys(self):
        """Keys follow the content, not the file name."""
        first = self.api_client.post("/storage", {"key": "a.png", "file": _upload(data=b"one")}, format="multipart")
        second = self.api_client.post("/storage", {"key": "a.png", "file": _upload(data=b"two")}, format="multipart")

        self.assertNotEqual(first.json()["data"], second.json()["data"])

    def test_anonymous_upload_is_401(self):
        """Uploading requires a session."""
        response = APIClient().post("/storage", {"key": "a.png", "file": _upload()}, format="multipart")

        self.assertEqual(response.status_code, 401)
        self.s3.put_object.assert_not_called()

    def test_missing_file_is_400(self):
        """The multipart body must carry a file."""
        response = self.api_client.post("/storage", {"key": "a.png"}, format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"], ["file is required"])

    @override_settings(S3_BUCKET="")
    def test_missing_configuration_is_500(self):
        """Unconfigured storage reports itself instead of calling S3."""
        response = self.api_client.post("/storage", {"key": "a.png", "file": _upload()}, format="multipart")

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["errors"], ["S3 configuration is missing"])
        self.get_client.assert_not_called()

    def test_s3_error_is_400_with_sdk_message(self):
        """SDK failures surface their message and store nothing."""
        self.s3.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )

        response = self.api_client.post("/storage", {"key": "a.png", "file": _upload()}, format="multipart")

        self.assertEqual(response.status_code, 400)
        self.assertIn("Access Denied", response.json()["errors"][0])
        self.assertFalse(StoredObject.objects.exists())


class PresignTests(FakeRedisTestCase):
    """GET /storage/generate-presigned-url."""

    @classmethod
    def setUpTestData(cls):
        """A signed-in caller."""
        cls.user = create_user("1", admin=True)

    def test_presigned_url_is_valid_for_an_hour(self):
        """The signed URL is requested for the object with a 3600 s expiry."""
        with mock.patch("storage.services.get_s3_client") as get_client:
            get_client.return_value.generate_presigned_url.return_value = "https://s3.test/blog/k?sig=1"
            response = auth_client(self.user).get(
                "/storage/generate-presigned-url", {"objectKey": "images/k.png"}
            )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"], {"url": "https://s3.test/blog/k?sig=1"})
        get_client.return_value.generate_presigned_url.assert_called_once_with(
            "get_object",
            Params={"Bucket": "blog", "Key": "images/k.png"},
            ExpiresIn=3600,
        )

    def test_object_key_is_required(self):
        """Missing objectKey is a 400 with a readable message."""
        response = auth_client(self.user).get("/storage/generate-presigned-url")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["errors"], ["objectKey is required"])
