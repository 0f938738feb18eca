"""Serializers for feed reads and writes and for tags.

Field names follow the client's camelCase payloads (``createdAt``,
``updatedAt``).
"""

from django.db import transaction
from rest_framework import serializers

from core.text import parse_tags
from users.serializers import UserSummarySerializer
from .models import Feed, Tag
from .services import make_summary, set_feed_tags


class TagListField(serializers.Field):
    """Accept a list of names or ``#``-delimited text; emit a list of names."""

    default_error_messages = {
        "invalid": "Tags must be a list of names or '#'-delimited text.",
        "too_long": "Tag names must be at most {max_length} characters.",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            names = parse_tags(data)
        elif isinstance(data, list) and all(isinstance(item, str) for item in data):
            names: list[str] = []
            for item in data:
                name = item.strip().lstrip("#").strip()
                if name and name not in names:
                    names.append(name)
        else:
            self.fail("invalid")

        max_length = Tag._meta.get_field("name").max_length
        if any(len(name) > max_length for name in names):
            self.fail("too_long", max_length=max_length)
        return names

    def to_representation(self, value):
        return [tag.name for tag in value.all()]


class FeedListSerializer(serializers.ModelSerializer):
    """Compact feed entry for listings (no body)."""

    tags = TagListField(read_only=True)
    user = UserSummarySerializer(source="owner", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Feed
        fields = ["id", "title", "summary", "alias", "tags", "draft", "listed", "user", "createdAt", "updatedAt"]
        read_only_fields = fields


class FeedSerializer(FeedListSerializer):
    """Full feed payload including the Markdown body."""

    class Meta(FeedListSerializer.Meta):
        fields = FeedListSerializer.Meta.fields[:2] + ["content"] + FeedListSerializer.Meta.fields[2:]
        read_only_fields = fields


class FeedWriteSerializer(serializers.ModelSerializer):
    """Validate create/update payloads from the writing page.

    Title and content are mandatory only when creating. A blank summary is
    replaced by one generated from the content.
    """

    tags = TagListField(required=False)
    alias = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=255)
    createdAt = serializers.DateTimeField(source="created_at", required=False)

    class Meta:
        model = Feed
        fields = ["title", "content", "summary", "alias", "tags", "draft", "listed", "createdAt"]
        extra_kwargs = {
            "title": {"required": False, "allow_blank": True},
            "content": {"required": False, "allow_blank": True},
            "summary": {"required": False, "allow_blank": True},
        }

    def validate_alias(self, value):
        """Normalise blank aliases to None and keep aliases unique and non-numeric."""
        alias = (value or "").strip()
        if not alias:
            return None
        if alias.isdecimal():
            raise serializers.ValidationError("Alias cannot be a number")
        if "/" in alias:
            raise serializers.ValidationError("Alias cannot contain '/'")
        qs = Feed.objects.filter(alias=alias)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError("Alias already exists")
        return alias

    def validate(self, attrs):
        if self.instance is None:
            if not (attrs.get("title") or "").strip():
                raise serializers.ValidationError("Title is required")
            if not (attrs.get("content") or "").strip():
                raise serializers.ValidationError("Content is required")
        return attrs

    def create(self, validated_data):
        tags = validated_data.pop("tags", [])
        if not (validated_data.get("summary") or "").strip():
            validated_data["summary"] = make_summary(validated_data["content"])
        with transaction.atomic():
            feed = Feed.objects.create(**validated_data)
            set_feed_tags(feed, tags)
        return feed

    def update(self, instance, validated_data):
        tags = validated_data.pop("tags", None)
        if "summary" in validated_data and not (validated_data["summary"] or "").strip():
            validated_data["summary"] = make_summary(validated_data.get("content", instance.content))
        for field, value in validated_data.items():
            setattr(instance, field, value)
        with transaction.atomic():
            instance.save()
            if tags is not None:
                set_feed_tags(instance, tags)
        return instance


class TagSerializer(serializers.ModelSerializer):
    """Tag name with the number of published feeds carrying it."""

    count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Tag
        fields = ["id", "name", "count"]
        read_only_fields = fields


__all__ = ["FeedSerializer", "FeedListSerializer", "FeedWriteSerializer", "TagSerializer"]
