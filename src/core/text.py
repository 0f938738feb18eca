"""Plain-text helpers shared by the API and the writing client.

Nothing here touches Django, so the ``writer`` package can import it without
configuring settings.
"""

import re

IMAGE_PLACEHOLDER = "[image]"
TABLE_PLACEHOLDER = "[table]"
DEFAULT_SUMMARY_LENGTH = 150
FIRST_SENTENCE_FALLBACK = 100

# Sentinels stand in for placeholders while markup is stripped so the
# brackets of "[image]" are never mistaken for link syntax.
_IMAGE_MARK = "\x00"
_TABLE_MARK = "\x01"

_IMAGE_RE = re.compile(r"!\[[^\]]*\]\([^)]*\)")
_TABLE_RE = re.compile(r"(\n|^)\|(.+?)\|[\s\S]+?(\n\n|$)")
_LINK_RE = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_HTML_RE = re.compile(r"<[^>]*>")
_SYMBOL_RE = re.compile(r"[#*`~>]")
_SPACE_RE = re.compile(r"\s+")
_REPEATED_IMAGES_RE = re.compile(f"{_IMAGE_MARK}(?: ?{_IMAGE_MARK})+")
_SENTENCE_RE = re.compile(r"^.*?[。.？！?!]")


def _strip_markup(text: str) -> str:
    text = _LINK_RE.sub(r"\1", text)
    text = _HTML_RE.sub("", text)
    text = _SYMBOL_RE.sub("", text)
    return _SPACE_RE.sub(" ", text).strip()


def _restore(text: str) -> str:
    return text.replace(_IMAGE_MARK, IMAGE_PLACEHOLDER).replace(_TABLE_MARK, TABLE_PLACEHOLDER)


def auto_summary(content: str | None, limit: int = DEFAULT_SUMMARY_LENGTH) -> str:
    """Turn Markdown into a plain-text preview of at most ``limit`` characters.

    Images become ``[image]``; a run of images with nothing between them
    yields a single placeholder, so an image-only post summarises to exactly
    ``[image]``. Links keep their text, HTML tags and Markdown symbols are
    dropped and whitespace collapses to single spaces.
    """
    if not content:
        return ""

    text = content.replace(_IMAGE_MARK, "").replace(_TABLE_MARK, "")
    has_image = bool(_IMAGE_RE.search(text))
    text = _IMAGE_RE.sub(_IMAGE_MARK, text)
    text = _strip_markup(text)
    text = _REPEATED_IMAGES_RE.sub(_IMAGE_MARK, text)

    result = _restore(text)[: max(limit, 0)].rstrip()
    if not result and has_image:
        return IMAGE_PLACEHOLDER
    return result


def first_sentence(content: str | None, fallback: int = FIRST_SENTENCE_FALLBACK) -> str:
    """Return the first sentence of the stripped text.

    Tables are replaced with ``[table]`` and images with ``[image]`` before
    stripping. Text without any sentence terminator is cut to ``fallback``
    characters.
    """
    if not content:
        return ""

    text = content.replace(_IMAGE_MARK, "").replace(_TABLE_MARK, "")
    text = _IMAGE_RE.sub(_IMAGE_MARK, text)
    text = _TABLE_RE.sub(lambda m: f"{m.group(1)}{_TABLE_MARK}{m.group(3)}", text)
    text = _strip_markup(text)
    if not text:
        return ""

    match = _SENTENCE_RE.match(text)
    result = match.group(0) if match else text[:fallback]
    return _restore(result.strip())


def parse_tags(text: str | None) -> list[str]:
    """Split ``#``-delimited free text into a list of tag names.

    ``"#a #b  #c"`` gives ``["a", "b", "c"]``. Empty tokens are dropped and
    duplicates keep their first position.
    """
    if not text:
        return []
    tags: list[str] = []
    for token in text.split("#"):
        name = token.strip()
        if name and name not in tags:
            tags.append(name)
    return tags


def format_tags(tags) -> str:
    """Inverse of :func:`parse_tags` for filling the tags field."""
    return " ".join(f"#{name}" for name in tags)


__all__ = [
    "IMAGE_PLACEHOLDER",
    "TABLE_PLACEHOLDER",
    "auto_summary",
    "first_sentence",
    "parse_tags",
    "format_tags",
]
