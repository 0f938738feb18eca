"""Markdown → HTML rendering for feed bodies.

Configures python-markdown with pymdown-extensions for GitHub-flavoured
Markdown, math, mermaid diagrams and syntax highlighting, and adds a few
element rewrites of our own:

* ``> [!NOTE]`` style blockquotes become alert boxes,
* images are tagged for the lightbox viewer,
* YouTube, Bilibili and raw video links get an embedded player,
* highlighted code blocks get a copy button.

Like :mod:`core.text` this module is Django-free.
"""

import re
import xml.etree.ElementTree as etree
from urllib.parse import parse_qs, urlparse

import markdown
from markdown.extensions import Extension
from markdown.postprocessors import Postprocessor
from markdown.treeprocessors import Treeprocessor
from pymdownx.superfences import fence_div_format

ALERT_KINDS = {
    "NOTE": "Note",
    "TIP": "Tip",
    "IMPORTANT": "Important",
    "WARNING": "Warning",
    "CAUTION": "Caution",
}
_ALERT_RE = re.compile(r"^\s*\[!(" + "|".join(ALERT_KINDS) + r")\]\s*", re.IGNORECASE)
_VIDEO_FILE_RE = re.compile(r"\.(mp4|webm|ogg)$", re.IGNORECASE)
_HIGHLIGHT_DIV_RE = re.compile(r'(<div class="[^"]*\bhighlight\b[^"]*">)')

COPY_BUTTON = '<button class="copy-code" type="button" aria-label="Copy code">Copy</button>'

MD_EXTENSIONS = [
    "pymdownx.extra",
    "pymdownx.magiclink",
    "pymdownx.tilde",
    "pymdownx.tasklist",
    "pymdownx.highlight",
    "pymdownx.arithmatex",
    "nl2br",
]

MD_EXTENSION_CONFIGS = {
    "pymdownx.highlight": {"use_pygments": True, "css_class": "highlight", "guess_lang": False},
    "pymdownx.arithmatex": {"generic": True},
    "pymdownx.tilde": {"subscript": False},
    "pymdownx.extra": {
        "pymdownx.superfences": {
            "custom_fences": [
                {"name": "mermaid", "class": "mermaid", "format": fence_div_format},
            ]
        }
    },
}


def youtube_id(href: str) -> str | None:
    parsed = urlparse(href)
    host = parsed.netloc.lower()
    if host.endswith("youtube.com") and parsed.path == "/watch":
        return (parse_qs(parsed.query).get("v") or [None])[0]
    if host == "youtu.be":
        return parsed.path.strip("/").split("/")[0] or None
    return None


def bilibili_id(href: str) -> str | None:
    parsed = urlparse(href)
    if not parsed.netloc.lower().endswith("bilibili.com"):
        return None
    if "/video/" not in parsed.path:
        return None
    return parsed.path.split("/video/", 1)[1].split("/")[0] or None


def _embed_frame(src: str, href: str, label: str) -> etree.Element:
    wrapper = etree.Element("div", {"class": "video-embed"})
    frame = etree.SubElement(wrapper, "div", {"class": "aspect-video"})
    etree.SubElement(frame, "iframe", {"src": src, "allowfullscreen": "true", "frameborder": "0"})
    link = etree.SubElement(wrapper, "a", {"href": href, "target": "_blank", "rel": "noreferrer"})
    link.text = label
    return wrapper


def video_embed(href: str, text: str) -> etree.Element | None:
    """Return an embed element for a known video link, or None."""
    if _VIDEO_FILE_RE.search(urlparse(href).path):
        wrapper = etree.Element("div", {"class": "video-embed"})
        etree.SubElement(wrapper, "video", {"src": href, "controls": "controls"})
        link = etree.SubElement(wrapper, "a", {"href": href, "target": "_blank", "rel": "noreferrer"})
        link.text = text or href
        return wrapper

    vid = youtube_id(href)
    if vid:
        return _embed_frame(f"https://www.youtube.com/embed/{vid}", href, "Open on YouTube")

    bvid = bilibili_id(href)
    if bvid:
        src = f"//player.bilibili.com/player.html?bvid={bvid}&page=1&danmaku=0"
        return _embed_frame(src, href, f"Watch on Bilibili ({text or bvid})")
    return None


def _is_blank(value: str | None) -> bool:
    return not value or not value.strip()


class AlertTreeprocessor(Treeprocessor):
    """Turn ``> [!KIND]`` blockquotes into ``markdown-alert`` boxes."""

    def run(self, root):
        for quote in list(root.iter("blockquote")):
            first = quote[0] if len(quote) else None
            if first is None or first.tag != "p" or not first.text:
                continue
            match = _ALERT_RE.match(first.text)
            if not match:
                continue

            kind = match.group(1).upper()
            first.text = first.text[match.end():]
            # nl2br leaves a <br> right after the marker line.
            if _is_blank(first.text) and len(first) and first[0].tag == "br":
                br = first[0]
                first.text = (br.tail or "").lstrip()
                first.remove(br)
            if _is_blank(first.text) and not len(first):
                quote.remove(first)

            quote.tag = "div"
            quote.set("class", f"markdown-alert markdown-alert-{kind.lower()}")
            title = etree.Element("p", {"class": "markdown-alert-title"})
            title.text = ALERT_KINDS[kind]
            quote.insert(0, title)


class MediaTreeprocessor(Treeprocessor):
    """Tag images for the lightbox and expand video links into embeds.

    A paragraph holding nothing but the link is replaced by the player. A
    video link inside running text stays a link and its player is placed
    right after the paragraph.
    """

    def run(self, root):
        for img in root.iter("img"):
            img.set("loading", "lazy")
            img.set("data-lightbox", "content")

        for parent in list(root.iter()):
            for child in list(parent):
                if child.tag != "p":
                    continue
                embeds = []
                for link in child.iter("a"):
                    embed = video_embed(link.get("href", ""), "".join(link.itertext()))
                    if embed is not None:
                        embeds.append(embed)
                if not embeds:
                    continue

                index = list(parent).index(child)
                if self._is_bare_link(child):
                    parent.remove(child)
                    parent.insert(index, embeds[0])
                    continue
                for offset, embed in enumerate(embeds, start=1):
                    parent.insert(index + offset, embed)

    @staticmethod
    def _is_bare_link(paragraph) -> bool:
        if len(paragraph) != 1 or paragraph[0].tag != "a":
            return False
        return _is_blank(paragraph.text) and _is_blank(paragraph[0].tail)


class CopyButtonPostprocessor(Postprocessor):
    """Prefix every highlighted code block with a copy button."""

    def run(self, text):
        return _HIGHLIGHT_DIV_RE.sub(lambda m: m.group(1) + COPY_BUTTON, text)


class FeedMarkdownExtension(Extension):
    def extendMarkdown(self, md):
        md.treeprocessors.register(AlertTreeprocessor(md), "feed_alerts", 15)
        md.treeprocessors.register(MediaTreeprocessor(md), "feed_media", 14)
        # Below raw_html (30) so the highlighted blocks are already restored.
        md.postprocessors.register(CopyButtonPostprocessor(md), "feed_copy_button", 5)


def markdown_renderer() -> markdown.Markdown:
    """Build a fresh renderer; Markdown instances are not thread-safe."""
    return markdown.Markdown(
        extensions=[*MD_EXTENSIONS, FeedMarkdownExtension()],
        extension_configs=MD_EXTENSION_CONFIGS,
    )


def render_markdown(text: str | None) -> str:
    """Render a feed body to HTML."""
    if not text:
        return ""
    return markdown_renderer().convert(text)


__all__ = ["render_markdown", "markdown_renderer", "video_embed", "youtube_id", "bilibili_id"]
