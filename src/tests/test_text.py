"""Tests for summary extraction and tag parsing."""

from __future__ import annotations

from django.test import SimpleTestCase, override_settings

from core.text import IMAGE_PLACEHOLDER, auto_summary, first_sentence, format_tags, parse_tags
from feeds.services import make_summary


class AutoSummaryTests(SimpleTestCase):
    """Plain-text previews of Markdown bodies."""

    def test_image_only_document_yields_placeholder_once(self):
        """Any number of images with nothing else summarise to one placeholder."""
        for content in ("![a](x.png)", "![a](x.png)\n\n![b](y.png)", "![a](x.png) ![b](y.png)\n![c](z.png)"):
            with self.subTest(content=content):
                self.assertEqual(auto_summary(content), IMAGE_PLACEHOLDER)

    def test_images_between_text_are_kept_in_place(self):
        self.assertEqual(auto_summary("Before ![a](x.png) after"), "Before [image] after")

    def test_markup_is_stripped(self):
        """Links keep their text; HTML tags and Markdown symbols vanish."""
        content = "## Title\n\n> **Quote** with `code`, <u>under</u> and [a link](https://x.test)"
        self.assertEqual(auto_summary(content), "Title Quote with code, under and a link")

    def test_whitespace_collapses(self):
        self.assertEqual(auto_summary("  a \n\n\t b  "), "a b")

    def test_truncates_to_limit(self):
        """The default budget is 150 characters."""
        summary = auto_summary("x" * 400)
        self.assertEqual(len(summary), 150)
        self.assertEqual(auto_summary("abcdef", limit=3), "abc")

    def test_image_placeholders_count_against_limit(self):
        """Expanded ``[image]`` placeholders never push the preview past the budget."""
        content = " ".join(f"![x](u{i}) word" for i in range(40))
        summary = auto_summary(content, limit=150)

        self.assertLessEqual(len(summary), 150)
        self.assertTrue(summary.startswith("[image] word [image] word"))

    def test_empty_input(self):
        self.assertEqual(auto_summary(""), "")
        self.assertEqual(auto_summary(None), "")
        self.assertEqual(auto_summary("### ***"), "")

    def test_first_sentence(self):
        """The first sentence wins; tables become a placeholder."""
        self.assertEqual(first_sentence("Hello **there**. More text."), "Hello there.")
        self.assertEqual(first_sentence("你好。世界"), "你好。")
        self.assertEqual(first_sentence("no terminator " * 20), ("no terminator " * 20)[:100].strip())
        self.assertEqual(first_sentence("| a | b |\n| - | - |\n| 1 | 2 |\n\nAfter."), "[table] After.")

    @override_settings(SUMMARY_STRATEGY="first_sentence")
    def test_make_summary_follows_strategy_setting(self):
        self.assertEqual(make_summary("One. Two."), "One.")

    @override_settings(SUMMARY_STRATEGY="truncate", SUMMARY_LENGTH=5)
    def test_make_summary_uses_configured_length(self):
        self.assertEqual(make_summary("abcdefgh"), "abcde")


class TagParsingTests(SimpleTestCase):
    """``#``-delimited tag text."""

    def test_parse_tags(self):
        self.assertEqual(parse_tags("#a #b  #c"), ["a", "b", "c"])
        self.assertEqual(parse_tags(""), [])
        self.assertEqual(parse_tags(None), [])

    def test_parse_tags_drops_empty_and_duplicate_tokens(self):
        self.assertEqual(parse_tags("##a # #b #a"), ["a", "b"])

    def test_tags_with_spaces_survive(self):
        self.assertEqual(parse_tags("#machine learning #ml"), ["machine learning", "ml"])

    def test_format_tags_round_trips(self):
        self.assertEqual(parse_tags(format_tags(["a", "b"])), ["a", "b"])
