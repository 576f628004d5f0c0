"""
Tests for description extraction from page-builder content.
"""

from __future__ import annotations

import pytest

from src.components.description import (
    EmptyContent,
    PlainText,
    SectionList,
    clean_text,
    extract_description,
    parse_rich_content,
    summarize,
)


class TestParseRichContent:
    """Raw JSON to RichContent."""

    def test_string_is_plain_text(self) -> None:
        assert parse_rich_content("Hello") == PlainText("Hello")

    def test_sections_object(self) -> None:
        parsed = parse_rich_content({"sections": [{"type": "text", "content": "Hi"}]})
        assert isinstance(parsed, SectionList)
        assert parsed.sections[0].text == "Hi"
        assert parsed.sections[0].is_text_section

    @pytest.mark.parametrize("raw", [None, 42, [], {"sections": "nope"}, {"blocks": []}])
    def test_unrecognised_shapes_are_empty(self, raw: object) -> None:
        assert parse_rich_content(raw) == EmptyContent()


class TestCleanText:
    """Tag stripping and entity decoding."""

    def test_strips_tags_and_collapses_whitespace(self) -> None:
        assert clean_text("<p>Fresh\n\n  <b>bread</b></p>") == "Fresh bread"

    def test_decodes_basic_entities(self) -> None:
        assert clean_text("Salt &amp; pepper&nbsp;&lt;3 &quot;hot&quot; it&#039;s") == (
            "Salt & pepper <3 \"hot\" it's"
        )

    def test_double_encoded_entities_decode_fully(self) -> None:
        assert clean_text("&amp;lt;b&amp;gt;") == "<b>"
        assert clean_text("Use &amp;lt;b&amp;gt; tags") == "Use <b> tags"


class TestSummarize:
    """Greedy sentence summary."""

    def test_appends_following_sentences(self) -> None:
        assert summarize("Hello world. This is great") == "Hello world. This is great."

    def test_keeps_terminal_punctuation_off_split(self) -> None:
        """Sentences are re-joined with '. ' whatever terminated them."""
        assert summarize("Buy now! Limited offer?") == "Buy now. Limited offer."

    def test_stops_once_running_length_reaches_threshold(self) -> None:
        first = "a" * 40
        second = "b" * 10
        # max_length 60: threshold is 40, so nothing is appended after the first.
        assert summarize(f"{first}. {second}.", max_length=60) == first + "."

    def test_stops_before_exceeding_max_length(self) -> None:
        first = "a" * 10
        second = "b" * 50
        assert summarize(f"{first}. {second}.", max_length=60) == first + "."

    def test_truncation_boundary(self) -> None:
        """A 156-character candidate is cut to exactly 155 ending in '...'."""
        sentence = "x" * 155
        result = summarize(sentence, max_length=155)
        assert len(result) == 155
        assert result.endswith("...")
        assert result == "x" * 152 + "..."

    def test_exact_fit_is_not_truncated(self) -> None:
        sentence = "y" * 154
        assert summarize(sentence, max_length=155) == sentence + "."

    def test_only_punctuation(self) -> None:
        assert summarize("...!?") == ""


class TestExtractDescription:
    """End-to-end extraction."""

    def test_plain_string(self) -> None:
        assert extract_description("Great shoes. Free shipping") == (
            "Great shoes. Free shipping."
        )

    def test_text_sections_only(self) -> None:
        content = {
            "sections": [
                {"type": "heading", "content": "<h1>Welcome</h1>"},
                {"type": "image", "content": "ignored.png"},
                {"type": "paragraph", "text": "Fresh &amp; tasty"},
            ]
        }
        assert extract_description(content) == "Welcome Fresh & tasty."

    def test_nested_block_text(self) -> None:
        content = {
            "sections": [
                {"type": "hero", "blocks": [{"content": "Big sale"}, {"text": "Today only"}]}
            ]
        }
        assert extract_description(content) == "Big sale Today only."

    @pytest.mark.parametrize("content", [None, "", "   ", 3.14, {"sections": []}, ["a"]])
    def test_empty_results(self, content: object) -> None:
        assert extract_description(content) == ""

    def test_accepts_parsed_content(self) -> None:
        assert extract_description(PlainText("Parsed already")) == "Parsed already."

    def test_respects_max_length(self) -> None:
        text = " ".join(["word"] * 100)
        result = extract_description(text, max_length=80)
        assert len(result) == 80
        assert result.endswith("...")

    def test_deterministic(self) -> None:
        content = {"sections": [{"type": "text", "content": "One. Two. Three."}]}
        assert extract_description(content) == extract_description(content)
