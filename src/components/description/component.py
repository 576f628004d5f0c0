"""
Description component - plain-text excerpt from page-builder content.

Used by the resolver when a page, step or product has no explicit
SEO description.

Invariants:
- Pure and total: never raises, returns "" for unrecognised shapes
- Deterministic: the same content always yields the same excerpt
- Output length never exceeds max_length
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .models import EmptyContent, PlainText, RichContent, Section, SectionList

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 155

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")
_TERMINAL_RE = re.compile(r"[.!?]$")

_ENTITIES = (
    ("&nbsp;", " "),
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#039;", "'"),
)


# --- Parsing ---


def _text_of(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    for key in ("content", "text"):
        value = node.get(key)
        if isinstance(value, str) and value:
            return value
    return ""


def _parse_section(raw: Any) -> Section:
    if not isinstance(raw, dict):
        return Section()
    section_type = raw.get("type") if isinstance(raw.get("type"), str) else None
    blocks = raw.get("blocks")
    block_texts = tuple(_text_of(b) for b in blocks) if isinstance(blocks, list) else ()
    return Section(type=section_type, text=_text_of(raw), block_texts=block_texts)


def parse_rich_content(raw: Any) -> RichContent:
    """Map a raw JSON value onto the RichContent union."""
    if isinstance(raw, str):
        return PlainText(raw)
    if isinstance(raw, dict) and isinstance(raw.get("sections"), list):
        return SectionList(tuple(_parse_section(s) for s in raw["sections"]))
    return EmptyContent()


# --- Text assembly ---


def _section_text(section: Section) -> str:
    if section.is_text_section:
        return section.text
    if section.block_texts:
        return " ".join(section.block_texts)
    return ""


def source_text(content: RichContent) -> str:
    """Concatenate the text-bearing parts of the content."""
    match content:
        case PlainText(text=text):
            return text
        case SectionList(sections=sections):
            return " ".join(_section_text(s) for s in sections)
        case _:
            return ""


def clean_text(text: str) -> str:
    """Strip tags, decode the basic entities and collapse whitespace."""
    cleaned = _TAG_RE.sub(" ", text)
    for entity, char in _ENTITIES:
        cleaned = cleaned.replace(entity, char)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def summarize(text: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Greedy sentence summary.

    Takes the first sentence, then appends following sentences while the
    running length is under max_length - 20 and the next one still fits.
    The result always ends in terminal punctuation and is hard-truncated
    with "..." if it is still too long.
    """
    sentences = [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]
    if not sentences:
        return ""

    result = sentences[0]
    for sentence in sentences[1:]:
        if len(result) >= max_length - 20:
            break
        if len(result) + len(sentence) + 2 > max_length:
            break
        result = f"{result}. {sentence}"

    if not _TERMINAL_RE.search(result):
        result += "."

    if len(result) > max_length:
        return result[: max_length - 3] + "..."
    return result


# --- Entry point ---


def extract_description(content: Any, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Derive a plain-text description from page content.

    Accepts a raw JSON value (string, {"sections": [...]}, None, ...) or an
    already-parsed RichContent.
    """
    try:
        parsed = (
            content
            if isinstance(content, PlainText | SectionList | EmptyContent)
            else parse_rich_content(content)
        )
        cleaned = clean_text(source_text(parsed))
        if not cleaned:
            return ""
        return summarize(cleaned, max_length)
    except Exception:
        # Content is tenant-controlled; a bad payload must never break resolution.
        logger.warning("Description extraction failed", exc_info=True)
        return ""
