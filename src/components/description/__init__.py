"""
Description component - excerpt extraction from page-builder content.
"""

from .component import (
    DEFAULT_MAX_LENGTH,
    clean_text,
    extract_description,
    parse_rich_content,
    source_text,
    summarize,
)
from .models import (
    TEXT_SECTION_TYPES,
    EmptyContent,
    PlainText,
    RichContent,
    Section,
    SectionList,
)

__all__ = [
    # Entry point
    "extract_description",
    # Steps
    "parse_rich_content",
    "source_text",
    "clean_text",
    "summarize",
    "DEFAULT_MAX_LENGTH",
    # Models
    "RichContent",
    "PlainText",
    "Section",
    "SectionList",
    "EmptyContent",
    "TEXT_SECTION_TYPES",
]
