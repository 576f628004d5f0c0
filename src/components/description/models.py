"""
Description component models.

Page and step content is stored as free-form JSON by the page builder.
It is modelled here as a closed union so the extractor can match on it
exhaustively:

    RichContent = PlainText | SectionList | EmptyContent
"""

from __future__ import annotations

from dataclasses import dataclass, field

# Section types whose own text is used for descriptions.
TEXT_SECTION_TYPES = frozenset({"text", "paragraph", "heading"})


@dataclass(frozen=True)
class PlainText:
    """Content stored as a bare string."""

    text: str


@dataclass(frozen=True)
class Section:
    """One page-builder section reduced to the text-bearing parts."""

    type: str | None = None
    text: str = ""
    block_texts: tuple[str, ...] = ()

    @property
    def is_text_section(self) -> bool:
        return self.type in TEXT_SECTION_TYPES


@dataclass(frozen=True)
class SectionList:
    """Content stored as {"sections": [...]}."""

    sections: tuple[Section, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class EmptyContent:
    """Null, or any shape the extractor does not recognise."""


RichContent = PlainText | SectionList | EmptyContent
