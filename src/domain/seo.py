"""
SEORecord - the normalized, render-ready metadata bundle.

Produced by the resolver (or the edge handler's minimal fallback) and
consumed by the renderer and the diagnostic response headers.

Invariants:
- title, description, canonical and robots are never empty
- og_image is either None or an absolute http(s) URL
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.sanitize import normalize_image_url


@dataclass(frozen=True)
class SEODebug:
    """Provenance of each resolved field (diagnostic only)."""

    title_source: str | None = None
    desc_source: str | None = None
    image_source: str | None = None
    website_id: str | None = None
    page_id: str | None = None
    slug: str | None = None
    conn_type: str | None = None
    conn_id: str | None = None
    step_slug: str | None = None


@dataclass(frozen=True)
class SEORecord:
    """Resolved SEO metadata for one request."""

    title: str
    description: str
    canonical: str
    robots: str
    site_name: str
    source: str
    og_image: str | None = None
    keywords: tuple[str, ...] = ()
    debug: SEODebug = field(default_factory=SEODebug)

    def __post_init__(self) -> None:
        for name in ("title", "description", "canonical", "robots"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"SEORecord.{name} must be a non-empty string")
        if self.og_image is not None and normalize_image_url(self.og_image) != self.og_image:
            raise ValueError("SEORecord.og_image must be an absolute http(s) URL")
        # Lists are accepted at construction and frozen into a tuple.
        object.__setattr__(self, "keywords", tuple(self.keywords))

    def to_dict(self) -> dict[str, object]:
        """JSON-friendly view used by the seo-data endpoint and the CLI."""
        return {
            "title": self.title,
            "description": self.description,
            "og_image": self.og_image,
            "keywords": list(self.keywords),
            "canonical": self.canonical,
            "robots": self.robots,
            "site_name": self.site_name,
            "source": self.source,
            "debug": {k: v for k, v in self.debug.__dict__.items() if v is not None},
        }
