"""
Field precedence and connection selection - Functional Core.

Pure helpers used by ContentResolver. Each SEORecord field is resolved
independently:

- title: trimmed seo_title, else "{entity} - {container}"
- description: trimmed seo_description, else extracted content, else the
  title fallback string
- og_image: the entity's own image chain, all or nothing, else the
  container image; normalized to an absolute http(s) URL
- canonical: canonical_url, else https://{hostname}{pathname}
- robots: meta_robots, else the default
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from src.domain.entities import DomainConnection, Funnel, Website
from src.domain.sanitize import normalize_image_url

from .models import FieldChoice, RequestTarget

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


# --- Text fields ---


def first_text(*values: str | None) -> str | None:
    """First value that is non-empty after trimming, trimmed."""
    for value in values:
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def choose_text(candidates: Sequence[tuple[str, str | None]]) -> FieldChoice:
    """First non-blank candidate, keeping the name of the field it came from."""
    for source, value in candidates:
        text = first_text(value)
        if text is not None:
            return FieldChoice(value=text, source=source)
    return FieldChoice(value=None)


def fallback_title(entity_label: str | None, container_name: str) -> str:
    label = first_text(entity_label)
    if label is None:
        return container_name
    return f"{label} - {container_name}"


# --- Images ---


def choose_entity_image(candidates: Sequence[tuple[str, str | None]]) -> FieldChoice | None:
    """
    The entity's own image, or None when it sets no image field at all.

    A set but unusable value (relative path, junk) still counts as the
    entity's choice; it normalizes to no image rather than falling back.
    """
    for source, value in candidates:
        if isinstance(value, str) and value.strip():
            return FieldChoice(value=normalize_image_url(value), source=source)
    return None


def website_image(website: Website) -> FieldChoice:
    """Container image chain for a website."""
    settings = website.settings
    candidates = [
        ("settings.seo.og_image", settings.seo.og_image),
        ("settings.seo.social_image_url", settings.seo.social_image_url),
        ("settings.branding.social_image_url", settings.branding.social_image_url),
        ("settings.branding.logo", settings.branding.logo),
        ("settings.favicon", settings.favicon),
    ]
    for source, value in candidates:
        url = normalize_image_url(value)
        if url:
            return FieldChoice(value=url, source=f"website.{source}")
    return FieldChoice(value=None)


def funnel_image(funnel: Funnel) -> FieldChoice:
    """Container image chain for a funnel."""
    candidates = (("og_image", funnel.og_image), ("social_image_url", funnel.social_image_url))
    for source, value in candidates:
        url = normalize_image_url(value)
        if url:
            return FieldChoice(value=url, source=f"funnel.{source}")
    return FieldChoice(value=None)


def resolve_image(
    candidates: Sequence[tuple[str, str | None]], container: FieldChoice
) -> FieldChoice:
    own = choose_entity_image(candidates)
    return own if own is not None else container


# --- URLs ---


def canonical_for(target: RequestTarget, override: str | None = None) -> str:
    """Entity canonical_url, else https://{hostname}{pathname}."""
    explicit = first_text(override)
    if explicit is not None:
        return explicit
    path = target.pathname.split("?")[0].split("#")[0] or "/"
    if not path.startswith("/"):
        path = "/" + path
    return f"https://{target.hostname}{path}"


def domain_variants(hostname: str) -> list[str]:
    """Lookup set for a custom domain: raw, apex and www.+apex."""
    apex = hostname[4:] if hostname.startswith("www.") else hostname
    variants: list[str] = []
    for candidate in (hostname, apex, f"www.{apex}"):
        if candidate and candidate not in variants:
            variants.append(candidate)
    return variants


def is_uuid(value: str) -> bool:
    return bool(UUID_RE.match(value))


# --- Connection selection ---


def first_of_type(
    connections: Sequence[DomainConnection], content_type: str
) -> DomainConnection | None:
    return next((c for c in connections if c.content_type == content_type), None)


def select_root_connection(
    connections: Sequence[DomainConnection],
) -> DomainConnection | None:
    """Root path: is_homepage, then website, then funnel, then course_area."""
    homepage = next((c for c in connections if c.is_homepage), None)
    if homepage is not None:
        return homepage
    for content_type in ("website", "funnel", "course_area"):
        conn = first_of_type(connections, content_type)
        if conn is not None:
            return conn
    return None


def has_path_prefix(target: RequestTarget, prefixes: Sequence[str]) -> bool:
    return bool(target.segments) and target.segments[0] in prefixes


def product_slug(target: RequestTarget, prefix: str) -> str | None:
    """Slug of a `<prefix>/<slug>` path, else None."""
    if len(target.segments) == 2 and target.segments[0] == prefix:
        return target.segments[1]
    return None
