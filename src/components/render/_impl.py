"""
Meta tag and structured data builders - Functional Core.

Builds the <head> of both documents the edge serves:

- the crawler document (full Open Graph / Twitter Card / JSON-LD)
- the SPA shell (same tags, platform fallbacks when nothing resolved)

Every value that reaches HTML goes through escape_html; JSON-LD goes
through json_for_script so tenant text cannot close the script element.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from src.domain.sanitize import escape_html
from src.domain.seo import SEORecord

from .models import MetaTag, RenderConfig

TWITTER_CARD = "summary_large_image"
OG_TYPE = "website"


# --- Meta tags ---


def generate_opengraph_meta(
    *,
    title: str,
    description: str,
    url: str | None,
    site_name: str,
    image_url: str | None,
    config: RenderConfig,
) -> list[MetaTag]:
    """OpenGraph tags; image dimensions are only declared with an image."""
    tags = [MetaTag(property="og:type", content=OG_TYPE)]
    if url:
        tags.append(MetaTag(property="og:url", content=url))
    tags.extend(
        [
            MetaTag(property="og:title", content=title),
            MetaTag(property="og:description", content=description),
        ]
    )
    if image_url:
        tags.extend(
            [
                MetaTag(property="og:image", content=image_url),
                MetaTag(property="og:image:secure_url", content=image_url),
                MetaTag(property="og:image:width", content=str(config.image_width)),
                MetaTag(property="og:image:height", content=str(config.image_height)),
                MetaTag(property="og:image:type", content=config.image_type),
            ]
        )
    tags.extend(
        [
            MetaTag(property="og:site_name", content=site_name),
            MetaTag(property="og:locale", content=config.locale),
        ]
    )
    return tags


def generate_twitter_card_meta(
    *,
    title: str,
    description: str,
    url: str | None,
    image_url: str | None,
) -> list[MetaTag]:
    """Twitter Card tags; the image alt text is the page title."""
    tags = [MetaTag(name="twitter:card", content=TWITTER_CARD)]
    if url:
        tags.append(MetaTag(name="twitter:url", content=url))
    tags.extend(
        [
            MetaTag(name="twitter:title", content=title),
            MetaTag(name="twitter:description", content=description),
        ]
    )
    if image_url:
        tags.extend(
            [
                MetaTag(name="twitter:image", content=image_url),
                MetaTag(name="twitter:image:alt", content=title),
            ]
        )
    return tags


def _meta_tags(
    *,
    title: str,
    description: str,
    keywords: Sequence[str],
    robots: str | None,
    site_name: str,
    url: str | None,
    image_url: str | None,
    config: RenderConfig,
) -> list[MetaTag]:
    tags = [MetaTag(name="description", content=description)]
    if keywords:
        tags.append(MetaTag(name="keywords", content=", ".join(keywords)))
    if robots:
        tags.append(MetaTag(name="robots", content=robots))
    tags.append(MetaTag(name="author", content=site_name))
    tags.extend(
        generate_opengraph_meta(
            title=title,
            description=description,
            url=url,
            site_name=site_name,
            image_url=image_url,
            config=config,
        )
    )
    tags.extend(
        generate_twitter_card_meta(
            title=title, description=description, url=url, image_url=image_url
        )
    )
    return tags


def build_meta_tags(seo: SEORecord, config: RenderConfig) -> list[MetaTag]:
    """Meta tags for a resolved record, in document order."""
    return _meta_tags(
        title=seo.title,
        description=seo.description,
        keywords=seo.keywords,
        robots=seo.robots,
        site_name=seo.site_name,
        url=seo.canonical,
        image_url=seo.og_image,
        config=config,
    )


def build_fallback_meta_tags(config: RenderConfig) -> list[MetaTag]:
    """Platform meta tags for the shell when nothing was resolved."""
    return _meta_tags(
        title=config.fallback_title,
        description=config.fallback_description,
        keywords=config.fallback_keywords,
        robots=None,
        site_name=config.fallback_site_name,
        url=None,
        image_url=config.fallback_image,
        config=config,
    )


def render_meta_tags_html(title: str, tags: Sequence[MetaTag], canonical: str | None) -> str:
    """Render a title, meta tags and an optional canonical link."""
    html_parts: list[str] = [f"<title>{escape_html(title)}</title>"]

    for tag in tags:
        if tag.property:
            html_parts.append(
                f'<meta property="{escape_html(tag.property)}" '
                f'content="{escape_html(tag.content)}" />'
            )
        elif tag.name:
            html_parts.append(
                f'<meta name="{escape_html(tag.name)}" content="{escape_html(tag.content)}" />'
            )

    if canonical:
        html_parts.append(f'<link rel="canonical" href="{escape_html(canonical)}" />')

    return "\n    ".join(html_parts)


# --- Structured data ---


def build_json_ld(seo: SEORecord) -> dict[str, Any]:
    """schema.org WebPage with its publishing Organization."""
    publisher: dict[str, Any] = {"@type": "Organization", "name": seo.site_name}
    data: dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "WebPage",
        "name": seo.title,
        "description": seo.description,
    }
    if seo.og_image:
        data["image"] = seo.og_image
        publisher["logo"] = {"@type": "ImageObject", "url": seo.og_image}
    data["url"] = seo.canonical
    data["publisher"] = publisher
    return data


def json_for_script(data: Any) -> str:
    """JSON that is safe to inline inside a <script> element."""
    return (
        json.dumps(data, ensure_ascii=False, indent=2)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )
