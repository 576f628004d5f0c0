"""
Render component - crawler HTML and SPA shell documents.

Invariants:
- Pure: same record and config always give the same document
- Every interpolated value is HTML-escaped
- Image-only tags appear only when the record has an image
"""

from __future__ import annotations

from src.domain.sanitize import escape_html
from src.domain.seo import SEORecord

from ._impl import (
    build_fallback_meta_tags,
    build_json_ld,
    build_meta_tags,
    json_for_script,
    render_meta_tags_html,
)
from .models import RenderConfig


def render_seo_html(seo: SEORecord, request_url: str, *, config: RenderConfig) -> str:
    """
    Render the crawler document for a resolved record.

    The body repeats the title and description for crawlers that index
    text, then reloads so a JavaScript-running client ends up in the app.
    """
    head = render_meta_tags_html(seo.title, build_meta_tags(seo, config), seo.canonical)
    json_ld = json_for_script(build_json_ld(seo))
    title = escape_html(seo.title)
    description = escape_html(seo.description)

    return f"""<!DOCTYPE html>
<html lang="{escape_html(config.language)}">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    {head}
    <script type="application/ld+json">
{json_ld}
    </script>
</head>
<body>
    <div id="root">
        <header>
            <h1>{title}</h1>
        </header>
        <main>
            <p>{description}</p>
            <p><a href="{escape_html(request_url)}">{title}</a></p>
        </main>
    </div>
    <script>
        setTimeout(function () {{ window.location.reload(); }}, {int(config.reload_delay_ms)});
    </script>
</body>
</html>"""


def render_spa_shell(config: RenderConfig, seo: SEORecord | None = None) -> str:
    """
    Render the static shell that boots the client bundle.

    With a record, its head tags replace the platform fallbacks so link
    previews of tenant pages stay correct for non-crawler clients too.
    """
    if seo is not None:
        head = render_meta_tags_html(seo.title, build_meta_tags(seo, config), seo.canonical)
    else:
        head = render_meta_tags_html(config.fallback_title, build_fallback_meta_tags(config), None)

    asset_tags: list[str] = []
    for href in config.assets.stylesheets:
        asset_tags.append(f'<link rel="stylesheet" crossorigin href="{escape_html(href)}" />')
    for href in config.assets.modulepreloads:
        asset_tags.append(f'<link rel="modulepreload" crossorigin href="{escape_html(href)}" />')
    for src in config.assets.scripts:
        asset_tags.append(f'<script type="module" crossorigin src="{escape_html(src)}"></script>')
    assets = "\n    ".join(asset_tags)

    return f"""<!DOCTYPE html>
<html lang="{escape_html(config.language)}">
<head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <meta name="theme-color" content="{escape_html(config.theme_color)}" />
    {head}
    {assets}
</head>
<body>
    <div id="root"></div>
</body>
</html>"""
