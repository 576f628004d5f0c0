"""
Render component - crawler HTML and SPA shell documents.
"""

from ._impl import (
    build_fallback_meta_tags,
    build_json_ld,
    build_meta_tags,
    generate_opengraph_meta,
    generate_twitter_card_meta,
    json_for_script,
    render_meta_tags_html,
)
from .component import render_seo_html, render_spa_shell
from .models import MetaTag, RenderConfig, ShellAssets

__all__ = [
    # Entry points
    "render_seo_html",
    "render_spa_shell",
    # Models
    "MetaTag",
    "RenderConfig",
    "ShellAssets",
    # Meta tag builders
    "build_meta_tags",
    "build_fallback_meta_tags",
    "generate_opengraph_meta",
    "generate_twitter_card_meta",
    "render_meta_tags_html",
    # Structured data
    "build_json_ld",
    "json_for_script",
]
