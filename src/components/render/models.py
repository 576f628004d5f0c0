"""
Render component models.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.rules.models import Rules

# --- Output Models ---


@dataclass(frozen=True)
class MetaTag:
    """HTML meta tag representation."""

    name: str | None = None
    property: str | None = None  # For OG tags
    content: str = ""


# --- Configuration ---


@dataclass(frozen=True)
class ShellAssets:
    """Client bundle entry points referenced by the SPA shell."""

    scripts: tuple[str, ...] = ()
    modulepreloads: tuple[str, ...] = ()
    stylesheets: tuple[str, ...] = ()


@dataclass(frozen=True)
class RenderConfig:
    """
    Document-level render settings.

    The fallback_* fields describe the platform itself and fill the SPA
    shell head when no record was resolved.
    """

    language: str = "en"
    locale: str = "en_US"
    image_width: int = 1200
    image_height: int = 630
    image_type: str = "image/png"
    reload_delay_ms: int = 1000
    theme_color: str = "#10B981"
    fallback_title: str = "EcomBuildr"
    fallback_description: str = "Build beautiful online stores and funnels."
    fallback_keywords: tuple[str, ...] = ()
    fallback_image: str | None = None
    fallback_site_name: str = "EcomBuildr"
    assets: ShellAssets = ShellAssets()

    @classmethod
    def from_rules(cls, rules: Rules) -> RenderConfig:
        render = rules.render
        shell = rules.spa_shell
        return cls(
            language=render.language,
            locale=render.locale,
            image_width=render.image_width,
            image_height=render.image_height,
            image_type=render.image_type,
            reload_delay_ms=render.reload_delay_ms,
            theme_color=shell.theme_color,
            fallback_title=shell.title,
            fallback_description=shell.description,
            fallback_keywords=tuple(shell.keywords),
            fallback_image=shell.image,
            fallback_site_name=shell.site_name,
            assets=ShellAssets(
                scripts=tuple(shell.scripts),
                modulepreloads=tuple(shell.modulepreloads),
                stylesheets=tuple(shell.stylesheets),
            ),
        )
