from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# --- Enums / Literals ---
ConnectionContentType = Literal["website", "funnel", "course_area"]

DEFAULT_ROBOTS = "index, follow"


class StoreRow(BaseModel):
    """Base for Content Store projections: unknown columns are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)


# --- Domains ---

class CustomDomain(StoreRow):
    id: str
    domain: str
    store_id: str | None = None
    is_verified: bool = False
    dns_configured: bool = False


class DomainConnection(StoreRow):
    id: str
    domain_id: str
    content_type: ConnectionContentType
    content_id: str
    path: str | None = None
    is_homepage: bool = False
    store_id: str | None = None


# --- Websites ---

class WebsiteSeoSettings(StoreRow):
    title: str | None = None
    description: str | None = None
    og_image: str | None = None
    social_image_url: str | None = None


class WebsiteBranding(StoreRow):
    social_image_url: str | None = None
    logo: str | None = None


class WebsiteSettings(StoreRow):
    seo: WebsiteSeoSettings = Field(default_factory=WebsiteSeoSettings)
    branding: WebsiteBranding = Field(default_factory=WebsiteBranding)
    favicon: str | None = None

    @field_validator("seo", "branding", mode="before")
    @classmethod
    def _section_must_be_object(cls, value: Any) -> Any:
        # Tenants have stored strings and lists here; treat them as unset.
        return value if isinstance(value, dict) else {}

    @field_validator("favicon", mode="before")
    @classmethod
    def _favicon_must_be_text(cls, value: Any) -> Any:
        return value if isinstance(value, str) else None

    @classmethod
    def from_raw(cls, raw: Any) -> "WebsiteSettings":
        """Build settings from an arbitrary JSON value, degrading to defaults."""
        if not isinstance(raw, dict):
            return cls()
        try:
            return cls.model_validate(raw)
        except ValidationError:
            return cls()


class Website(StoreRow):
    id: str
    name: str
    slug: str | None = None
    description: str | None = None
    settings: WebsiteSettings = Field(default_factory=WebsiteSettings)
    store_id: str | None = None

    @field_validator("settings", mode="before")
    @classmethod
    def _coerce_settings(cls, value: Any) -> WebsiteSettings:
        if isinstance(value, WebsiteSettings):
            return value
        return WebsiteSettings.from_raw(value)


class WebsitePage(StoreRow):
    id: str
    website_id: str
    slug: str
    title: str = ""
    is_homepage: bool = False
    is_published: bool = False
    seo_title: str | None = None
    seo_description: str | None = None
    og_image: str | None = None
    social_image_url: str | None = None
    preview_image_url: str | None = None
    seo_keywords: list[str] = Field(default_factory=list)
    canonical_url: str | None = None
    meta_robots: str | None = None
    content: Any = None

    @field_validator("seo_keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        return coerce_keywords(value)


# --- Funnels ---

class Funnel(StoreRow):
    id: str
    name: str
    slug: str | None = None
    store_id: str | None = None
    seo_title: str | None = None
    seo_description: str | None = None
    og_image: str | None = None
    social_image_url: str | None = None
    meta_robots: str | None = None
    canonical_domain: str | None = None


class FunnelStep(StoreRow):
    id: str
    funnel_id: str
    slug: str
    name: str = ""
    step_order: int = 0
    is_published: bool = False
    seo_title: str | None = None
    seo_description: str | None = None
    og_image: str | None = None
    social_image_url: str | None = None
    seo_keywords: list[str] = Field(default_factory=list)
    canonical_url: str | None = None
    meta_robots: str | None = None
    content: Any = None
    on_success_step_id: str | None = None

    @field_validator("seo_keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        return coerce_keywords(value)


# --- Products ---

class Product(StoreRow):
    slug: str
    name: str
    store_id: str | None = None
    description: Any = None
    images: list[str] = Field(default_factory=list)
    is_active: bool = True
    seo_title: str | None = None
    seo_description: str | None = None
    og_image: str | None = None
    social_image_url: str | None = None
    seo_keywords: list[str] = Field(default_factory=list)
    canonical_url: str | None = None
    meta_robots: str | None = None

    @field_validator("seo_keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        return coerce_keywords(value)

    @field_validator("images", mode="before")
    @classmethod
    def _images(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [v for v in value if isinstance(v, str)]


# --- Platform marketing pages ---

class PlatformPage(StoreRow):
    page_slug: str
    title: str
    description: str | None = None
    og_image: str | None = None
    keywords: list[str] = Field(default_factory=list)

    @field_validator("keywords", mode="before")
    @classmethod
    def _keywords(cls, value: Any) -> list[str]:
        return coerce_keywords(value)


def coerce_keywords(value: Any) -> list[str]:
    """Keywords arrive as a list, a comma string, or null."""
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    if isinstance(value, list):
        return [k.strip() for k in value if isinstance(k, str) and k.strip()]
    return []
