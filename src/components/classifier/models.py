"""
Classifier component models.

ContentAddress is a closed union describing how a request path addresses
content:

    ContentAddress = SystemWebsitePage | SystemFunnelStep
                   | CustomDomainContent | Unknown
"""

from __future__ import annotations

from dataclasses import dataclass, field

from src.rules.models import Rules

HOMEPAGE_SENTINEL = "homepage"


# --- Configuration ---


@dataclass(frozen=True)
class ClassifierConfig:
    """Crawler tokens and first-party domains, from rules."""

    crawler_tokens: tuple[str, ...] = ()
    system_domains: tuple[str, ...] = ()

    @classmethod
    def from_rules(cls, rules: Rules) -> ClassifierConfig:
        return cls(
            crawler_tokens=tuple(t.lower() for t in rules.crawlers.tokens()),
            system_domains=tuple(d.lower() for d in rules.domains.system),
        )


# --- Content addresses ---


@dataclass(frozen=True)
class SystemWebsitePage:
    """/site/:website_slug(/:page_slug)? on a system domain."""

    website_slug: str
    page_slug: str = HOMEPAGE_SENTINEL

    @property
    def is_root(self) -> bool:
        return self.page_slug == HOMEPAGE_SENTINEL


@dataclass(frozen=True)
class SystemFunnelStep:
    """/funnel/:funnel_id(/:step_slug)? on a system domain."""

    funnel_id: str
    step_slug: str | None = None

    @property
    def is_root(self) -> bool:
        return self.step_slug is None


@dataclass(frozen=True)
class CustomDomainContent:
    """Any path on a tenant hostname; the slug is ambiguous until resolved."""

    last_path_segment: str
    segments: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_root(self) -> bool:
        return not self.segments

    @property
    def clean_path(self) -> str:
        return "/".join(self.segments)


@dataclass(frozen=True)
class Unknown:
    """A system-domain path outside /site and /funnel."""

    segments: tuple[str, ...] = field(default_factory=tuple)


ContentAddress = SystemWebsitePage | SystemFunnelStep | CustomDomainContent | Unknown


# --- Output ---


@dataclass(frozen=True)
class RequestClassification:
    """Everything the edge handler needs to decide before any I/O."""

    hostname: str
    pathname: str
    is_crawler: bool
    is_system_domain: bool
    address: ContentAddress

    @property
    def is_custom_domain(self) -> bool:
        return not self.is_system_domain

    @property
    def should_resolve(self) -> bool:
        """Ordinary browser traffic on system domains never touches the store."""
        return self.is_crawler or self.is_custom_domain

    @property
    def identifier(self) -> str:
        """Human-readable subject of the request, used by the minimal fallback."""
        match self.address:
            case SystemWebsitePage(website_slug=slug):
                return slug
            case SystemFunnelStep(funnel_id=funnel_id):
                return funnel_id
            case _:
                return self.hostname
