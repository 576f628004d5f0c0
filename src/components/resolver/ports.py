"""
Resolver component - Port interfaces.

The Content Store is read-only: resolution never writes.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.domain.entities import (
    CustomDomain,
    DomainConnection,
    Funnel,
    FunnelStep,
    PlatformPage,
    Product,
    Website,
    WebsitePage,
)


class ContentStoreError(Exception):
    """A Content Store read failed (transport, status or payload)."""


class ContentStorePort(Protocol):
    """
    Read-only projections of tenant content.

    Every lookup returns None (or an empty list) when nothing matches and
    raises ContentStoreError when the backend cannot answer.
    """

    def find_custom_domain(self, domains: Sequence[str]) -> CustomDomain | None:
        """First custom domain whose hostname is in `domains`."""
        ...

    def list_domain_connections(self, domain_id: str) -> list[DomainConnection]:
        """All connections of a custom domain, in storage order."""
        ...

    def get_website(self, website_id: str) -> Website | None:
        """Active website by id."""
        ...

    def get_website_by_slug(self, slug: str) -> Website | None:
        """Active website by slug."""
        ...

    def get_homepage_page(self, website_id: str) -> WebsitePage | None:
        """Published page flagged as the website homepage."""
        ...

    def get_published_page(self, website_id: str, slug: str) -> WebsitePage | None:
        """Published website page by slug."""
        ...

    def get_funnel(self, funnel_id: str) -> Funnel | None:
        """Active funnel by id."""
        ...

    def get_funnel_by_slug(self, slug: str) -> Funnel | None:
        """Active funnel by slug."""
        ...

    def get_first_published_step(self, funnel_id: str) -> FunnelStep | None:
        """Published step with the lowest step_order."""
        ...

    def get_published_step(self, funnel_id: str, slug: str) -> FunnelStep | None:
        """Published funnel step by slug."""
        ...

    def get_active_product(self, slug: str, store_id: str | None) -> Product | None:
        """Active product by slug, scoped to a store when one is given."""
        ...

    def get_platform_page(self, page_slug: str) -> PlatformPage | None:
        """SEO row for one of the platform's own marketing pages."""
        ...
