"""
Resolver component - hostname + path to SEORecord.

Walks the fallback chain over the Content Store:

1. Custom domain lookup by {raw, apex, www.+apex}
2. Domain connection selection (homepage, website, funnel, course area)
3. Entity resolution (website page, product, funnel step, course area)
4. Direct /site and /funnel addressing on system domains
5. Platform marketing pages for any other system-domain path

Invariants:
- Reads are sequential; the first match wins
- A failed read counts as "not found" and the chain carries on
- resolve() never raises; it returns None when nothing matches
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from src.components.classifier import (
    ClassifierConfig,
    ContentAddress,
    CustomDomainContent,
    SystemFunnelStep,
    SystemWebsitePage,
    Unknown,
    classify_path,
    normalize_hostname,
    path_segments,
)
from src.components.description import extract_description
from src.domain.entities import (
    CustomDomain,
    DomainConnection,
    Funnel,
    FunnelStep,
    Product,
    Website,
    WebsitePage,
)
from src.domain.sanitize import normalize_image_url
from src.domain.seo import SEODebug, SEORecord
from src.rules.models import Rules

from ._impl import (
    canonical_for,
    choose_text,
    domain_variants,
    fallback_title,
    first_of_type,
    first_text,
    funnel_image,
    has_path_prefix,
    is_uuid,
    product_slug,
    resolve_image,
    select_root_connection,
    website_image,
)
from .models import FieldChoice, RequestTarget, ResolverConfig
from .ports import ContentStoreError, ContentStorePort

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ContentResolver:
    """
    Resolves SEO metadata for one request against an injected store.

    Build one per request; it holds no cache.
    """

    def __init__(
        self,
        store: ContentStorePort,
        rules: Rules,
        *,
        trace_id: str | None = None,
    ) -> None:
        self._store = store
        self._config = ResolverConfig.from_rules(rules)
        self._classifier = ClassifierConfig.from_rules(rules)
        self._trace_id = trace_id or "-"

    # --- Entry point ---

    def resolve(
        self,
        hostname: str,
        pathname: str,
        address: ContentAddress | None = None,
    ) -> SEORecord | None:
        """Resolve a record, or None when no content matches."""
        host = normalize_hostname(hostname)
        path = pathname or "/"
        try:
            if address is None:
                address = classify_path(host, path, self._classifier)
            record = self._resolve_address(host, path, address)
        except Exception:
            logger.exception("[%s] Resolution failed for %s%s", self._trace_id, host, path)
            return None

        if record is None:
            logger.info("[%s] No content for %s%s", self._trace_id, host, path)
        else:
            logger.info("[%s] Resolved %s%s -> %s", self._trace_id, host, path, record.source)
        return record

    def _resolve_address(
        self, host: str, path: str, address: ContentAddress
    ) -> SEORecord | None:
        match address:
            case CustomDomainContent(segments=segments):
                target = RequestTarget(hostname=host, pathname=path, segments=segments)
                return self._resolve_custom_domain(target)
            case SystemWebsitePage(website_slug=website_slug, page_slug=page_slug):
                if address.is_root:
                    # Root canonical keeps the trailing slash.
                    target = RequestTarget(hostname=host, pathname=f"/site/{website_slug}/")
                else:
                    target = RequestTarget(hostname=host, pathname=path, segments=(page_slug,))
                website = self._read(
                    "website_by_slug", self._store.get_website_by_slug, website_slug
                )
                return self._resolve_website(website, target) if website else None
            case SystemFunnelStep(funnel_id=funnel_id, step_slug=step_slug):
                target = RequestTarget(hostname=host, pathname=path, segments=path_segments(path))
                return self._resolve_system_funnel(funnel_id, step_slug, target)
            case Unknown(segments=segments):
                target = RequestTarget(hostname=host, pathname=path, segments=segments)
                return self._resolve_platform_page(target)
        return None

    # --- Reads ---

    def _read(self, label: str, fn: Callable[..., T], *args: Any) -> T | None:
        """Run one store read; a failure is logged and treated as not found."""
        try:
            return fn(*args)
        except ContentStoreError as e:
            logger.warning("[%s] Content store read %s failed: %s", self._trace_id, label, e)
            return None

    # --- Custom domains ---

    def _resolve_custom_domain(self, target: RequestTarget) -> SEORecord | None:
        domain = self._read(
            "custom_domain", self._store.find_custom_domain, domain_variants(target.hostname)
        )
        if domain is None:
            return None

        connections = (
            self._read("domain_connections", self._store.list_domain_connections, domain.id) or []
        )
        if not connections:
            logger.info("[%s] Domain %s has no connections", self._trace_id, domain.domain)
            return None

        if target.is_root:
            conn = select_root_connection(connections)
            return self._resolve_connection(domain, conn, target, step=None) if conn else None

        conn, step = self._select_path_connection(connections, target)
        if conn is None:
            return None
        return self._resolve_connection(domain, conn, target, step=step)

    def _select_path_connection(
        self, connections: list[DomainConnection], target: RequestTarget
    ) -> tuple[DomainConnection | None, FunnelStep | None]:
        """
        Non-root selection.

        A published funnel step matching the last segment wins over a
        website page of the same slug.
        """
        if has_path_prefix(target, self._config.course_path_prefixes):
            course = first_of_type(connections, "course_area")
            if course is not None:
                return course, None

        website_conn = first_of_type(connections, "website")
        if website_conn is not None and product_slug(target, self._config.product_path_prefix):
            return website_conn, None

        for conn in connections:
            if conn.content_type != "funnel":
                continue
            step = self._read(
                "published_step",
                self._store.get_published_step,
                conn.content_id,
                target.last_segment,
            )
            if step is not None:
                return conn, step

        return website_conn, None

    def _resolve_connection(
        self,
        domain: CustomDomain,
        conn: DomainConnection,
        target: RequestTarget,
        *,
        step: FunnelStep | None,
    ) -> SEORecord | None:
        if conn.content_type == "website":
            website = self._read("website", self._store.get_website, conn.content_id)
            if website is None:
                return None
            return self._resolve_website(website, target, conn=conn)

        if conn.content_type == "funnel":
            funnel = self._read("funnel", self._store.get_funnel, conn.content_id)
            if funnel is None:
                return None
            if step is not None:
                return self._step_record(funnel, step, target, conn=conn)
            if target.is_root:
                return self._resolve_funnel_root(funnel, target, conn=conn)
            return None

        return self._course_area_record(domain, conn, target)

    # --- Websites ---

    def _resolve_website(
        self,
        website: Website,
        target: RequestTarget,
        *,
        conn: DomainConnection | None = None,
    ) -> SEORecord:
        """Website content; falls back to website-level SEO and never fails."""
        if target.is_root:
            page = self._read("homepage_page", self._store.get_homepage_page, website.id)
            if page is not None:
                return self._page_record(website, page, target, kind="homepage_page", conn=conn)
            return self._website_record(website, target, kind="website_root_fallback", conn=conn)

        slug = product_slug(target, self._config.product_path_prefix)
        if slug is not None:
            product = self._read(
                "active_product", self._store.get_active_product, slug, website.store_id
            )
            if product is not None:
                return self._product_record(website, product, target, conn=conn)

        page = self._read(
            "published_page", self._store.get_published_page, website.id, target.last_segment
        )
        if page is not None:
            return self._page_record(website, page, target, kind="website_page", conn=conn)
        return self._website_record(website, target, kind="website_fallback", conn=conn)

    def _page_record(
        self,
        website: Website,
        page: WebsitePage,
        target: RequestTarget,
        *,
        kind: str,
        conn: DomainConnection | None,
    ) -> SEORecord:
        fallback = fallback_title(page.title or page.slug, website.name)
        title = choose_text([("seo_title", page.seo_title)])
        description = self._describe(page.seo_description, page.content, fallback)
        image = resolve_image(
            [
                ("social_image_url", page.social_image_url),
                ("og_image", page.og_image),
                ("preview_image_url", page.preview_image_url),
            ],
            website_image(website),
        )
        return self._record(
            title=title.value or fallback,
            description=description.value or fallback,
            image=image,
            keywords=page.seo_keywords,
            canonical=canonical_for(target, page.canonical_url),
            robots=first_text(page.meta_robots) or self._config.default_robots,
            site_name=website.name,
            source=f"{kind}|website:{website.id}|page:{page.id}",
            debug=SEODebug(
                title_source=title.source or "fallback",
                desc_source=description.source,
                image_source=image.source,
                website_id=website.id,
                page_id=page.id,
                slug=page.slug,
                conn_type=conn.content_type if conn else None,
                conn_id=conn.id if conn else None,
            ),
        )

    def _website_record(
        self,
        website: Website,
        target: RequestTarget,
        *,
        kind: str,
        conn: DomainConnection | None,
    ) -> SEORecord:
        seo = website.settings.seo
        name = first_text(website.name, website.slug) or target.hostname
        title = choose_text([("settings.seo.title", seo.title), ("name", website.name)])
        description = choose_text(
            [("settings.seo.description", seo.description), ("description", website.description)]
        )
        image = website_image(website)
        return self._record(
            title=title.value or name,
            description=description.value or f"Welcome to {name}",
            image=image,
            keywords=(),
            canonical=canonical_for(target),
            robots=self._config.default_robots,
            site_name=name,
            source=f"{kind}|website:{website.id}",
            debug=SEODebug(
                title_source=title.source or "fallback",
                desc_source=description.source or "fallback",
                image_source=image.source,
                website_id=website.id,
                slug=target.last_segment or None,
                conn_type=conn.content_type if conn else None,
                conn_id=conn.id if conn else None,
            ),
        )

    def _product_record(
        self,
        website: Website,
        product: Product,
        target: RequestTarget,
        *,
        conn: DomainConnection | None,
    ) -> SEORecord:
        title = choose_text([("seo_title", product.seo_title)])
        description = self._describe(
            product.seo_description,
            product.description,
            f"{product.name} - Available at {website.name}",
        )
        image = resolve_image(
            [
                ("social_image_url", product.social_image_url),
                ("og_image", product.og_image),
                ("images[0]", product.images[0] if product.images else None),
            ],
            website_image(website),
        )
        return self._record(
            title=title.value or f"{product.name} | {website.name}",
            description=description.value or product.name,
            image=image,
            keywords=product.seo_keywords,
            canonical=canonical_for(target, product.canonical_url),
            robots=first_text(product.meta_robots) or self._config.default_robots,
            site_name=website.name,
            source=f"product_page|website:{website.id}|slug:{product.slug}",
            debug=SEODebug(
                title_source=title.source or "fallback",
                desc_source=description.source,
                image_source=image.source,
                website_id=website.id,
                slug=product.slug,
                conn_type=conn.content_type if conn else None,
                conn_id=conn.id if conn else None,
            ),
        )

    # --- Funnels ---

    def _resolve_system_funnel(
        self, identifier: str, step_slug: str | None, target: RequestTarget
    ) -> SEORecord | None:
        if is_uuid(identifier):
            funnel = self._read("funnel", self._store.get_funnel, identifier)
        else:
            funnel = self._read("funnel_by_slug", self._store.get_funnel_by_slug, identifier)
        if funnel is None:
            return None

        if step_slug is None:
            return self._resolve_funnel_root(funnel, target, conn=None)

        step = self._read("published_step", self._store.get_published_step, funnel.id, step_slug)
        if step is None:
            return None
        return self._step_record(funnel, step, target, conn=None)

    def _resolve_funnel_root(
        self, funnel: Funnel, target: RequestTarget, *, conn: DomainConnection | None
    ) -> SEORecord:
        step = self._read("first_step", self._store.get_first_published_step, funnel.id)
        if step is not None:
            return self._step_record(funnel, step, target, conn=conn)
        return self._funnel_landing_record(funnel, target, conn=conn)

    def _step_record(
        self,
        funnel: Funnel,
        step: FunnelStep,
        target: RequestTarget,
        *,
        conn: DomainConnection | None,
    ) -> SEORecord:
        fallback = fallback_title(step.name or step.slug, funnel.name)
        title = choose_text([("seo_title", step.seo_title)])
        description = self._describe(step.seo_description, step.content, fallback)
        image = resolve_image(
            [("social_image_url", step.social_image_url), ("og_image", step.og_image)],
            funnel_image(funnel),
        )
        return self._record(
            title=title.value or fallback,
            description=description.value or fallback,
            image=image,
            keywords=step.seo_keywords,
            canonical=canonical_for(target, step.canonical_url),
            robots=first_text(step.meta_robots) or self._config.default_robots,
            site_name=funnel.name,
            source=f"funnel_step|funnel:{funnel.id}|step:{step.id}",
            debug=SEODebug(
                title_source=title.source or "fallback",
                desc_source=description.source,
                image_source=image.source,
                conn_type="funnel",
                conn_id=conn.id if conn else funnel.id,
                step_slug=step.slug,
            ),
        )

    def _funnel_landing_record(
        self, funnel: Funnel, target: RequestTarget, *, conn: DomainConnection | None
    ) -> SEORecord:
        """A funnel with no published step still previews as itself."""
        name = first_text(funnel.name, funnel.slug) or funnel.id
        title = choose_text([("seo_title", funnel.seo_title)])
        description = choose_text([("seo_description", funnel.seo_description)])
        image = funnel_image(funnel)
        return self._record(
            title=title.value or name,
            description=description.value or f"Sales funnel: {name}",
            image=image,
            keywords=(),
            canonical=canonical_for(target),
            robots=first_text(funnel.meta_robots) or self._config.default_robots,
            site_name=name,
            source=f"funnel_landing|funnel:{funnel.id}",
            debug=SEODebug(
                title_source=title.source or "fallback",
                desc_source=description.source or "fallback",
                image_source=image.source,
                conn_type="funnel",
                conn_id=conn.id if conn else funnel.id,
            ),
        )

    # --- Course area and platform pages ---

    def _course_area_record(
        self, domain: CustomDomain, conn: DomainConnection, target: RequestTarget
    ) -> SEORecord:
        course = self._config.course_area
        return self._record(
            title=course.title,
            description=course.description,
            image=FieldChoice(value=None),
            keywords=(),
            canonical=canonical_for(target),
            robots=self._config.default_robots,
            site_name=course.site_name,
            source=f"course_area|domain:{domain.id}",
            debug=SEODebug(conn_type=conn.content_type, conn_id=conn.id),
        )

    def _resolve_platform_page(self, target: RequestTarget) -> SEORecord | None:
        page_slug = target.clean_path or "/"
        row = self._read("platform_page", self._store.get_platform_page, page_slug)
        if row is None:
            return None
        title = first_text(row.title)
        if title is None:
            return None
        image_url = normalize_image_url(row.og_image)
        return self._record(
            title=title,
            description=first_text(row.description) or title,
            image=FieldChoice(value=image_url, source="og_image" if image_url else None),
            keywords=row.keywords,
            canonical=canonical_for(target),
            robots=self._config.default_robots,
            site_name=self._config.platform_site_name,
            source=f"platform_page|slug:{page_slug}",
            debug=SEODebug(slug=page_slug),
        )

    # --- Assembly ---

    def _describe(
        self, seo_description: str | None, content: Any, fallback: str
    ) -> FieldChoice:
        explicit = choose_text([("seo_description", seo_description)])
        if explicit.value is not None:
            return explicit
        extracted = extract_description(content, self._config.description_max_length)
        if extracted:
            return FieldChoice(value=extracted, source="content")
        return FieldChoice(value=fallback, source="fallback")

    @staticmethod
    def _record(
        *,
        title: str,
        description: str,
        image: FieldChoice,
        keywords: Any,
        canonical: str,
        robots: str,
        site_name: str,
        source: str,
        debug: SEODebug,
    ) -> SEORecord:
        return SEORecord(
            title=title,
            description=description,
            og_image=image.value,
            keywords=tuple(keywords),
            canonical=canonical,
            robots=robots,
            site_name=site_name,
            source=source,
            debug=debug,
        )
