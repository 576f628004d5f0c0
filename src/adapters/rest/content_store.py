"""
REST Content Store - PostgREST reads over httpx.

Queries the hosted Postgres REST API with the usual PostgREST filter
syntax (eq., in., order, limit). Transport errors, error statuses and
undecodable payloads all surface as ContentStoreError.
"""

import logging
from collections.abc import Sequence
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.components.resolver.ports import ContentStoreError
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

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

REST_PREFIX = "/rest/v1"
DEFAULT_TIMEOUT = 5.0


def eq(value: str) -> str:
    return f"eq.{value}"


def in_list(values: Sequence[str]) -> str:
    """PostgREST in.() filter with every value double-quoted."""
    quoted = ",".join('"' + v.replace("\\", "\\\\").replace('"', '\\"') + '"' for v in values)
    return f"in.({quoted})"


class RestContentStore:
    """ContentStorePort backed by a PostgREST endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/") + REST_PREFIX,
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "RestContentStore":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    # --- HTTP ---

    def _select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        query = {"select": "*", **params}
        try:
            response = self._client.get(f"/{table}", params=query)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ContentStoreError(
                f"{table}: HTTP {e.response.status_code} from content store"
            ) from e
        except httpx.HTTPError as e:
            raise ContentStoreError(f"{table}: {e.__class__.__name__}: {e}") from e
        except ValueError as e:
            raise ContentStoreError(f"{table}: invalid JSON payload") from e

        if not isinstance(payload, list):
            raise ContentStoreError(f"{table}: expected a JSON array")
        return [row for row in payload if isinstance(row, dict)]

    def _select_one(self, model: type[M], table: str, params: dict[str, str]) -> M | None:
        rows = self._select(table, {**params, "limit": "1"})
        return self._to_model(model, rows[0]) if rows else None

    @staticmethod
    def _to_model(model: type[M], row: dict[str, Any]) -> M | None:
        try:
            return model.model_validate(row)
        except ValidationError as e:
            logger.warning("Skipping malformed %s row: %s", model.__name__, e)
            return None

    # --- Domains ---

    def find_custom_domain(self, domains: Sequence[str]) -> CustomDomain | None:
        if not domains:
            return None
        rows = self._select("custom_domains", {"domain": in_list(domains)})
        rank = {d: i for i, d in enumerate(domains)}
        for row in sorted(rows, key=lambda r: rank.get(r.get("domain"), len(rank))):
            domain = self._to_model(CustomDomain, row)
            if domain is not None:
                return domain
        return None

    def list_domain_connections(self, domain_id: str) -> list[DomainConnection]:
        rows = self._select(
            "domain_connections", {"domain_id": eq(domain_id), "order": "created_at.asc"}
        )
        connections = [self._to_model(DomainConnection, r) for r in rows]
        return [c for c in connections if c is not None]

    # --- Websites ---

    def get_website(self, website_id: str) -> Website | None:
        return self._select_one(
            Website, "websites", {"id": eq(website_id), "is_active": "eq.true"}
        )

    def get_website_by_slug(self, slug: str) -> Website | None:
        return self._select_one(Website, "websites", {"slug": eq(slug), "is_active": "eq.true"})

    def get_homepage_page(self, website_id: str) -> WebsitePage | None:
        return self._select_one(
            WebsitePage,
            "website_pages",
            {
                "website_id": eq(website_id),
                "is_homepage": "eq.true",
                "is_published": "eq.true",
            },
        )

    def get_published_page(self, website_id: str, slug: str) -> WebsitePage | None:
        return self._select_one(
            WebsitePage,
            "website_pages",
            {"website_id": eq(website_id), "slug": eq(slug), "is_published": "eq.true"},
        )

    # --- Funnels ---

    def get_funnel(self, funnel_id: str) -> Funnel | None:
        return self._select_one(Funnel, "funnels", {"id": eq(funnel_id), "is_active": "eq.true"})

    def get_funnel_by_slug(self, slug: str) -> Funnel | None:
        return self._select_one(Funnel, "funnels", {"slug": eq(slug), "is_active": "eq.true"})

    def get_first_published_step(self, funnel_id: str) -> FunnelStep | None:
        return self._select_one(
            FunnelStep,
            "funnel_steps",
            {
                "funnel_id": eq(funnel_id),
                "is_published": "eq.true",
                "order": "step_order.asc",
            },
        )

    def get_published_step(self, funnel_id: str, slug: str) -> FunnelStep | None:
        return self._select_one(
            FunnelStep,
            "funnel_steps",
            {"funnel_id": eq(funnel_id), "slug": eq(slug), "is_published": "eq.true"},
        )

    # --- Products ---

    def get_active_product(self, slug: str, store_id: str | None) -> Product | None:
        params = {"slug": eq(slug), "is_active": "eq.true"}
        if store_id is not None:
            params["store_id"] = eq(store_id)
        return self._select_one(Product, "products", params)

    # --- Platform pages ---

    def get_platform_page(self, page_slug: str) -> PlatformPage | None:
        return self._select_one(PlatformPage, "seo_pages", {"page_slug": eq(page_slug)})
