"""
SQLite Content Store - read-only projections for local runs and tests.
"""

import json
import logging
import sqlite3
from collections.abc import Sequence
from typing import Any, TypeVar

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

# Columns stored as JSON text
JSON_COLUMNS = frozenset(
    {"settings", "content", "description", "images", "seo_keywords", "keywords"}
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def decode_row(row: dict[str, Any]) -> dict[str, Any]:
    """
    Decode JSON columns.

    Only objects and arrays replace the stored text; scalars such as "2024"
    or "true" and text that is not JSON are kept as-is.
    """
    decoded = dict(row)
    for key in JSON_COLUMNS & decoded.keys():
        value = decoded[key]
        if not isinstance(value, str):
            continue
        try:
            parsed = json.loads(value)
        except json.JSONDecodeError:
            continue
        if isinstance(parsed, dict | list):
            decoded[key] = parsed
    return decoded


class SQLiteContentStore:
    """ContentStorePort over a local SQLite file."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def _fetch_all(self, sql: str, params: Sequence[Any]) -> list[dict[str, Any]]:
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise ContentStoreError(f"Cannot open {self.db_path}: {e}") from e
        try:
            return [decode_row(r) for r in conn.execute(sql, tuple(params)).fetchall()]
        except sqlite3.Error as e:
            raise ContentStoreError(f"Query failed: {e}") from e
        finally:
            conn.close()

    def _fetch_one(self, model: type[M], sql: str, params: Sequence[Any]) -> M | None:
        rows = self._fetch_all(sql, params)
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
        placeholders = ", ".join("?" for _ in domains)
        rows = self._fetch_all(
            f"SELECT * FROM custom_domains WHERE domain IN ({placeholders})", domains
        )
        # Prefer the variant listed first (the raw hostname).
        rank = {d: i for i, d in enumerate(domains)}
        for row in sorted(rows, key=lambda r: rank.get(r["domain"], len(rank))):
            domain = self._to_model(CustomDomain, row)
            if domain is not None:
                return domain
        return None

    def list_domain_connections(self, domain_id: str) -> list[DomainConnection]:
        rows = self._fetch_all(
            "SELECT * FROM domain_connections WHERE domain_id = ? ORDER BY rowid", (domain_id,)
        )
        connections = [self._to_model(DomainConnection, r) for r in rows]
        return [c for c in connections if c is not None]

    # --- Websites ---

    def get_website(self, website_id: str) -> Website | None:
        return self._fetch_one(
            Website, "SELECT * FROM websites WHERE id = ? AND is_active = 1", (website_id,)
        )

    def get_website_by_slug(self, slug: str) -> Website | None:
        return self._fetch_one(
            Website, "SELECT * FROM websites WHERE slug = ? AND is_active = 1", (slug,)
        )

    def get_homepage_page(self, website_id: str) -> WebsitePage | None:
        return self._fetch_one(
            WebsitePage,
            """
            SELECT * FROM website_pages
            WHERE website_id = ? AND is_homepage = 1 AND is_published = 1
            ORDER BY rowid LIMIT 1
            """,
            (website_id,),
        )

    def get_published_page(self, website_id: str, slug: str) -> WebsitePage | None:
        return self._fetch_one(
            WebsitePage,
            """
            SELECT * FROM website_pages
            WHERE website_id = ? AND slug = ? AND is_published = 1
            ORDER BY rowid LIMIT 1
            """,
            (website_id, slug),
        )

    # --- Funnels ---

    def get_funnel(self, funnel_id: str) -> Funnel | None:
        return self._fetch_one(
            Funnel, "SELECT * FROM funnels WHERE id = ? AND is_active = 1", (funnel_id,)
        )

    def get_funnel_by_slug(self, slug: str) -> Funnel | None:
        return self._fetch_one(
            Funnel,
            "SELECT * FROM funnels WHERE slug = ? AND is_active = 1 ORDER BY rowid LIMIT 1",
            (slug,),
        )

    def get_first_published_step(self, funnel_id: str) -> FunnelStep | None:
        return self._fetch_one(
            FunnelStep,
            """
            SELECT * FROM funnel_steps
            WHERE funnel_id = ? AND is_published = 1
            ORDER BY step_order ASC, rowid ASC LIMIT 1
            """,
            (funnel_id,),
        )

    def get_published_step(self, funnel_id: str, slug: str) -> FunnelStep | None:
        return self._fetch_one(
            FunnelStep,
            """
            SELECT * FROM funnel_steps
            WHERE funnel_id = ? AND slug = ? AND is_published = 1
            ORDER BY rowid LIMIT 1
            """,
            (funnel_id, slug),
        )

    # --- Products ---

    def get_active_product(self, slug: str, store_id: str | None) -> Product | None:
        if store_id is None:
            return self._fetch_one(
                Product,
                "SELECT * FROM products WHERE slug = ? AND is_active = 1 ORDER BY rowid LIMIT 1",
                (slug,),
            )
        return self._fetch_one(
            Product,
            """
            SELECT * FROM products
            WHERE slug = ? AND store_id = ? AND is_active = 1
            ORDER BY rowid LIMIT 1
            """,
            (slug, store_id),
        )

    # --- Platform pages ---

    def get_platform_page(self, page_slug: str) -> PlatformPage | None:
        return self._fetch_one(
            PlatformPage, "SELECT * FROM seo_pages WHERE page_slug = ?", (page_slug,)
        )
