from collections.abc import Sequence
from pathlib import Path

import pytest

from src.adapters.sqlite.migrator import MIGRATIONS_DIR, SQLiteMigrator
from src.components.edge import EdgeConfig
from src.components.resolver import ContentResolver, ContentStoreError
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
from src.rules.loader import load_rules
from src.rules.models import Rules

ROOT = Path(__file__).resolve().parents[1]


class FakeContentStore:
    """
    In-memory ContentStorePort with a read counter.

    Put a method name in `failing` (or "*") to make that read raise
    ContentStoreError.
    """

    def __init__(self) -> None:
        self.domains: list[CustomDomain] = []
        self.connections: list[DomainConnection] = []
        self.websites: list[Website] = []
        self.pages: list[WebsitePage] = []
        self.funnels: list[Funnel] = []
        self.steps: list[FunnelStep] = []
        self.products: list[Product] = []
        self.platform_pages: list[PlatformPage] = []
        self.failing: set[str] = set()
        self.calls: list[str] = []

    @property
    def reads(self) -> int:
        return len(self.calls)

    def _hit(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failing or "*" in self.failing:
            raise ContentStoreError(f"{name} unavailable")

    # --- ContentStorePort ---

    def find_custom_domain(self, domains: Sequence[str]) -> CustomDomain | None:
        self._hit("find_custom_domain")
        for wanted in domains:
            for d in self.domains:
                if d.domain == wanted:
                    return d
        return None

    def list_domain_connections(self, domain_id: str) -> list[DomainConnection]:
        self._hit("list_domain_connections")
        return [c for c in self.connections if c.domain_id == domain_id]

    def get_website(self, website_id: str) -> Website | None:
        self._hit("get_website")
        return next((w for w in self.websites if w.id == website_id), None)

    def get_website_by_slug(self, slug: str) -> Website | None:
        self._hit("get_website_by_slug")
        return next((w for w in self.websites if w.slug == slug), None)

    def get_homepage_page(self, website_id: str) -> WebsitePage | None:
        self._hit("get_homepage_page")
        return next(
            (
                p
                for p in self.pages
                if p.website_id == website_id and p.is_homepage and p.is_published
            ),
            None,
        )

    def get_published_page(self, website_id: str, slug: str) -> WebsitePage | None:
        self._hit("get_published_page")
        return next(
            (
                p
                for p in self.pages
                if p.website_id == website_id and p.slug == slug and p.is_published
            ),
            None,
        )

    def get_funnel(self, funnel_id: str) -> Funnel | None:
        self._hit("get_funnel")
        return next((f for f in self.funnels if f.id == funnel_id), None)

    def get_funnel_by_slug(self, slug: str) -> Funnel | None:
        self._hit("get_funnel_by_slug")
        return next((f for f in self.funnels if f.slug == slug), None)

    def get_first_published_step(self, funnel_id: str) -> FunnelStep | None:
        self._hit("get_first_published_step")
        steps = [s for s in self.steps if s.funnel_id == funnel_id and s.is_published]
        return min(steps, key=lambda s: s.step_order) if steps else None

    def get_published_step(self, funnel_id: str, slug: str) -> FunnelStep | None:
        self._hit("get_published_step")
        return next(
            (
                s
                for s in self.steps
                if s.funnel_id == funnel_id and s.slug == slug and s.is_published
            ),
            None,
        )

    def get_active_product(self, slug: str, store_id: str | None) -> Product | None:
        self._hit("get_active_product")
        return next(
            (
                p
                for p in self.products
                if p.slug == slug
                and p.is_active
                and (store_id is None or p.store_id == store_id)
            ),
            None,
        )

    def get_platform_page(self, page_slug: str) -> PlatformPage | None:
        self._hit("get_platform_page")
        return next((p for p in self.platform_pages if p.page_slug == page_slug), None)


# --- Fixtures ---


@pytest.fixture
def rules() -> Rules:
    """Real rules from the project root, without environment overrides."""
    return load_rules(ROOT / "rules.yaml", env={})


@pytest.fixture
def edge_config(rules: Rules) -> EdgeConfig:
    return EdgeConfig.from_rules(rules)


@pytest.fixture
def store() -> FakeContentStore:
    return FakeContentStore()


@pytest.fixture
def resolver(store: FakeContentStore, rules: Rules) -> ContentResolver:
    return ContentResolver(store, rules, trace_id="test-trace")


@pytest.fixture
def acme_store(store: FakeContentStore) -> FakeContentStore:
    """
    shop.example.com -> d1 -> website w1 ("Acme"), flagged as homepage.

    No WebsitePage rows; tests add what they need.
    """
    store.domains.append(CustomDomain(id="d1", domain="shop.example.com", store_id="s1"))
    store.connections.append(
        DomainConnection(
            id="c1", domain_id="d1", content_type="website", content_id="w1", is_homepage=True
        )
    )
    store.websites.append(Website(id="w1", name="Acme", slug="acme", store_id="s1"))
    return store


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """A migrated, empty SQLite Content Store."""
    path = str(tmp_path / "content.db")
    SQLiteMigrator(path, MIGRATIONS_DIR).run_migrations()
    return path
