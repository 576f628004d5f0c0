"""
Tests for the platform-agnostic edge handler.
"""

from __future__ import annotations

import pytest

from src.components.edge import (
    SOURCE_NO_DATA,
    SOURCE_SPA_SHELL,
    EdgeConfig,
    EdgeRequest,
    EdgeResponse,
    handle_edge_request,
    request_hostname,
)
from src.components.resolver import ContentResolver
from src.domain.entities import WebsitePage
from src.rules.models import Rules
from tests.conftest import FakeContentStore

CRAWLER_UA = "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"
BROWSER_UA = "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) AppleWebKit/605.1.15 Safari/605.1.15"


def run(
    store: FakeContentStore,
    rules: Rules,
    config: EdgeConfig,
    url: str,
    user_agent: str = CRAWLER_UA,
    **headers: str,
) -> EdgeResponse:
    host = url.split("/")[2]
    request = EdgeRequest(url=url, headers={"Host": host, "User-Agent": user_agent, **headers})
    return handle_edge_request(
        request,
        config=config,
        resolver_factory=lambda trace_id: ContentResolver(store, rules, trace_id=trace_id),
    )


class TestRequestHostname:
    """Effective hostname selection."""

    def test_forwarded_host_wins(self) -> None:
        request = EdgeRequest(
            url="https://edge.internal/x",
            headers={"X-Forwarded-Host": "shop.example.com", "Host": "edge.internal"},
        )
        assert request_hostname(request) == "shop.example.com"

    def test_host_header(self) -> None:
        request = EdgeRequest(
            url="https://edge.internal/x", headers={"host": "Shop.Example.com:8443"}
        )
        assert request_hostname(request) == "shop.example.com"

    def test_url_fallback(self) -> None:
        assert request_hostname(EdgeRequest(url="https://shop.example.com/x")) == (
            "shop.example.com"
        )


class TestSystemDomainBrowser:
    """Ordinary app traffic never reaches the store."""

    def test_serves_shell_without_reads(
        self, store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        response = run(
            store, rules, edge_config, "https://app.ecombuildr.com/dashboard", BROWSER_UA
        )
        assert store.reads == 0
        assert response.status == 200
        assert response.passthrough is True
        assert response.headers["X-SEO-Source"] == SOURCE_SPA_SHELL
        assert response.headers["Cache-Control"] == "public, max-age=60, s-maxage=60"
        assert '<div id="root"></div>' in response.body

    def test_factory_not_called(self, edge_config: EdgeConfig) -> None:
        def factory(trace_id: str) -> ContentResolver:
            raise AssertionError("resolver must not be built")

        response = handle_edge_request(
            EdgeRequest(url="https://ecombuildr.com/", headers={"User-Agent": BROWSER_UA}),
            config=edge_config,
            resolver_factory=factory,
        )
        assert response.status == 200
        assert response.passthrough is True


class TestCrawlerRequests:
    """Crawler traffic gets the SEO document."""

    def test_resolved_custom_domain(
        self, acme_store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        acme_store.pages.append(
            WebsitePage(
                id="p1",
                website_id="w1",
                slug="about",
                title="About Us",
                is_published=True,
            )
        )
        response = run(acme_store, rules, edge_config, "https://shop.example.com/about")

        assert response.status == 200
        assert response.passthrough is False
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"
        assert response.headers["Cache-Control"] == "public, max-age=300, s-maxage=300"
        assert response.headers["X-SEO-Source"] == "website_page|website:w1|page:p1"
        assert response.headers["X-SEO-Pattern"] == "custom_domain"
        assert response.headers["X-SEO-Domain"] == "shop.example.com"
        assert response.headers["X-SEO-Path"] == "/about"
        assert response.headers["X-SEO-Website"] == "w1"
        assert response.headers["X-SEO-Page"] == "p1"
        assert response.headers["X-SEO-Title-Source"] == "fallback"
        assert response.headers["X-SEO-Conn-Type"] == "website"
        assert response.headers["X-Trace-Id"]
        assert "<title>About Us - Acme</title>" in response.body
        assert "window.location.reload()" in response.body

    def test_minimal_record_when_nothing_resolves(
        self, store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        response = run(store, rules, edge_config, "https://unknown.example.org/")
        assert response.status == 200
        assert response.headers["X-SEO-Source"] == SOURCE_NO_DATA
        assert response.headers["Cache-Control"] == "public, max-age=120, s-maxage=120"
        assert "<title>unknown.example.org</title>" in response.body
        assert '<meta name="description" content="Preview of unknown.example.org" />' in (
            response.body
        )
        assert '<meta name="robots" content="index, follow" />' in response.body

    def test_minimal_record_uses_site_slug(
        self, store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        response = run(store, rules, edge_config, "https://app.ecombuildr.com/site/ghost/about")
        assert response.headers["X-SEO-Pattern"] == "site_slug"
        assert "<title>ghost</title>" in response.body

    def test_store_outage_still_answers(
        self, acme_store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        acme_store.failing.add("*")
        response = run(acme_store, rules, edge_config, "https://shop.example.com/")
        assert response.status == 200
        assert response.headers["X-SEO-Source"] == SOURCE_NO_DATA

    def test_tenant_headers_are_sanitized(
        self, store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        response = run(store, rules, edge_config, "https://shop.example.com/a%0d%0ab")
        for value in response.headers.values():
            assert "\r" not in value and "\n" not in value


class TestCustomDomainBrowser:
    """Browsers on tenant domains get the shell with the tenant head."""

    def test_shell_with_injected_head(
        self, acme_store: FakeContentStore, rules: Rules, edge_config: EdgeConfig
    ) -> None:
        response = run(acme_store, rules, edge_config, "https://shop.example.com/", BROWSER_UA)
        assert response.status == 200
        assert response.passthrough is False
        assert acme_store.reads > 0
        assert "<title>Acme</title>" in response.body
        assert '<script type="module" crossorigin src="/assets/index.js"></script>' in (
            response.body
        )
        assert "window.location.reload()" not in response.body


class TestFailures:
    """Unexpected exceptions become a plain 500."""

    def test_factory_error(self, edge_config: EdgeConfig) -> None:
        def factory(trace_id: str) -> ContentResolver:
            raise RuntimeError("secret connection string")

        response = handle_edge_request(
            EdgeRequest(url="https://shop.example.com/", headers={"User-Agent": CRAWLER_UA}),
            config=edge_config,
            resolver_factory=factory,
        )
        assert response.status == 500
        assert response.body == "Internal Server Error"
        assert response.headers["Content-Type"] == "text/plain; charset=utf-8"
        assert "secret" not in response.body
        assert response.headers["X-Trace-Id"]

    @pytest.mark.parametrize("headers", [{}, {"Host": ""}, {"User-Agent": ""}])
    def test_missing_headers(
        self, store: FakeContentStore, edge_config: EdgeConfig, headers: dict[str, str]
    ) -> None:
        response = handle_edge_request(
            EdgeRequest(url="/", headers=headers),
            config=edge_config,
            resolver_factory=lambda trace_id: pytest.fail("no resolution expected"),
        )
        assert response.status == 200
        assert response.passthrough is True
