"""
Edge component - the platform-agnostic request handler.

Steps for every request:

1. Hostname from x-forwarded-host, then host, then the URL
2. Classify (no I/O)
3. Browser on a system domain: static SPA shell, nothing resolved
4. Otherwise resolve; no record means a minimal preview record
5. Crawler: SEO document. Browser on a custom domain: shell with the
   resolved head
6. Anything raised along the way: 500 with a plain-text body

Platform adapters (FastAPI route, Starlette middleware) only translate
their request/response types to EdgeRequest/EdgeResponse.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit
from uuid import uuid4

from src.components.classifier import (
    CustomDomainContent,
    RequestClassification,
    SystemFunnelStep,
    SystemWebsitePage,
    classify_request,
    normalize_hostname,
)
from src.components.render import render_seo_html, render_spa_shell
from src.domain.entities import DEFAULT_ROBOTS
from src.domain.sanitize import header_safe
from src.domain.seo import SEORecord

from .models import SOURCE_NO_DATA, SOURCE_SPA_SHELL, EdgeConfig, EdgeRequest, EdgeResponse
from .ports import ResolverFactory

logger = logging.getLogger(__name__)

HTML_CONTENT_TYPE = "text/html; charset=utf-8"
TEXT_CONTENT_TYPE = "text/plain; charset=utf-8"
ERROR_BODY = "Internal Server Error"

# Record debug field -> response header
DEBUG_HEADERS = {
    "title_source": "X-SEO-Title-Source",
    "desc_source": "X-SEO-Desc-Source",
    "image_source": "X-SEO-Image-Source",
    "slug": "X-SEO-Slug",
    "conn_type": "X-SEO-Conn-Type",
    "conn_id": "X-SEO-Conn-Id",
    "step_slug": "X-SEO-Step-Slug",
}


# --- Request helpers ---


def request_hostname(request: EdgeRequest) -> str:
    """Effective hostname: x-forwarded-host, then host, then the URL's own."""
    for name in ("x-forwarded-host", "host"):
        host = normalize_hostname(request.header(name))
        if host:
            return host
    return normalize_hostname(urlsplit(request.url).netloc)


def request_path(request: EdgeRequest) -> str:
    return urlsplit(request.url).path or "/"


def address_pattern(classification: RequestClassification) -> str:
    """Short name of the addressing scheme, for the X-SEO-Pattern header."""
    match classification.address:
        case CustomDomainContent():
            return "custom_domain"
        case SystemWebsitePage():
            return "site_slug"
        case SystemFunnelStep():
            return "funnel_route"
        case _:
            return "system"


# --- Records and headers ---


def minimal_record(classification: RequestClassification, request_url: str) -> SEORecord:
    """Preview record used when nothing in the store matches."""
    identifier = classification.identifier or "Preview"
    return SEORecord(
        title=identifier,
        description=f"Preview of {identifier}",
        canonical=request_url or f"https://{classification.hostname}{classification.pathname}",
        robots=DEFAULT_ROBOTS,
        site_name=identifier,
        source=SOURCE_NO_DATA,
    )


def cache_control(max_age: int) -> str:
    return f"public, max-age={max_age}, s-maxage={max_age}"


def build_headers(
    *,
    trace_id: str,
    source: str,
    max_age: int,
    classification: RequestClassification,
    seo: SEORecord | None = None,
) -> dict[str, str]:
    headers = {
        "Content-Type": HTML_CONTENT_TYPE,
        "Cache-Control": cache_control(max_age),
        "X-Trace-Id": trace_id,
        "X-SEO-Source": header_safe(source),
        "X-SEO-Pattern": address_pattern(classification),
        "X-SEO-Path": header_safe(classification.pathname),
        "X-SEO-Domain": header_safe(classification.hostname),
    }
    if seo is None:
        return headers

    debug = seo.debug
    if debug.website_id:
        headers["X-SEO-Website"] = header_safe(debug.website_id)
    if debug.page_id:
        headers["X-SEO-Page"] = header_safe(debug.page_id)
    for field_name, header_name in DEBUG_HEADERS.items():
        value = getattr(debug, field_name)
        if value:
            headers[header_name] = header_safe(value)
    return headers


# --- Entry point ---


def handle_edge_request(
    request: EdgeRequest,
    *,
    config: EdgeConfig,
    resolver_factory: ResolverFactory,
) -> EdgeResponse:
    """Answer one request. Never raises."""
    trace_id = str(uuid4())
    try:
        return _handle(request, trace_id, config, resolver_factory)
    except Exception:
        logger.exception("[%s] Edge handler failed for %s", trace_id, request.url)
        return EdgeResponse(
            status=500,
            headers={"Content-Type": TEXT_CONTENT_TYPE, "X-Trace-Id": trace_id},
            body=ERROR_BODY,
        )


def _handle(
    request: EdgeRequest,
    trace_id: str,
    config: EdgeConfig,
    resolver_factory: ResolverFactory,
) -> EdgeResponse:
    hostname = request_hostname(request)
    classification = classify_request(
        hostname, request_path(request), request.header("user-agent"), config.classifier
    )
    logger.info(
        "[%s] %s %s%s crawler=%s system=%s",
        trace_id,
        request.method,
        classification.hostname,
        classification.pathname,
        classification.is_crawler,
        classification.is_system_domain,
    )

    if not classification.should_resolve:
        return EdgeResponse(
            status=200,
            headers=build_headers(
                trace_id=trace_id,
                source=SOURCE_SPA_SHELL,
                max_age=config.shell_max_age,
                classification=classification,
            ),
            body=render_spa_shell(config.render),
            passthrough=True,
        )

    resolver = resolver_factory(trace_id)
    seo = resolver.resolve(
        classification.hostname, classification.pathname, classification.address
    )
    if seo is None:
        seo = minimal_record(classification, request.url)
        max_age = config.fallback_max_age
        logger.info("[%s] Serving minimal record for %s", trace_id, classification.identifier)
    else:
        max_age = config.resolved_max_age

    if classification.is_crawler:
        body = render_seo_html(seo, request.url, config=config.render)
    else:
        body = render_spa_shell(config.render, seo)

    return EdgeResponse(
        status=200,
        headers=build_headers(
            trace_id=trace_id,
            source=seo.source,
            max_age=max_age,
            classification=classification,
            seo=seo,
        ),
        body=body,
    )
