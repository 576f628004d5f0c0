"""
Classifier component - request classification before any I/O.

Decides from hostname, path and user agent alone whether a request is
crawler traffic, whether it targets a system or a custom domain, and which
content-addressing scheme its path uses.

Invariants:
- Pure: no I/O, no state
- Never raises, whatever the header values look like
"""

from __future__ import annotations

from .models import (
    HOMEPAGE_SENTINEL,
    ClassifierConfig,
    ContentAddress,
    CustomDomainContent,
    RequestClassification,
    SystemFunnelStep,
    SystemWebsitePage,
    Unknown,
)

# --- Normalization ---


def normalize_hostname(hostname: str | None) -> str:
    """Lower-case, drop the port and any trailing dot."""
    if not isinstance(hostname, str):
        return ""
    host = hostname.strip().lower()
    # A comma-separated forwarded header lists the original host first.
    host = host.split(",")[0].strip()
    if host.startswith("["):
        # IPv6 literal, keep as-is without the port
        return host.split("]")[0] + "]"
    host = host.split(":")[0]
    return host.rstrip(".")


def path_segments(pathname: str | None) -> tuple[str, ...]:
    """Non-empty path segments, query string and fragment removed."""
    if not isinstance(pathname, str):
        return ()
    path = pathname.split("?")[0].split("#")[0]
    return tuple(s for s in path.split("/") if s)


# --- Predicates ---


def is_social_crawler(user_agent: str | None, config: ClassifierConfig) -> bool:
    """Case-insensitive substring match against the crawler allow-list."""
    if not isinstance(user_agent, str) or not user_agent:
        return False
    ua = user_agent.lower()
    return any(token in ua for token in config.crawler_tokens)


def is_system_domain(hostname: str | None, config: ClassifierConfig) -> bool:
    """True for the SaaS's own apex and preview hostnames."""
    host = normalize_hostname(hostname)
    if not host:
        # No usable host header: treat as first-party so nothing is resolved.
        return True
    return any(domain in host for domain in config.system_domains)


# --- Path classification ---


def classify_path(
    hostname: str | None, pathname: str | None, config: ClassifierConfig
) -> ContentAddress:
    """
    Map a request path to a ContentAddress.

    /site and /funnel patterns apply to system domains only; on a tenant
    domain every path is opaque and resolved through its connections.
    """
    segments = path_segments(pathname)

    if not is_system_domain(hostname, config):
        return CustomDomainContent(
            last_path_segment=segments[-1] if segments else "",
            segments=segments,
        )

    if segments and segments[0] == "site" and len(segments) in (2, 3):
        page_slug = segments[2] if len(segments) == 3 else HOMEPAGE_SENTINEL
        return SystemWebsitePage(website_slug=segments[1], page_slug=page_slug)

    if segments and segments[0] == "funnel" and len(segments) in (2, 3):
        step_slug = segments[2] if len(segments) == 3 else None
        return SystemFunnelStep(funnel_id=segments[1], step_slug=step_slug)

    return Unknown(segments=segments)


def classify_request(
    hostname: str | None,
    pathname: str | None,
    user_agent: str | None,
    config: ClassifierConfig,
) -> RequestClassification:
    """Run all classifier checks for one request."""
    host = normalize_hostname(hostname)
    path = pathname if isinstance(pathname, str) and pathname else "/"
    return RequestClassification(
        hostname=host,
        pathname=path,
        is_crawler=is_social_crawler(user_agent, config),
        is_system_domain=is_system_domain(host, config),
        address=classify_path(host, path, config),
    )
