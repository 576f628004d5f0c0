"""
SEO edge middleware - Pages-style adapter.

Wraps an app that serves the SPA build itself (static files, another
router). Only crawler page requests are answered by the edge core; browser
traffic and file requests such as /robots.txt or /favicon.ico always reach
the wrapped app, which owns the real index.html.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.components.classifier import is_social_crawler
from src.components.edge import (
    EdgeConfig,
    EdgeRequest,
    ResolverFactory,
    ResolverPort,
    handle_edge_request,
)

logger = logging.getLogger(__name__)

HANDLED_METHODS = frozenset({"GET", "HEAD"})


def has_file_extension(path: str) -> bool:
    """True for paths whose last segment looks like a file name."""
    last = path.rstrip("/").rsplit("/", 1)[-1]
    return "." in last.lstrip(".")


class ClosingResolverFactory:
    """Resolver factory wrapper that remembers what to close afterwards."""

    def __init__(self, factory: Callable[[], ResolverFactory]) -> None:
        self._make = factory
        self._inner: ResolverFactory | None = None

    def __call__(self, trace_id: str) -> ResolverPort:
        if self._inner is None:
            self._inner = self._make()
        return self._inner(trace_id)

    def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if callable(close):
            close()


class SEOEdgeMiddleware(BaseHTTPMiddleware):
    """
    Answer crawler page requests at the edge, pass the rest through.

    Args:
        app: The wrapped ASGI app.
        config_provider: Returns the EdgeConfig (rules are loaded lazily).
        factory_provider: Returns a fresh per-request ResolverFactory.
        excluded_prefixes: Paths that always go to the wrapped app.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        config_provider: Callable[[], EdgeConfig],
        factory_provider: Callable[[], ResolverFactory],
        excluded_prefixes: tuple[str, ...] = ("/api/", "/health", "/assets/"),
    ) -> None:
        super().__init__(app)
        self._config_provider = config_provider
        self._factory_provider = factory_provider
        self._excluded = excluded_prefixes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        config = self._config_provider()
        if not self._should_answer(request, config):
            return await call_next(request)

        edge_request = EdgeRequest(
            url=str(request.url),
            headers={k.lower(): v for k, v in request.headers.items()},
            method=request.method,
        )
        factory = ClosingResolverFactory(self._factory_provider)
        try:
            result = await run_in_threadpool(
                handle_edge_request,
                edge_request,
                config=config,
                resolver_factory=factory,
            )
        finally:
            factory.close()

        if result.passthrough:
            logger.debug("Passing %s through to the wrapped app", request.url.path)
            return await call_next(request)
        return Response(content=result.body, status_code=result.status, headers=result.headers)

    def _should_answer(self, request: Request, config: EdgeConfig) -> bool:
        path = request.url.path
        if request.method not in HANDLED_METHODS or path.startswith(self._excluded):
            return False
        if has_file_extension(path):
            return False
        return is_social_crawler(request.headers.get("user-agent"), config.classifier)
