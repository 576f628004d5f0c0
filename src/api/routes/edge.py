"""
Edge catch-all route - serverless-style adapter.

Every path not claimed by another router lands here and always gets a
body back: the SEO document, the SPA shell, or a 500.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import Response

from src.api.deps import get_edge_config, get_resolver_factory
from src.components.edge import (
    EdgeConfig,
    EdgeRequest,
    EdgeResponse,
    ResolverFactory,
    handle_edge_request,
)

router = APIRouter()


def to_edge_request(request: Request) -> EdgeRequest:
    """Translate a Starlette request into the edge core's plain request."""
    return EdgeRequest(
        url=str(request.url),
        headers={k.lower(): v for k, v in request.headers.items()},
        method=request.method,
    )


def to_response(result: EdgeResponse) -> Response:
    return Response(content=result.body, status_code=result.status, headers=result.headers)


@router.api_route(
    "/{full_path:path}",
    methods=["GET", "HEAD"],
    include_in_schema=False,
)
def edge_catch_all(
    request: Request,
    config: EdgeConfig = Depends(get_edge_config),
    resolver_factory: ResolverFactory = Depends(get_resolver_factory),
) -> Response:
    """Serve crawler HTML or the SPA shell for any path."""
    result = handle_edge_request(
        to_edge_request(request), config=config, resolver_factory=resolver_factory
    )
    return to_response(result)
