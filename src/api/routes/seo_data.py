"""
SEO data route - resolved records as JSON.

Lets tenants and support staff see exactly what a crawler would get for a
domain and path without faking a crawler user agent.
"""

from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Query, status

from src.api.deps import get_resolver_factory
from src.components.edge import ResolverFactory

router = APIRouter()


@router.get(
    "",
    summary="Resolve SEO metadata",
    description="Resolve the SEO record for a hostname and path.",
)
def get_seo_data(
    domain: str = Query(..., min_length=1, description="Hostname, e.g. shop.example.com"),
    path: str = Query("/", description="Request path"),
    resolver_factory: ResolverFactory = Depends(get_resolver_factory),
) -> dict[str, Any]:
    trace_id = str(uuid4())
    if not path.startswith("/"):
        path = "/" + path

    record = resolver_factory(trace_id).resolve(domain, path)
    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No SEO data for {domain}{path}",
        )

    return {"trace_id": trace_id, "domain": domain, "path": path, "seo": record.to_dict()}
