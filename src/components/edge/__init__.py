"""
Edge component - shared request handling core for all platform adapters.
"""

from .component import (
    build_headers,
    cache_control,
    handle_edge_request,
    minimal_record,
    request_hostname,
    request_path,
)
from .models import (
    SOURCE_NO_DATA,
    SOURCE_SPA_SHELL,
    EdgeConfig,
    EdgeRequest,
    EdgeResponse,
)
from .ports import ResolverFactory, ResolverPort

__all__ = [
    # Entry point
    "handle_edge_request",
    # Helpers
    "build_headers",
    "cache_control",
    "minimal_record",
    "request_hostname",
    "request_path",
    # Models
    "EdgeConfig",
    "EdgeRequest",
    "EdgeResponse",
    "SOURCE_NO_DATA",
    "SOURCE_SPA_SHELL",
    # Ports
    "ResolverFactory",
    "ResolverPort",
]
