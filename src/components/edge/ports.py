"""
Edge component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from src.components.classifier import ContentAddress
from src.domain.seo import SEORecord


class ResolverPort(Protocol):
    """Anything that can turn a hostname and path into an SEORecord."""

    def resolve(
        self,
        hostname: str,
        pathname: str,
        address: ContentAddress | None = None,
    ) -> SEORecord | None:
        """Resolve a record, or None when no content matches."""
        ...


# Called with the request's trace id; only invoked when resolution is needed.
ResolverFactory = Callable[[str], ResolverPort]
