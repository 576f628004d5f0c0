"""
Resolver component - SEO metadata resolution over the Content Store.
"""

from ._impl import (
    canonical_for,
    domain_variants,
    funnel_image,
    select_root_connection,
    website_image,
)
from .component import ContentResolver
from .models import CourseAreaRecord, FieldChoice, RequestTarget, ResolverConfig
from .ports import ContentStoreError, ContentStorePort

__all__ = [
    # Entry point
    "ContentResolver",
    # Ports
    "ContentStoreError",
    "ContentStorePort",
    # Models
    "CourseAreaRecord",
    "FieldChoice",
    "RequestTarget",
    "ResolverConfig",
    # Field precedence helpers
    "canonical_for",
    "domain_variants",
    "funnel_image",
    "select_root_connection",
    "website_image",
]
