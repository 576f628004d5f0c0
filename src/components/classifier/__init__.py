"""
Classifier component - crawler detection and content addressing.
"""

from .component import (
    classify_path,
    classify_request,
    is_social_crawler,
    is_system_domain,
    normalize_hostname,
    path_segments,
)
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

__all__ = [
    # Entry points
    "classify_request",
    "classify_path",
    "is_social_crawler",
    "is_system_domain",
    # Helpers
    "normalize_hostname",
    "path_segments",
    # Models
    "ClassifierConfig",
    "ContentAddress",
    "CustomDomainContent",
    "RequestClassification",
    "SystemFunnelStep",
    "SystemWebsitePage",
    "Unknown",
    "HOMEPAGE_SENTINEL",
]
