import logging
import os
from collections.abc import Mapping
from typing import Protocol

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Deployment configuration cannot support the rules."""


class StoreSettings(Protocol):
    content_store: str
    store_url: str
    store_key: str


def validate_ops_rules(
    rules: Rules,
    settings: StoreSettings,
    env: Mapping[str, str] | None = None,
) -> None:
    """
    Validate operational requirements before startup.
    Raises ConfigError listing every problem found.
    """
    environ = os.environ if env is None else env
    problems: list[str] = []

    # 1. Required env
    missing = [name for name in rules.ops.required_env if not environ.get(name)]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    # 2. Content Store backend
    if settings.content_store == "rest":
        if not settings.store_url:
            problems.append("SEO_CONTENT_STORE_URL is required for the rest content store")
        elif not settings.store_url.startswith(("http://", "https://")):
            problems.append("SEO_CONTENT_STORE_URL must be an http(s) URL")
        if not settings.store_key:
            problems.append("SEO_CONTENT_STORE_KEY is required for the rest content store")
    elif settings.content_store != "sqlite":
        problems.append(f"Unknown SEO_CONTENT_STORE {settings.content_store!r}")

    # 3. System domains
    if not rules.domains.system:
        problems.append("domains.system must list at least one first-party domain")

    if problems:
        raise ConfigError("; ".join(problems))

    logger.info("Configuration validated (content store: %s)", settings.content_store)
