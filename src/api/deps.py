import os
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from src.adapters.rest.content_store import DEFAULT_TIMEOUT, RestContentStore
from src.adapters.sqlite.content_store import SQLiteContentStore
from src.components.edge import EdgeConfig, ResolverFactory
from src.components.resolver import ContentResolver, ContentStorePort
from src.rules.loader import load_rules
from src.rules.models import Rules

STORE_BACKENDS = ("sqlite", "rest")


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("SEO_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "content.db")
        self.rules_path = Path(os.environ.get("SEO_RULES_PATH", str(self.base_dir / "rules.yaml")))
        self.content_store = os.environ.get("SEO_CONTENT_STORE", "sqlite").strip().lower()
        self.store_url = os.environ.get("SEO_CONTENT_STORE_URL", "")
        self.store_key = os.environ.get("SEO_CONTENT_STORE_KEY", "")
        self.store_timeout = float(os.environ.get("SEO_CONTENT_STORE_TIMEOUT", DEFAULT_TIMEOUT))
        self.static_dir = os.environ.get("SEO_STATIC_DIR") or None


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules() -> Rules:
    return load_rules(get_settings().rules_path)


@lru_cache
def get_edge_config() -> EdgeConfig:
    return EdgeConfig.from_rules(get_rules())


# --- Content Store ---
def build_content_store(settings: Settings) -> ContentStorePort:
    """Open the configured Content Store backend."""
    if settings.content_store == "rest":
        return RestContentStore(
            settings.store_url, settings.store_key, timeout=settings.store_timeout
        )
    if settings.content_store == "sqlite":
        return SQLiteContentStore(settings.db_path)
    raise ValueError(
        f"Unknown SEO_CONTENT_STORE {settings.content_store!r}; "
        f"expected one of {', '.join(STORE_BACKENDS)}"
    )


def close_content_store(store: object) -> None:
    close = getattr(store, "close", None)
    if callable(close):
        close()


class LazyResolverFactory:
    """
    Builds a ContentResolver on first use, opening the store only then.

    Requests the edge answers without resolving never open a store.
    """

    def __init__(self, settings: Settings, rules: Rules) -> None:
        self._settings = settings
        self._rules = rules
        self._store: ContentStorePort | None = None

    def __call__(self, trace_id: str) -> ContentResolver:
        if self._store is None:
            self._store = build_content_store(self._settings)
        return ContentResolver(self._store, self._rules, trace_id=trace_id)

    @property
    def opened(self) -> bool:
        return self._store is not None

    def close(self) -> None:
        if self._store is not None:
            close_content_store(self._store)
            self._store = None


def get_resolver_factory(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> Iterator[ResolverFactory]:
    """Per-request resolver factory; the store it opened is closed afterwards."""
    factory = LazyResolverFactory(settings, rules)
    try:
        yield factory
    finally:
        factory.close()
