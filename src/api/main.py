import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from src.api.deps import (
    LazyResolverFactory,
    Settings,
    build_content_store,
    close_content_store,
    get_edge_config,
    get_rules,
    get_settings,
)
from src.app_shell.config import validate_ops_rules
from src.shell.http.edge_middleware import SEOEdgeMiddleware
from src.shell.http.health import (
    ContentStoreCheck,
    HealthCheckRegistry,
    RulesCheck,
    StartupCheck,
    StartupTracker,
    create_health_router,
)

VERSION = "0.1.0"

logger = logging.getLogger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s"
    )
    settings = get_settings()

    # Load rules and validate on startup (fail-fast)
    try:
        rules = get_rules()
        validate_ops_rules(rules, settings)
        logger.info("Rules loaded from %s", settings.rules_path)
    except Exception as e:
        logger.critical("Rules load failed: %s", e)
        sys.exit(1)

    StartupTracker.mark_started()
    yield


def probe_content_store(settings: Settings) -> None:
    """One cheap read against the configured store."""
    store = build_content_store(settings)
    try:
        store.find_custom_domain(["health-check.invalid"])
    finally:
        close_content_store(store)


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Tenant SEO Edge",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    registry = HealthCheckRegistry()
    registry.register(StartupCheck())
    registry.register(RulesCheck(get_rules))
    registry.register(ContentStoreCheck(lambda: probe_content_store(get_settings())))

    # --- Routers ---
    from src.api.routes import edge, seo_data

    app.include_router(create_health_router(VERSION, registry))
    app.include_router(seo_data.router, prefix="/api/seo-data", tags=["SEO"])

    if settings.static_dir:
        # Pages-style: the SPA build is served as-is, the middleware answers
        # crawler and custom-domain traffic in front of it.
        app.add_middleware(
            SEOEdgeMiddleware,
            config_provider=get_edge_config,
            factory_provider=lambda: LazyResolverFactory(get_settings(), get_rules()),
        )
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="spa")
    else:
        # Serverless-style: every other path goes through the catch-all.
        app.include_router(edge.router, tags=["Edge"])

    return app


app = create_app()
