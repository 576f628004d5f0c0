import argparse
import json
import logging
import sys
from pathlib import Path
from uuid import uuid4

from src.adapters.sqlite.fixtures import load_fixture
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.api.deps import Settings, build_content_store, close_content_store
from src.components.edge import EdgeConfig, EdgeRequest, handle_edge_request
from src.components.resolver import ContentResolver
from src.rules.loader import load_rules
from src.rules.models import Rules

logger = logging.getLogger("cli")

CRAWLER_UA = "facebookexternalhit/1.1 (+http://www.facebook.com/externalhit_uatext.php)"


def get_rules(settings: Settings) -> Rules:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    return load_rules(settings.rules_path)


def handle_resolve(settings: Settings, args: argparse.Namespace) -> int:
    rules = get_rules(settings)
    store = build_content_store(settings)
    try:
        resolver = ContentResolver(store, rules, trace_id=str(uuid4()))
        record = resolver.resolve(args.domain, args.path)
    finally:
        close_content_store(store)

    if record is None:
        logger.warning("No SEO data for %s%s", args.domain, args.path)
        return 1
    print(json.dumps(record.to_dict(), indent=2, ensure_ascii=False))
    return 0


def handle_render(settings: Settings, args: argparse.Namespace) -> int:
    rules = get_rules(settings)
    store = build_content_store(settings)
    try:
        result = handle_edge_request(
            EdgeRequest(
                url=f"https://{args.domain}{args.path}",
                headers={"host": args.domain, "user-agent": args.user_agent},
            ),
            config=EdgeConfig.from_rules(rules),
            resolver_factory=lambda trace_id: ContentResolver(store, rules, trace_id=trace_id),
        )
    finally:
        close_content_store(store)

    if args.headers:
        for name, value in result.headers.items():
            print(f"{name}: {value}")
        print()
    print(result.body)
    return 0 if result.status < 400 else 1


def handle_migrate(settings: Settings, args: argparse.Namespace) -> int:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(settings.db_path).run_migrations()
    print(f"Applied {len(applied)} migrations to {settings.db_path}.")
    return 0


def handle_seed(settings: Settings, args: argparse.Namespace) -> int:
    fixture_path = Path(args.fixture)
    if not fixture_path.exists():
        logger.error("Fixture %s not found.", fixture_path)
        return 1

    try:
        data = json.loads(fixture_path.read_text())
    except json.JSONDecodeError as e:
        logger.error("Fixture %s is not valid JSON: %s", fixture_path, e)
        return 1
    if not isinstance(data, dict):
        logger.error("Fixture %s must be a JSON object keyed by table.", fixture_path)
        return 1

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    SQLiteMigrator(settings.db_path).run_migrations()
    counts = load_fixture(settings.db_path, data)
    print(f"Seeded {sum(counts.values())} rows into {settings.db_path}.")
    return 0


def handle_serve(settings: Settings, args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("src.api.main:app", host=args.host, port=args.port)
    return 0


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Tenant SEO edge CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # resolve
    resolve_parser = subparsers.add_parser("resolve", help="Print the SEO record as JSON")
    resolve_parser.add_argument("domain", help="Hostname, e.g. shop.example.com")
    resolve_parser.add_argument("path", nargs="?", default="/", help="Request path")

    # render
    render_parser = subparsers.add_parser("render", help="Print the edge response body")
    render_parser.add_argument("domain", help="Hostname, e.g. shop.example.com")
    render_parser.add_argument("path", nargs="?", default="/", help="Request path")
    render_parser.add_argument(
        "--user-agent", default=CRAWLER_UA, help="User-Agent to send (defaults to a crawler)"
    )
    render_parser.add_argument("--headers", action="store_true", help="Print response headers")

    # migrate
    subparsers.add_parser("migrate", help="Create or upgrade the local SQLite store")

    # seed
    seed_parser = subparsers.add_parser("seed", help="Load a JSON fixture into SQLite")
    seed_parser.add_argument("fixture", help="Path to the fixture JSON file")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the edge API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)
    settings = Settings()

    if args.command == "resolve":
        return handle_resolve(settings, args)
    elif args.command == "render":
        return handle_render(settings, args)
    elif args.command == "migrate":
        return handle_migrate(settings, args)
    elif args.command == "seed":
        return handle_seed(settings, args)
    elif args.command == "serve":
        return handle_serve(settings, args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
