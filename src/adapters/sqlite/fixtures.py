"""
Fixture loading for local SQLite Content Stores.

A fixture is a JSON object keyed by table name, each holding a list of
row objects. Nested objects and lists are stored as JSON text.
"""

import json
import logging
import re
import sqlite3
from typing import Any

logger = logging.getLogger(__name__)

_COLUMN_RE = re.compile(r"^[a-z_][a-z0-9_]*$")

# Insert order respects foreign keys.
FIXTURE_TABLES = (
    "custom_domains",
    "websites",
    "website_pages",
    "funnels",
    "funnel_steps",
    "products",
    "domain_connections",
    "seo_pages",
)


def _encode(value: Any) -> Any:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, dict | list):
        return json.dumps(value)
    return value


def load_fixture(db_path: str, data: dict[str, Any]) -> dict[str, int]:
    """
    Upsert fixture rows into an already migrated database.

    Raises ValueError for unknown tables or rows that are not objects.
    Returns the number of rows written per table.
    """
    unknown = set(data) - set(FIXTURE_TABLES)
    if unknown:
        raise ValueError(f"Unknown fixture tables: {', '.join(sorted(unknown))}")

    counts: dict[str, int] = {}
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA foreign_keys = ON;")
    try:
        for table in FIXTURE_TABLES:
            rows = data.get(table) or []
            for row in rows:
                if not isinstance(row, dict) or not row:
                    raise ValueError(f"Fixture rows for {table} must be non-empty objects")
                columns = list(row)
                bad = [c for c in columns if not _COLUMN_RE.match(c)]
                if bad:
                    raise ValueError(f"Invalid column names for {table}: {bad}")
                placeholders = ", ".join("?" for _ in columns)
                conn.execute(
                    f"INSERT OR REPLACE INTO {table} ({', '.join(columns)}) "
                    f"VALUES ({placeholders})",
                    tuple(_encode(row[c]) for c in columns),
                )
            counts[table] = len(rows)
        conn.commit()
    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()

    logger.info("Loaded fixture into %s: %s", db_path, counts)
    return counts
