import logging
import sqlite3
from contextlib import closing
from pathlib import Path

logger = logging.getLogger(__name__)

# Repository-level migrations directory
MIGRATIONS_DIR = str(Path(__file__).resolve().parents[3] / "migrations")

DOWN_MARKER = "-- Down"

_TRACKING_TABLE = """
    CREATE TABLE IF NOT EXISTS _migrations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        filename TEXT UNIQUE NOT NULL,
        applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
    );
"""


def up_script(sql: str) -> str:
    """The part of a migration file before its Down section."""
    return sql.split(DOWN_MARKER, 1)[0]


class SQLiteMigrator:
    """
    Applies `NNN_name.sql` files from a directory to the Content Store file.

    Files run in name order, once each; applied names are tracked in
    `_migrations`.
    """

    def __init__(self, db_path: str, migrations_dir: str | Path = MIGRATIONS_DIR):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(_TRACKING_TABLE)
        return conn

    @staticmethod
    def _applied(conn: sqlite3.Connection) -> set[str]:
        return {row[0] for row in conn.execute("SELECT filename FROM _migrations")}

    def _files(self) -> list[Path]:
        return sorted(self.migrations_dir.glob("*.sql"), key=lambda p: p.name)

    def pending(self) -> list[str]:
        """Migration files not yet applied, in apply order."""
        with closing(self._connect()) as conn:
            applied = self._applied(conn)
        return [p.name for p in self._files() if p.name not in applied]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations; returns the files applied."""
        applied_now: list[str] = []
        with closing(self._connect()) as conn:
            applied = self._applied(conn)
            for path in self._files():
                if path.name in applied:
                    continue
                logger.info("Applying migration: %s", path.name)
                self._apply(conn, path)
                applied_now.append(path.name)
        logger.info("Migrations up to date (%d applied to %s)", len(applied_now), self.db_path)
        return applied_now

    def _apply(self, conn: sqlite3.Connection, path: Path) -> None:
        try:
            conn.executescript(up_script(path.read_text()))
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (path.name,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {path.name} failed: {e}") from e
