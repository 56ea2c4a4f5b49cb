"""
Base database connection and initialization.

This module handles database connection management and schema initialization.
Optimized for SQLite concurrency with WAL mode and busy_timeout.

IMPORTANT: Database instantiation should be done through the DI layer.
Use core.dependencies.get_database() instead of instantiating directly.
"""
import sqlite3
import logging
from typing import Optional
from pathlib import Path

from core.config import DATABASE_PATH, DATABASE_BUSY_TIMEOUT
from core.exceptions import DatabaseConnectionError

logger = logging.getLogger(__name__)


SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS donors (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        area TEXT NOT NULL,
        phone TEXT UNIQUE NOT NULL,
        blood_group TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_donors_area_group ON donors (area, blood_group)",
    """
    CREATE TABLE IF NOT EXISTS hospitals (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        username TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        name TEXT NOT NULL,
        area TEXT NOT NULL,
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS blood_banks (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT UNIQUE NOT NULL,
        address TEXT NOT NULL,
        phone TEXT NOT NULL,
        lat REAL NOT NULL,
        lng REAL NOT NULL,
        area TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS inventory (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        blood_bank TEXT NOT NULL,
        area TEXT NOT NULL,
        blood_group TEXT NOT NULL,
        units INTEGER NOT NULL CHECK (units >= 0),
        min_level INTEGER NOT NULL CHECK (min_level >= 0),
        updated_at TEXT NOT NULL,
        UNIQUE (blood_bank, blood_group)
    )
    """,
)


class Database:
    """
    SQLite database connection manager with concurrency optimizations.

    Features:
    - WAL mode for better concurrent read/write performance
    - Busy timeout to handle lock contention gracefully
    - Rows returned as sqlite3.Row so repositories can map by column name

    Usage:
        # Via dependency injection (recommended):
        from core.dependencies import get_database
        db = get_database()

        # Direct instantiation (for testing):
        db = Database(db_path="/tmp/test.db")
    """

    def __init__(self, db_path: Optional[str] = None, busy_timeout: Optional[int] = None):
        """
        Initialize database connection.

        Args:
            db_path: Path to SQLite database file. Defaults to config DATABASE_PATH.
            busy_timeout: SQLite busy timeout in milliseconds. Defaults to config value.

        Raises:
            DatabaseConnectionError: If the file cannot be opened or the schema created.
        """
        self.db_path = db_path or DATABASE_PATH
        self.busy_timeout = busy_timeout if busy_timeout is not None else DATABASE_BUSY_TIMEOUT

        Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        try:
            self._init_db()
        except sqlite3.Error as e:
            logger.critical(
                "Database initialization failed",
                extra={"db_path": self.db_path, "error": str(e)}
            )
            raise DatabaseConnectionError(db_path=self.db_path) from e

    def _configure_connection(self, conn: sqlite3.Connection) -> None:
        conn.execute(f"PRAGMA busy_timeout = {self.busy_timeout}")
        conn.execute("PRAGMA foreign_keys = ON")
        conn.row_factory = sqlite3.Row

    def _init_db(self) -> None:
        """Initialize database schema and enable WAL mode if not already enabled."""
        conn = sqlite3.connect(self.db_path)
        try:
            self._configure_connection(conn)
            cursor = conn.cursor()

            # WAL mode persists in the database file, so this only needs to run once
            cursor.execute("PRAGMA journal_mode = WAL")
            result = cursor.fetchone()
            if result and result[0].lower() == 'wal':
                logger.info(f"SQLite WAL mode enabled for {self.db_path}")
            else:
                logger.warning(f"Failed to enable WAL mode, current mode: {result[0] if result else None}")

            for statement in SCHEMA:
                cursor.execute(statement)

            conn.commit()
        finally:
            conn.close()

        logger.info(
            f"Database initialized: {self.db_path} "
            f"(busy_timeout={self.busy_timeout}ms)"
        )

    def get_connection(self) -> sqlite3.Connection:
        """
        Get a new database connection with concurrency settings.

        Callers own the connection and must close it.
        """
        conn = sqlite3.connect(self.db_path)
        self._configure_connection(conn)
        return conn

    def ping(self) -> None:
        """Run a trivial query; raises sqlite3.Error if the database is unusable."""
        conn = self.get_connection()
        try:
            conn.execute("SELECT 1")
        finally:
            conn.close()
