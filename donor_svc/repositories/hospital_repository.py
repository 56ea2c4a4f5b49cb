"""
Repository for hospital account operations.

Stores bcrypt password hashes only; hashing and verification happen in
services.hospital_service.
"""
import sqlite3
import logging
from typing import Any, Dict, Optional

from repositories.base import Database
from core.datetime_utils import format_iso, utc_now

logger = logging.getLogger(__name__)

_COLUMNS = "id, username, password_hash, name, area, created_at"


class HospitalRepository:
    """Repository for hospital CRUD operations."""

    def __init__(self, db: Database):
        self._db = db

    def add(self, username: str, password_hash: str, name: str, area: str) -> Optional[Dict[str, Any]]:
        """
        Insert a hospital account.

        Returns:
            The created hospital dict, or None if the username is taken.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO hospitals (username, password_hash, name, area, created_at)
                VALUES (?, ?, ?, ?, ?)
            """, (username, password_hash, name, area, format_iso(utc_now())))

            cursor.execute(f"SELECT {_COLUMNS} FROM hospitals WHERE id = ?", (cursor.lastrowid,))
            row = cursor.fetchone()

            conn.commit()
            return dict(row) if row else None
        except sqlite3.IntegrityError:
            return None
        finally:
            conn.close()

    def get_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM hospitals WHERE username = ?", (username,)
            ).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None
