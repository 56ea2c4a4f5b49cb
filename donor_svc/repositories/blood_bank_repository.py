"""
Repository for blood bank database operations.
"""
import sqlite3
import logging
from typing import Any, Dict, Iterable, List, Optional

from repositories.base import Database

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, address, phone, lat, lng, area"


class BloodBankRepository:
    """Repository for blood bank CRUD operations."""

    def __init__(self, db: Database):
        self._db = db

    def add(
        self,
        name: str,
        address: str,
        phone: str,
        lat: float,
        lng: float,
        area: str
    ) -> Optional[Dict[str, Any]]:
        """
        Insert a blood bank.

        Returns:
            The created blood bank dict, or None if the name is taken.
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO blood_banks (name, address, phone, lat, lng, area)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (name, address, phone, lat, lng, area))

            cursor.execute(f"SELECT {_COLUMNS} FROM blood_banks WHERE id = ?", (cursor.lastrowid,))
            row = cursor.fetchone()

            conn.commit()
            return dict(row) if row else None
        except sqlite3.IntegrityError:
            return None
        finally:
            conn.close()

    def add_many(self, blood_banks: Iterable[Dict[str, Any]]) -> int:
        """
        Insert several blood banks in one transaction (all or nothing).

        Returns:
            Number of rows inserted.
        """
        conn = self._db.get_connection()
        try:
            cursor = conn.executemany("""
                INSERT INTO blood_banks (name, address, phone, lat, lng, area)
                VALUES (:name, :address, :phone, :lat, :lng, :area)
            """, list(blood_banks))
            conn.commit()
            return cursor.rowcount
        except Exception as e:
            conn.rollback()
            logger.error(f"Error inserting blood banks: {e}. Transaction rolled back.")
            raise
        finally:
            conn.close()

    def find(self, area: Optional[str] = None) -> List[Dict[str, Any]]:
        """Blood banks, optionally restricted to one area, ordered by name."""
        query = f"SELECT {_COLUMNS} FROM blood_banks"
        params: List[Any] = []
        if area is not None:
            query += " WHERE area = ?"
            params.append(area)
        query += " ORDER BY name ASC"

        conn = self._db.get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()
        return [dict(row) for row in rows]

    def get_by_name(self, name: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM blood_banks WHERE name = ?", (name,)
            ).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None

    def count(self) -> int:
        conn = self._db.get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM blood_banks").fetchone()[0]
        finally:
            conn.close()

    def distinct_areas(self) -> List[str]:
        conn = self._db.get_connection()
        try:
            rows = conn.execute("SELECT DISTINCT area FROM blood_banks ORDER BY area").fetchall()
        finally:
            conn.close()
        return [row["area"] for row in rows]
