"""
Repository for donor database operations.

All SQL touching the donors table lives here - no SQL in service or API layers.
It should be injected via core.dependencies.get_donor_repository().
"""
import sqlite3
import logging
from typing import Any, Dict, List, Optional, Tuple

from repositories.base import Database
from core.datetime_utils import format_iso, utc_now

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, area, phone, blood_group, created_at"


class DonorRepository:
    """Repository for donor CRUD operations."""

    def __init__(self, db: Database):
        """
        Initialize the donor repository.

        Args:
            db: Database instance for data access.
        """
        self._db = db

    def add(self, name: str, area: str, phone: str, blood_group: str) -> Optional[Dict[str, Any]]:
        """
        Insert a donor and return the stored row.

        Returns:
            The created donor dict, or None if the phone number is already
            registered (UNIQUE constraint violation).
        """
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute("""
                INSERT INTO donors (name, area, phone, blood_group, created_at)
                VALUES (?, ?, ?, ?, ?)
            """, (name, area, phone, blood_group, format_iso(utc_now())))

            donor_id = cursor.lastrowid
            cursor.execute(f"SELECT {_COLUMNS} FROM donors WHERE id = ?", (donor_id,))
            row = cursor.fetchone()

            conn.commit()
            return dict(row) if row else None
        except sqlite3.IntegrityError:
            return None
        finally:
            conn.close()

    def find(
        self,
        area: Optional[str] = None,
        blood_group: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Donors matching the given equality filters, newest first.

        A None filter is not applied.
        """
        query = f"SELECT {_COLUMNS} FROM donors WHERE 1=1"
        params: List[Any] = []

        if area is not None:
            query += " AND area = ?"
            params.append(area)

        if blood_group is not None:
            query += " AND blood_group = ?"
            params.append(blood_group)

        query += " ORDER BY created_at DESC, id DESC"

        conn = self._db.get_connection()
        try:
            rows = conn.execute(query, params).fetchall()
        finally:
            conn.close()

        return [dict(row) for row in rows]

    def get_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM donors WHERE phone = ?", (phone,)
            ).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None

    def delete_by_phone(self, phone: str) -> bool:
        """
        Delete a donor by phone number.

        Returns:
            True if a row was deleted, False if no donor had that number.
        """
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM donors WHERE phone = ?", (phone,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def count_by_area_and_group(self) -> Dict[Tuple[str, str], int]:
        """Donor counts keyed by (area, blood_group)."""
        conn = self._db.get_connection()
        try:
            rows = conn.execute("""
                SELECT area, blood_group, COUNT(*) AS donor_count
                FROM donors
                GROUP BY area, blood_group
            """).fetchall()
        finally:
            conn.close()

        return {(row["area"], row["blood_group"]): row["donor_count"] for row in rows}

    def distinct_areas(self) -> List[str]:
        conn = self._db.get_connection()
        try:
            rows = conn.execute("SELECT DISTINCT area FROM donors ORDER BY area").fetchall()
        finally:
            conn.close()
        return [row["area"] for row in rows]
