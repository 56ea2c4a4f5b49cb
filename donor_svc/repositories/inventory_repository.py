"""
Repository for blood inventory database operations.

Inventory rows are keyed by (blood_bank, blood_group); upsert() updates the
existing row for that pair or inserts a new one inside a single transaction.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from repositories.base import Database
from core.datetime_utils import format_iso, utc_now

logger = logging.getLogger(__name__)

_COLUMNS = "id, blood_bank, area, blood_group, units, min_level, updated_at"


class InventoryRepository:
    """Repository for blood inventory CRUD operations."""

    def __init__(self, db: Database):
        self._db = db

    def upsert(
        self,
        blood_bank: str,
        area: str,
        blood_group: str,
        units: int,
        min_level: int
    ) -> Tuple[Dict[str, Any], bool]:
        """
        Create or update the inventory row for (blood_bank, blood_group).

        The area is only written when the row is created.

        Returns:
            Tuple of (stored item dict, True if a new row was created).
        """
        now = format_iso(utc_now())
        conn = self._db.get_connection()
        cursor = conn.cursor()

        try:
            cursor.execute(
                "SELECT id FROM inventory WHERE blood_bank = ? AND blood_group = ?",
                (blood_bank, blood_group)
            )
            existing = cursor.fetchone()

            if existing:
                item_id = existing["id"]
                cursor.execute("""
                    UPDATE inventory
                    SET units = ?, min_level = ?, updated_at = ?
                    WHERE id = ?
                """, (units, min_level, now, item_id))
            else:
                cursor.execute("""
                    INSERT INTO inventory (blood_bank, area, blood_group, units, min_level, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                """, (blood_bank, area, blood_group, units, min_level, now))
                item_id = cursor.lastrowid

            cursor.execute(f"SELECT {_COLUMNS} FROM inventory WHERE id = ?", (item_id,))
            row = cursor.fetchone()

            conn.commit()
            return dict(row), existing is None
        except Exception as e:
            conn.rollback()
            logger.error(f"Error saving inventory item: {e}. Transaction rolled back.")
            raise
        finally:
            conn.close()

    def add_many(self, items: Iterable[Dict[str, Any]]) -> int:
        """Insert several inventory rows atomically; returns the number inserted."""
        now = format_iso(utc_now())
        rows = [{**item, "updated_at": item.get("updated_at", now)} for item in items]

        conn = self._db.get_connection()
        try:
            cursor = conn.executemany("""
                INSERT INTO inventory (blood_bank, area, blood_group, units, min_level, updated_at)
                VALUES (:blood_bank, :area, :blood_group, :units, :min_level, :updated_at)
            """, rows)
            conn.commit()
            return cursor.rowcount
        except Exception as e:
            conn.rollback()
            logger.error(f"Error inserting inventory: {e}. Transaction rolled back.")
            raise
        finally:
            conn.close()

    def get_all(self) -> List[Dict[str, Any]]:
        """All inventory rows, most recently updated first."""
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM inventory ORDER BY updated_at DESC, id DESC"
            ).fetchall()
        finally:
            conn.close()
        return [dict(row) for row in rows]

    def find_by_blood_bank(self, blood_bank: str) -> List[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM inventory WHERE blood_bank = ? ORDER BY blood_group",
                (blood_bank,)
            ).fetchall()
        finally:
            conn.close()
        return [dict(row) for row in rows]

    def get_by_id(self, item_id: int) -> Optional[Dict[str, Any]]:
        conn = self._db.get_connection()
        try:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM inventory WHERE id = ?", (item_id,)
            ).fetchone()
        finally:
            conn.close()
        return dict(row) if row else None

    def delete_by_id(self, item_id: int) -> bool:
        """Returns True if a row was deleted."""
        conn = self._db.get_connection()
        try:
            cursor = conn.execute("DELETE FROM inventory WHERE id = ?", (item_id,))
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._db.get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM inventory").fetchone()[0]
        finally:
            conn.close()
