# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for members."""
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine

from church_registry.core.database import members, storage_errors
from church_registry.core.logging import get_logger

logger = get_logger(__name__)

MEMBER_COLS = (
    "id, firstname, lastname, phone, gender, ministry, department, "
    "home_location, joined_at, created_at"
)


def iso(value) -> Optional[str]:
    """Dates come back as objects from PostgreSQL/MySQL and as strings from SQLite."""
    if value is None:
        return None
    return value.isoformat() if hasattr(value, "isoformat") else str(value)


def _row_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "firstname": row[1],
        "lastname": row[2] or "",
        "phone": row[3],
        "gender": row[4],
        "ministry": row[5] or "",
        "department": row[6] or "",
        "home_location": row[7] or "",
        "joined_at": iso(row[8]),
        "created_at": iso(row[9]) or "",
    }


class MemberRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Write ──────────────────────────────────────────────────────────

    def insert(self, values: Dict[str, Any]) -> Dict[str, Any]:
        with storage_errors("member insert"):
            with self._engine.begin() as conn:
                result = conn.execute(members.insert().values(**values))
                member_id = result.inserted_primary_key[0]
                row = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM members WHERE id = :id"),
                    {"id": member_id},
                ).fetchone()
        return _row_to_dict(row)

    def replace(self, member_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Overwrite every mutable column. Returns ``None`` when the id is unknown."""
        with storage_errors("member update"):
            with self._engine.begin() as conn:
                exists = conn.execute(
                    text("SELECT 1 FROM members WHERE id = :id"), {"id": member_id}
                ).fetchone()
                if not exists:
                    return None
                conn.execute(members.update().where(members.c.id == member_id).values(**values))
                row = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM members WHERE id = :id"),
                    {"id": member_id},
                ).fetchone()
        return _row_to_dict(row)

    def delete(self, member_id: int) -> bool:
        with storage_errors("member delete"):
            with self._engine.begin() as conn:
                # keep the contribution history, drop the link
                conn.execute(
                    text("UPDATE contributions SET member_id = NULL WHERE member_id = :id"),
                    {"id": member_id},
                )
                result = conn.execute(
                    text("DELETE FROM members WHERE id = :id"), {"id": member_id}
                )
                deleted = result.rowcount > 0
        return deleted

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, member_id: int) -> Optional[Dict[str, Any]]:
        with storage_errors("member lookup"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM members WHERE id = :id"),
                    {"id": member_id},
                ).fetchone()
        return _row_to_dict(row) if row else None

    def exists(self, member_id: int) -> bool:
        with storage_errors("member lookup"):
            with self._engine.connect() as conn:
                return conn.execute(
                    text("SELECT 1 FROM members WHERE id = :id"), {"id": member_id}
                ).fetchone() is not None

    def list_all(self) -> List[Dict[str, Any]]:
        with storage_errors("member listing"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {MEMBER_COLS} FROM members ORDER BY id DESC")
                ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def category_snapshot(self, conn) -> List[Tuple[str, str]]:
        """(ministry, department) of every member, read on the caller's transaction."""
        rows = conn.execute(text("SELECT ministry, department FROM members")).fetchall()
        return [(r[0], r[1]) for r in rows]

    def count_by_gender(self) -> Dict[str, int]:
        with storage_errors("gender totals"):
            with self._engine.connect() as conn:
                rows = conn.execute(text("""
                    SELECT LOWER(TRIM(gender)) AS g, COUNT(*)
                    FROM members
                    GROUP BY LOWER(TRIM(gender))
                """)).fetchall()
        return {r[0]: r[1] for r in rows}
