# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for the ministry and department count tables."""
from typing import Any, Dict, List, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine

from church_registry.core.database import storage_errors

CATEGORY_TABLES = {"ministry": "ministries", "department": "departments"}


def _row_to_dict(row) -> Dict[str, Any]:
    return {"id": row[0], "slug": row[1], "name": row[2], "member_count": row[3] or 0}


class CategoryRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def begin_transaction(self):
        return self._engine.begin()

    def list(self, kind: str) -> List[Dict[str, Any]]:
        table = CATEGORY_TABLES[kind]
        with storage_errors(f"{table} listing"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT id, slug, name, member_count FROM {table} ORDER BY id")
                ).fetchall()
        return [_row_to_dict(r) for r in rows]

    def names(self, conn, kind: str) -> List[Tuple[int, str]]:
        """(id, name) of every category of ``kind``, read on the caller's transaction."""
        rows = conn.execute(
            text(f"SELECT id, name FROM {CATEGORY_TABLES[kind]} ORDER BY id")
        ).fetchall()
        return [(r[0], r[1]) for r in rows]

    def write_counts(self, conn, kind: str, counts: Dict[int, int]) -> None:
        """Overwrite ``member_count`` for every id in ``counts``."""
        if not counts:
            return
        conn.execute(
            text(f"UPDATE {CATEGORY_TABLES[kind]} SET member_count = :count WHERE id = :id"),
            [{"id": cid, "count": count} for cid, count in counts.items()],
        )

    def verify_connection(self):
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))
