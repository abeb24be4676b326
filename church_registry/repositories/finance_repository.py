# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for contributions and expenses."""
from typing import Any, Dict, List

from sqlalchemy import text
from sqlalchemy.engine import Engine

from church_registry.core.database import contributions, expenses, storage_errors
from church_registry.repositories.member_repository import iso

CONTRIBUTION_SELECT = """
    SELECT c.id, c.member_id, m.firstname, m.lastname, c.amount, c.method, c.note, c.created_at
    FROM contributions c
    LEFT JOIN members m ON c.member_id = m.id
"""
EXPENSE_COLS = "id, title, amount, note, created_at"


def _contribution_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "member_id": row[1],
        "firstname": row[2],
        "lastname": row[3],
        "amount": float(row[4]),
        "method": row[5] or "",
        "note": row[6] or "",
        "created_at": iso(row[7]) or "",
    }


def _expense_to_dict(row) -> Dict[str, Any]:
    return {
        "id": row[0],
        "title": row[1],
        "amount": float(row[2]),
        "note": row[3] or "",
        "created_at": iso(row[4]) or "",
    }


class FinanceRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    # ── Contributions ──────────────────────────────────────────────────

    def insert_contribution(self, values: Dict[str, Any]) -> Dict[str, Any]:
        with storage_errors("contribution insert"):
            with self._engine.begin() as conn:
                result = conn.execute(contributions.insert().values(**values))
                row = conn.execute(
                    text(CONTRIBUTION_SELECT + " WHERE c.id = :id"),
                    {"id": result.inserted_primary_key[0]},
                ).fetchone()
        return _contribution_to_dict(row)

    def list_contributions(self) -> List[Dict[str, Any]]:
        with storage_errors("contribution listing"):
            with self._engine.connect() as conn:
                rows = conn.execute(text(CONTRIBUTION_SELECT + " ORDER BY c.id DESC")).fetchall()
        return [_contribution_to_dict(r) for r in rows]

    # ── Expenses ───────────────────────────────────────────────────────

    def insert_expense(self, values: Dict[str, Any]) -> Dict[str, Any]:
        with storage_errors("expense insert"):
            with self._engine.begin() as conn:
                result = conn.execute(expenses.insert().values(**values))
                row = conn.execute(
                    text(f"SELECT {EXPENSE_COLS} FROM expenses WHERE id = :id"),
                    {"id": result.inserted_primary_key[0]},
                ).fetchone()
        return _expense_to_dict(row)

    def list_expenses(self) -> List[Dict[str, Any]]:
        with storage_errors("expense listing"):
            with self._engine.connect() as conn:
                rows = conn.execute(
                    text(f"SELECT {EXPENSE_COLS} FROM expenses ORDER BY id DESC")
                ).fetchall()
        return [_expense_to_dict(r) for r in rows]

    # ── Totals ─────────────────────────────────────────────────────────

    def totals(self) -> Dict[str, float]:
        with storage_errors("finance totals"):
            with self._engine.connect() as conn:
                contributed = conn.execute(
                    text("SELECT COALESCE(SUM(amount), 0) FROM contributions")
                ).scalar()
                spent = conn.execute(
                    text("SELECT COALESCE(SUM(amount), 0) FROM expenses")
                ).scalar()
        return {"contributions": float(contributed or 0), "expenses": float(spent or 0)}
