# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Service: contributions and expenses ledger."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from church_registry.core.errors import ValidationError
from church_registry.core.logging import get_logger
from church_registry.repositories import FinanceRepository, MemberRepository

logger = get_logger(__name__)


def _positive_amount(amount: Optional[float]) -> float:
    if amount is None or amount <= 0:
        raise ValidationError("amount must be greater than zero")
    return float(amount)


class FinanceService:
    def __init__(self, finance_repo: FinanceRepository, member_repo: MemberRepository):
        self._repo = finance_repo
        self._members = member_repo

    def add_contribution(self, member_id: Optional[int], amount: Optional[float],
                         method: Optional[str] = None, note: Optional[str] = None) -> Dict[str, Any]:
        amount = _positive_amount(amount)
        if member_id is not None and not self._members.exists(member_id):
            raise ValidationError(f"Unknown member {member_id}")
        row = self._repo.insert_contribution({
            "member_id": member_id, "amount": amount,
            "method": method or "", "note": note or "",
            "created_at": datetime.now(timezone.utc),
        })
        logger.info("Contribution recorded id=%s member=%s amount=%.2f", row["id"], member_id, amount)
        return row

    def list_contributions(self) -> List[Dict[str, Any]]:
        return self._repo.list_contributions()

    def add_expense(self, title: Optional[str], amount: Optional[float],
                    note: Optional[str] = None) -> Dict[str, Any]:
        if not title or not title.strip():
            raise ValidationError("title is required")
        amount = _positive_amount(amount)
        row = self._repo.insert_expense({
            "title": title, "amount": amount, "note": note or "",
            "created_at": datetime.now(timezone.utc),
        })
        logger.info("Expense recorded id=%s amount=%.2f", row["id"], amount)
        return row

    def list_expenses(self) -> List[Dict[str, Any]]:
        return self._repo.list_expenses()
