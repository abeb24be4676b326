# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Service: the figures shown on the dashboard's summary cards."""
from typing import Any, Dict

from church_registry.repositories import CategoryRepository, FinanceRepository, MemberRepository


class DashboardService:
    def __init__(self, member_repo: MemberRepository, category_repo: CategoryRepository,
                 finance_repo: FinanceRepository):
        self._members = member_repo
        self._categories = category_repo
        self._finance = finance_repo

    def summary(self) -> Dict[str, Any]:
        genders = self._members.count_by_gender()
        totals = self._finance.totals()
        return {
            "total_members": sum(genders.values()),
            "male": genders.get("male", 0),
            "female": genders.get("female", 0),
            "ministries": {c["slug"]: c["member_count"] for c in self._categories.list("ministry")},
            "departments": {c["slug"]: c["member_count"] for c in self._categories.list("department")},
            "contributions_total": totals["contributions"],
            "expenses_total": totals["expenses"],
            "balance": totals["contributions"] - totals["expenses"],
        }
