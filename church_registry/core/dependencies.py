# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection: wire repositories and services onto one engine.

``init_services`` is called by ``create_app`` with the engine the app owns,
so tests can hand in an in-memory database.
"""
from sqlalchemy.engine import Engine

from church_registry.repositories import (
    CategoryRepository, FinanceRepository, MemberRepository, UserRepository,
)
from church_registry.services.auth_service import AuthService
from church_registry.services.count_aggregator import CountAggregator
from church_registry.services.dashboard_service import DashboardService
from church_registry.services.finance_service import FinanceService
from church_registry.services.member_registry import MemberRegistry

_category_repo: CategoryRepository | None = None
_aggregator: CountAggregator | None = None
_registry: MemberRegistry | None = None
_auth_service: AuthService | None = None
_finance_service: FinanceService | None = None
_dashboard_service: DashboardService | None = None


def init_services(engine: Engine) -> None:
    global _category_repo, _aggregator, _registry, _auth_service, _finance_service, _dashboard_service
    member_repo = MemberRepository(engine)
    finance_repo = FinanceRepository(engine)
    _category_repo = CategoryRepository(engine)
    _aggregator = CountAggregator(member_repo, _category_repo)
    _registry = MemberRegistry(member_repo, _aggregator)
    _auth_service = AuthService(UserRepository(engine))
    _finance_service = FinanceService(finance_repo, member_repo)
    _dashboard_service = DashboardService(member_repo, _category_repo, finance_repo)


# ── FastAPI dependency functions ──
def get_member_registry() -> MemberRegistry:
    assert _registry is not None
    return _registry


def get_count_aggregator() -> CountAggregator:
    assert _aggregator is not None
    return _aggregator


def get_category_repo() -> CategoryRepository:
    assert _category_repo is not None
    return _category_repo


def get_auth_service() -> AuthService:
    assert _auth_service is not None
    return _auth_service


def get_finance_service() -> FinanceService:
    assert _finance_service is not None
    return _finance_service


def get_dashboard_service() -> DashboardService:
    assert _dashboard_service is not None
    return _dashboard_service
