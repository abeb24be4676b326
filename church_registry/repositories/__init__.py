# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package: re-exports the data-access classes."""
from church_registry.repositories.category_repository import CategoryRepository
from church_registry.repositories.finance_repository import FinanceRepository
from church_registry.repositories.member_repository import MemberRepository
from church_registry.repositories.user_repository import UserRepository

__all__ = ["CategoryRepository", "FinanceRepository", "MemberRepository", "UserRepository"]
