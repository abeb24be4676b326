# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: ministry/department counts and the explicit recount."""
from typing import List

from fastapi import APIRouter, Depends

from church_registry.core.dependencies import get_category_repo, get_count_aggregator
from church_registry.core.security import get_current_user, require_roles
from church_registry.repositories import CategoryRepository
from church_registry.schemas import CategoryListing, CategoryOut, RecountResult
from church_registry.services.count_aggregator import CountAggregator

router = APIRouter(prefix="/api", tags=["Categories"])


@router.get("/categories", response_model=CategoryListing, dependencies=[Depends(get_current_user)])
def list_categories(repo: CategoryRepository = Depends(get_category_repo)):
    return {"ministries": repo.list("ministry"), "departments": repo.list("department")}


@router.get("/ministries", response_model=List[CategoryOut], dependencies=[Depends(get_current_user)])
def list_ministries(repo: CategoryRepository = Depends(get_category_repo)):
    return repo.list("ministry")


@router.get("/departments", response_model=List[CategoryOut], dependencies=[Depends(get_current_user)])
def list_departments(repo: CategoryRepository = Depends(get_category_repo)):
    return repo.list("department")


@router.post("/categories/recount", response_model=RecountResult,
             dependencies=[Depends(require_roles("admin"))])
def recount_categories(aggregator: CountAggregator = Depends(get_count_aggregator)):
    # StorageError propagates to the global handler as a 500
    return aggregator.recompute()
