# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: contributions and expenses."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from church_registry.core.dependencies import get_finance_service
from church_registry.core.errors import ValidationError
from church_registry.core.security import get_current_user
from church_registry.schemas import ContributionIn, ContributionOut, ExpenseIn, ExpenseOut
from church_registry.services.finance_service import FinanceService

router = APIRouter(prefix="/api", tags=["Finance"], dependencies=[Depends(get_current_user)])


@router.get("/contributions", response_model=List[ContributionOut])
def list_contributions(service: FinanceService = Depends(get_finance_service)):
    return service.list_contributions()


@router.post("/contributions", status_code=201, response_model=ContributionOut)
def add_contribution(body: ContributionIn, service: FinanceService = Depends(get_finance_service)):
    try:
        return service.add_contribution(body.member_id, body.amount, body.method, body.note)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/expenses", response_model=List[ExpenseOut])
def list_expenses(service: FinanceService = Depends(get_finance_service)):
    return service.list_expenses()


@router.post("/expenses", status_code=201, response_model=ExpenseOut)
def add_expense(body: ExpenseIn, service: FinanceService = Depends(get_finance_service)):
    try:
        return service.add_expense(body.title, body.amount, body.note)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
