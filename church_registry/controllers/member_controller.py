# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: member CRUD. Every mutation returns after the category recount."""
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from church_registry.core.dependencies import get_member_registry
from church_registry.core.errors import NotFoundError, ValidationError
from church_registry.core.security import get_current_user
from church_registry.schemas import MemberEnvelope, MemberIn, MemberOut
from church_registry.services.member_registry import MemberRegistry

router = APIRouter(prefix="/api", tags=["Members"], dependencies=[Depends(get_current_user)])


@router.get("/members", response_model=List[MemberOut])
def list_members(registry: MemberRegistry = Depends(get_member_registry)):
    return registry.list()


@router.get("/members/{member_id}", response_model=MemberOut)
def get_member(member_id: int, registry: MemberRegistry = Depends(get_member_registry)):
    try:
        return registry.get(member_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Member not found")


@router.post("/members", status_code=201, response_model=MemberEnvelope)
def create_member(body: MemberIn, registry: MemberRegistry = Depends(get_member_registry)):
    try:
        member = registry.create(body.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"message": "Member added successfully", "member": member}


@router.put("/members/{member_id}", response_model=MemberEnvelope)
def update_member(member_id: int, body: MemberIn,
                  registry: MemberRegistry = Depends(get_member_registry)):
    try:
        member = registry.update(member_id, body.model_dump())
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Member not found")
    return {"message": "Member updated successfully", "member": member}


@router.delete("/members/{member_id}")
def delete_member(member_id: int, registry: MemberRegistry = Depends(get_member_registry)):
    try:
        result = registry.delete(member_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Member not found")
    return {"message": "Member deleted successfully", **result}
