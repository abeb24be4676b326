# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Authentication, registration, login and the current user."""
from fastapi import APIRouter, Depends, HTTPException

from church_registry.core.dependencies import get_auth_service
from church_registry.core.errors import ValidationError
from church_registry.core.security import get_current_user
from church_registry.schemas import Credentials
from church_registry.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=201)
def register(body: Credentials, service: AuthService = Depends(get_auth_service)):
    try:
        service.register(body.username, body.password)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"message": "Registration successful!"}


@router.post("/login")
def login(body: Credentials, service: AuthService = Depends(get_auth_service)):
    try:
        return service.login(body.username, body.password)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/me")
def me(user: dict = Depends(get_current_user)):
    return {"user": user}
