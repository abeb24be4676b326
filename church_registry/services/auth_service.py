# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Authentication service: account registration and token login."""
from typing import Any, Dict, Optional

from fastapi import HTTPException

from church_registry.core.errors import ValidationError
from church_registry.core.logging import get_logger
from church_registry.core.security import create_access_token, hash_password, verify_password
from church_registry.metrics import LOGIN_ATTEMPTS
from church_registry.repositories import UserRepository

logger = get_logger(__name__)


class AuthService:
    def __init__(self, user_repo: UserRepository):
        self._repo = user_repo

    def register(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """New accounts always get the ``user`` role; admins are promoted out of band."""
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required.")
        if self._repo.find_by_username(username):
            raise ValidationError("User already exists.")
        user = self._repo.create(username, hash_password(password))
        logger.info("User registered username=%s", username)
        return user

    def login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required.")
        user = self._repo.find_by_username(username)
        if user is None or not verify_password(password, user["password"]):
            LOGIN_ATTEMPTS.labels(outcome="rejected").inc()
            raise HTTPException(status_code=401, detail="Invalid username or password")
        LOGIN_ATTEMPTS.labels(outcome="accepted").inc()
        token = create_access_token({"sub": user["username"], "id": user["id"], "role": user["role"]})
        return {
            "message": "Login successful",
            "token": token,
            "user": {"id": user["id"], "username": user["username"], "role": user["role"]},
        }
