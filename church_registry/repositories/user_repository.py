# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Data-access layer for dashboard user accounts."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine

from church_registry.core.database import storage_errors, users


class UserRepository:
    def __init__(self, engine: Engine):
        self._engine = engine

    def find_by_username(self, username: str) -> Optional[Dict[str, Any]]:
        with storage_errors("user lookup"):
            with self._engine.connect() as conn:
                row = conn.execute(
                    text("SELECT id, username, password, role FROM users WHERE username = :u"),
                    {"u": username},
                ).fetchone()
        if not row:
            return None
        return {"id": row[0], "username": row[1], "password": row[2], "role": row[3]}

    def create(self, username: str, password_hash: str, role: str = "user") -> Dict[str, Any]:
        with storage_errors("user insert"):
            with self._engine.begin() as conn:
                result = conn.execute(users.insert().values(
                    username=username, password=password_hash, role=role,
                    created_at=datetime.now(timezone.utc),
                ))
                user_id = result.inserted_primary_key[0]
        return {"id": user_id, "username": username, "role": role}

    def set_role(self, username: str, role: str) -> bool:
        with storage_errors("role update"):
            with self._engine.begin() as conn:
                exists = conn.execute(
                    text("SELECT 1 FROM users WHERE username = :u"), {"u": username}
                ).fetchone()
                if not exists:
                    return False
                conn.execute(
                    text("UPDATE users SET role = :role WHERE username = :u"),
                    {"role": role, "u": username},
                )
        return True
