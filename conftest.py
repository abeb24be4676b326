"""Shared fixtures: an in-memory database per test and an authenticated client."""
import os

# settings are read once at import; point everything at in-memory SQLite first
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import text

from church_registry.core.database import build_engine, init_schema
from main import create_app


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    init_schema(eng, seed=True)
    yield eng
    eng.dispose()


@pytest.fixture
def client(engine):
    with TestClient(create_app(engine)) as c:
        yield c


def login(client, username="secretary", password="s3cret-pass"):
    client.post("/api/auth/register", json={"username": username, "password": password})
    r = client.post("/api/auth/login", json={"username": username, "password": password})
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return login(client)


def stored_counts(engine, table):
    """slug -> member_count as persisted."""
    with engine.connect() as conn:
        rows = conn.execute(text(f"SELECT slug, member_count FROM {table}")).fetchall()
    return {r[0]: r[1] for r in rows}


def snapshot_counts(engine, table, column, multi):
    """slug -> count computed straight from the member rows, independent of the aggregator."""
    with engine.connect() as conn:
        values = [r[0] for r in conn.execute(text(f"SELECT {column} FROM members")).fetchall()]
        categories = conn.execute(text(f"SELECT slug, name FROM {table}")).fetchall()

    def held(value):
        parts = (value or "").split(",") if multi else [value or ""]
        return {" ".join(p.split()).lower() for p in parts if p.strip()}

    return {
        slug: sum(1 for v in values if " ".join(name.split()).lower() in held(v))
        for slug, name in categories
    }
