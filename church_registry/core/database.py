# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""SQLAlchemy engine factory, table definitions and category seeding."""
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import (
    Column, Date, DateTime, Float, ForeignKey, Integer, MetaData, String, Table, Text,
    create_engine, select,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from church_registry.core.config import settings
from church_registry.core.errors import StorageError
from church_registry.core.logging import get_logger
from church_registry.schemas import DEPARTMENT_VOCABULARY, MINISTRY_VOCABULARY

logger = get_logger(__name__)

metadata = MetaData()

members = Table(
    "members", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("firstname", Text, nullable=False),
    Column("lastname", Text, nullable=False, default=""),
    Column("phone", Text, nullable=False),
    Column("gender", Text, nullable=False),
    Column("ministry", Text, nullable=False, default=""),
    Column("department", Text, nullable=False, default=""),
    Column("home_location", Text, nullable=False, default=""),
    Column("joined_at", Date, nullable=True),
    Column("created_at", DateTime, nullable=False),
)


def _category_table(name: str) -> Table:
    return Table(
        name, metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("slug", String(64), nullable=False, unique=True),
        Column("name", String(128), nullable=False, unique=True),
        Column("member_count", Integer, nullable=False, default=0),
    )


ministries = _category_table("ministries")
departments = _category_table("departments")

users = Table(
    "users", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(128), nullable=False, unique=True),
    Column("password", String(255), nullable=False),
    Column("role", String(32), nullable=False, default="user"),
    Column("created_at", DateTime, nullable=False),
)

contributions = Table(
    "contributions", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("member_id", Integer, ForeignKey("members.id", ondelete="SET NULL"), nullable=True),
    Column("amount", Float, nullable=False),
    Column("method", Text, nullable=False, default=""),
    Column("note", Text, nullable=False, default=""),
    Column("created_at", DateTime, nullable=False),
)

expenses = Table(
    "expenses", metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("title", Text, nullable=False),
    Column("amount", Float, nullable=False),
    Column("note", Text, nullable=False, default=""),
    Column("created_at", DateTime, nullable=False),
)


def build_engine(url: Optional[str] = None) -> Engine:
    """Create the process-wide connection pool for ``url`` (defaults to settings)."""
    url = url or settings.DATABASE_URL
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # one shared connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


engine = build_engine()


@contextmanager
def storage_errors(action: str) -> Iterator[None]:
    """Translate driver/SQLAlchemy failures into ``StorageError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Storage failure during %s: %s", action, exc)
        raise StorageError(f"Storage failure during {action}") from exc


def seed_categories(conn) -> int:
    """Insert any vocabulary entry missing from the category tables. Returns rows added."""
    added = 0
    for table, vocabulary in ((ministries, MINISTRY_VOCABULARY), (departments, DEPARTMENT_VOCABULARY)):
        existing = {row[0] for row in conn.execute(select(table.c.slug))}
        for slug, name in vocabulary:
            if slug not in existing:
                conn.execute(table.insert().values(slug=slug, name=name, member_count=0))
                added += 1
    return added


def init_schema(target: Engine, seed: Optional[bool] = None) -> None:
    """Create missing tables and, unless disabled, seed the category vocabularies."""
    seed = settings.SEED_CATEGORIES if seed is None else seed
    with storage_errors("schema initialisation"):
        metadata.create_all(target)
        if seed:
            with target.begin() as conn:
                added = seed_categories(conn)
            if added:
                logger.info("Seeded %d category rows", added)
