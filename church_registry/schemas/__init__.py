# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Pydantic request/response schemas and the fixed category vocabularies."""
from datetime import date
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, field_validator

# (slug, display name); the slug is the key the dashboard binds its counters to.
MINISTRY_VOCABULARY = (
    ("ministry-praise", "Praise and Worship"),
    ("ministry-ushering", "Ushering"),
    ("ministry-media", "Media"),
    ("ministry-housekeeping", "House Keeping"),
    ("ministry-hospitality", "Hospitality"),
    ("ministry-nil", "Nil"),
)
DEPARTMENT_VOCABULARY = (
    ("dept-kg", "Kingdom Generation"),
    ("dept-teenagers", "Teenagers"),
    ("dept-vijanaz", "Vijanaz"),
    ("dept-women", "Women"),
    ("dept-men", "Men"),
)

MEMBER_REQUIRED_FIELDS = ("firstname", "phone", "gender")
VALID_ROLES = ("user", "admin")


class MemberIn(BaseModel):
    """Create/replace body. Required fields are checked by the registry so that
    a missing field is reported as 400 with every missing name listed."""
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    ministry: Optional[Union[str, List[str]]] = None
    department: Optional[str] = None
    home_location: Optional[str] = None
    joined_at: Optional[date] = None

    @field_validator("ministry")
    @classmethod
    def join_ministries(cls, v):
        if isinstance(v, list):
            return ", ".join(m.strip() for m in v if m and m.strip())
        return v

    @field_validator("joined_at", mode="before")
    @classmethod
    def blank_date_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class MemberOut(BaseModel):
    id: int
    firstname: str
    lastname: str
    phone: str
    gender: str
    ministry: str
    department: str
    home_location: str
    joined_at: Optional[str]
    created_at: str


class MemberEnvelope(BaseModel):
    message: str
    member: MemberOut


class CategoryOut(BaseModel):
    id: int
    slug: str
    name: str
    member_count: int


class CategoryListing(BaseModel):
    ministries: List[CategoryOut]
    departments: List[CategoryOut]


class RecountResult(BaseModel):
    ministries: Dict[str, int]
    departments: Dict[str, int]


class Credentials(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class ContributionIn(BaseModel):
    member_id: Optional[int] = None
    amount: Optional[float] = None
    method: Optional[str] = None
    note: Optional[str] = None


class ContributionOut(BaseModel):
    id: int
    member_id: Optional[int]
    firstname: Optional[str] = None
    lastname: Optional[str] = None
    amount: float
    method: str
    note: str
    created_at: str


class ExpenseIn(BaseModel):
    title: Optional[str] = None
    amount: Optional[float] = None
    note: Optional[str] = None


class ExpenseOut(BaseModel):
    id: int
    title: str
    amount: float
    note: str
    created_at: str


class DashboardSummary(BaseModel):
    total_members: int
    male: int
    female: int
    ministries: Dict[str, int]
    departments: Dict[str, int]
    contributions_total: float
    expenses_total: float
    balance: float
