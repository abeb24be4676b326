# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: member records.

Every create/update/delete commits the member write first, then recounts the
categories before returning. A failed recount does not undo or fail the write;
the counts stay stale until the next successful recount.
"""
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from church_registry.core.errors import NotFoundError, StorageError, ValidationError
from church_registry.core.logging import get_logger
from church_registry.metrics import MEMBER_MUTATIONS, RECOUNT_FAILURES
from church_registry.repositories import MemberRepository
from church_registry.schemas import MEMBER_REQUIRED_FIELDS
from church_registry.services.count_aggregator import CountAggregator

logger = get_logger(__name__)

OPTIONAL_TEXT_FIELDS = ("lastname", "ministry", "department", "home_location")


def _missing_required(fields: Dict[str, Any]) -> List[str]:
    return [
        name for name in MEMBER_REQUIRED_FIELDS
        if not isinstance(fields.get(name), str) or not fields[name].strip()
    ]


def _joined_ministries(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(m.strip() for m in value if isinstance(m, str) and m.strip())
    return value or ""


def _joined_at(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        try:
            return date.fromisoformat(value.strip())
        except ValueError as exc:
            raise ValidationError(f"joined_at is not an ISO date: {value!r}") from exc
    raise ValidationError(f"joined_at is not an ISO date: {value!r}")


def _member_values(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Full column set for a write; absent optional text becomes ``""``.

    A ministry list is stored as one comma-delimited string and ``joined_at``
    may be a ``date`` or an ISO ``YYYY-MM-DD`` string.
    """
    values = {name: fields[name] for name in MEMBER_REQUIRED_FIELDS}
    for name in OPTIONAL_TEXT_FIELDS:
        values[name] = fields.get(name) or ""
    values["ministry"] = _joined_ministries(fields.get("ministry"))
    values["joined_at"] = _joined_at(fields.get("joined_at"))
    return values


class MemberRegistry:
    def __init__(self, member_repo: MemberRepository, aggregator: CountAggregator):
        self._repo = member_repo
        self._aggregator = aggregator

    def _validate(self, fields: Dict[str, Any]) -> None:
        missing = _missing_required(fields)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    def _recount(self, operation: str, member_id: int) -> None:
        MEMBER_MUTATIONS.labels(operation=operation).inc()
        try:
            self._aggregator.recompute()
        except StorageError:
            RECOUNT_FAILURES.inc()
            logger.exception(
                "Category recount failed after %s of member id=%s", operation, member_id,
                extra={"member_id": member_id, "operation": operation},
            )

    # ── Write ──────────────────────────────────────────────────────────

    def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        self._validate(fields)
        values = _member_values(fields)
        values["joined_at"] = values["joined_at"] or date.today()
        values["created_at"] = datetime.now(timezone.utc)
        member = self._repo.insert(values)
        logger.info("Member created id=%s", member["id"],
                    extra={"member_id": member["id"], "operation": "create"})
        self._recount("create", member["id"])
        return member

    def update(self, member_id: int, fields: Dict[str, Any]) -> Dict[str, Any]:
        if not self._repo.exists(member_id):
            raise NotFoundError(f"Member {member_id} not found")
        self._validate(fields)
        member = self._repo.replace(member_id, _member_values(fields))
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        logger.info("Member updated id=%s", member_id,
                    extra={"member_id": member_id, "operation": "update"})
        self._recount("update", member_id)
        return member

    def delete(self, member_id: int) -> Dict[str, Any]:
        if not self._repo.delete(member_id):
            raise NotFoundError(f"Member {member_id} not found")
        logger.info("Member deleted id=%s", member_id,
                    extra={"member_id": member_id, "operation": "delete"})
        self._recount("delete", member_id)
        return {"ok": True, "id": member_id}

    # ── Read ───────────────────────────────────────────────────────────

    def get(self, member_id: int) -> Dict[str, Any]:
        member = self._repo.get(member_id)
        if member is None:
            raise NotFoundError(f"Member {member_id} not found")
        return member

    def list(self) -> List[Dict[str, Any]]:
        return self._repo.list_all()
