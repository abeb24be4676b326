# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: ministry/department member counts.

Counts are never patched. Every recount reads a snapshot of the member table
on one transaction and overwrites every category's ``member_count``, so two
racing recounts each write a value that is correct for the snapshot they read
and the last one to commit wins.
"""
from typing import Dict, Iterable, List, Optional, Tuple

from church_registry.core.database import storage_errors
from church_registry.core.logging import get_logger
from church_registry.metrics import CATEGORY_MEMBERS, RECOUNT_DURATION
from church_registry.repositories import CategoryRepository, MemberRepository
from church_registry.services.normalizer import normalize, tokens

logger = get_logger(__name__)

# kind -> (result key, position in the member snapshot tuple, multi-value field?)
CATEGORY_FIELDS = {
    "ministry": ("ministries", 0, True),
    "department": ("departments", 1, False),
}


def count_members(category_names: Iterable[str], member_values: Iterable[Optional[str]],
                  multi: bool) -> Dict[str, int]:
    """Number of members whose normalised field contains each category name."""
    member_tokens = [tokens(v, multi=multi) for v in member_values]
    return {
        name: sum(1 for held in member_tokens if normalize(name) in held)
        for name in category_names
    }


class CountAggregator:
    def __init__(self, member_repo: MemberRepository, category_repo: CategoryRepository):
        self._members = member_repo
        self._categories = category_repo

    def recompute(self) -> Dict[str, Dict[str, int]]:
        """Recount every ministry and department from the current member set.

        Returns ``{"ministries": {name: count}, "departments": {name: count}}``.
        Raises ``StorageError`` when the store is unavailable.
        """
        result: Dict[str, Dict[str, int]] = {}
        with RECOUNT_DURATION.time(), storage_errors("category recount"):
            with self._categories.begin_transaction() as conn:
                snapshot: List[Tuple[str, str]] = self._members.category_snapshot(conn)
                for kind, (key, position, multi) in CATEGORY_FIELDS.items():
                    categories = self._categories.names(conn, kind)
                    by_name = count_members(
                        [name for _, name in categories],
                        [row[position] for row in snapshot],
                        multi,
                    )
                    self._categories.write_counts(
                        conn, kind, {cid: by_name[name] for cid, name in categories}
                    )
                    result[key] = by_name

        for kind, (key, _, _) in CATEGORY_FIELDS.items():
            for name, count in result[key].items():
                CATEGORY_MEMBERS.labels(kind=kind, name=name).set(count)
        logger.info("Category counts recomputed members=%d", len(snapshot))
        return result
