# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Canonical form of free-text ministry/department values.

Only used for matching. Stored values keep whatever casing and spacing the
caller sent, so the dashboard shows them back unchanged.
"""
from typing import FrozenSet, Optional

DELIMITER = ","


def normalize(value: Optional[str]) -> str:
    """Collapse whitespace runs, trim and case-fold. ``None`` becomes ``""``."""
    if not value:
        return ""
    return " ".join(value.split()).casefold()


def tokens(value: Optional[str], multi: bool = True) -> FrozenSet[str]:
    """Set of normalised names held by a category field.

    Multi-value fields (ministry) are split on the delimiter; single-value
    fields (department) are one token. Empty parts are dropped.
    """
    if not value:
        return frozenset()
    parts = value.split(DELIMITER) if multi else [value]
    return frozenset(t for t in (normalize(p) for p in parts) if t)
