"""Client name normalization and identity grouping.

Client uniqueness is not enforced by the database. Two names denote the
same client only when their normalized keys are exactly equal; write-time
client resolution and archive grouping both go through ``normalize_name``
so they never disagree.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def normalize_name(name: Optional[str]) -> str:
    """Return the comparison key for a client name.

    Lower-cases, strips periods, drops single-letter words (middle
    initials), collapses whitespace runs and trims.

    >>> normalize_name("Mario A. Rossi")
    'mario rossi'
    """
    if not name:
        return ""
    lowered = name.lower().replace(".", "")
    return " ".join(word for word in lowered.split() if len(word) > 1)


def names_match(left: Optional[str], right: Optional[str]) -> bool:
    """True when both names have the same non-empty normalized key."""
    left_key = normalize_name(left)
    return bool(left_key) and left_key == normalize_name(right)


def search_token(name: Optional[str]) -> str:
    """Longest word of the normalized name, used to narrow a pattern-match lookup."""
    words = normalize_name(name).split()
    if not words:
        return ""
    return max(words, key=len)


@dataclass
class ClientGroup:
    """Stored client rows that denote the same real person."""

    key: str
    representative: Any
    members: List[Any] = field(default_factory=list)

    @property
    def member_ids(self) -> List[Any]:
        return [getattr(member, "id", None) for member in self.members]


def _created_at(row: Any) -> float:
    created_at: Optional[datetime] = getattr(row, "created_at", None)
    if created_at is None:
        return float("-inf")
    return created_at.timestamp()


def group_clients(
    rows: Iterable[T],
    name_of: Callable[[T], Optional[str]] = lambda row: getattr(row, "full_name", None),
) -> List[ClientGroup]:
    """Group client rows by normalized name.

    The most recently created row of each group is its representative.
    Groups come back ordered by their representative, most recent first.
    Rows whose name normalizes to an empty key are kept as singletons.
    """
    groups: Dict[str, ClientGroup] = {}
    singletons: List[ClientGroup] = []

    for row in rows:
        key = normalize_name(name_of(row))
        if not key:
            singletons.append(ClientGroup(key=key, representative=row, members=[row]))
            continue

        group = groups.get(key)
        if group is None:
            groups[key] = ClientGroup(key=key, representative=row, members=[row])
            continue

        group.members.append(row)
        if _created_at(row) > _created_at(group.representative):
            group.representative = row

    ordered = list(groups.values()) + singletons
    ordered.sort(key=lambda g: _created_at(g.representative), reverse=True)
    for group in ordered:
        group.members.sort(key=_created_at, reverse=True)
    return ordered
