"""
Recurring-blocker detection.

Greedy, order-dependent grouping: each blocker joins the first existing
group whose key
  - contains it,
  - is contained in it, or
  - contains one of its words longer than 3 characters;
otherwise it opens a new group keyed by its own normalized text.

This is a cheap string heuristic, not semantic clustering: feeding the
same blockers in another order can produce different groups.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Union

_MIN_SHARED_WORD_LEN = 4


@dataclass
class BlockerGroup:
    blocker: str
    occurrences: int = 0
    dates: list[str] = field(default_factory=list)


def normalize_blocker(text: str) -> str:
    return text.lower().strip()


def _matches(key: str, blocker: str) -> bool:
    if key in blocker or blocker in key:
        return True
    return any(
        len(word) >= _MIN_SHARED_WORD_LEN and word in key
        for word in blocker.split(" ")
    )


def cluster_blockers(
    occurrences: Iterable[tuple[Union[date, str], str]],
) -> list[BlockerGroup]:
    """
    Group `(date, blocker_text)` pairs. Blank blockers are ignored.
    Returns groups sorted by occurrence count, ties in creation order.
    """
    groups: dict[str, BlockerGroup] = {}
    for day, text in occurrences:
        normalized = normalize_blocker(text or "")
        if not normalized:
            continue
        group = next((g for key, g in groups.items() if _matches(key, normalized)), None)
        if group is None:
            group = groups[normalized] = BlockerGroup(blocker=normalized)
        group.occurrences += 1
        group.dates.append(day.isoformat() if isinstance(day, date) else str(day))

    return sorted(groups.values(), key=lambda g: g.occurrences, reverse=True)
