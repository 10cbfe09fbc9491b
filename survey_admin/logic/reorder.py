"""Category-scoped question reordering.

Pure computation behind the question library's drag-and-drop: given the
current ordered questions of one category, the id being dragged and a drop
target, produce the new order plus the minimal list of ``question_order``
changes needed to reach it. Persistence is the caller's job (see
``survey_admin.logic.order_sequences``).

Targets are an explicit tagged variant: ``StartOfGroup`` for the drop zone
above the first question, ``AfterItem`` for a drop onto a question.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple, Union

from survey_admin.logic.errors import CrossGroupError, NotFoundError

logger = logging.getLogger(__name__)

ItemId = Hashable
Change = Tuple[ItemId, int]


@dataclass(frozen=True)
class Item:
    id: ItemId
    category: str
    position: int


@dataclass(frozen=True)
class StartOfGroup:
    kind: str = "start"


@dataclass(frozen=True)
class AfterItem:
    item_id: ItemId
    # Target's category when known; lets drops onto another category be rejected
    category: Optional[str] = None
    kind: str = "afterItem"

    @classmethod
    def of(cls, item: Item) -> "AfterItem":
        return cls(item_id=item.id, category=item.category)


Target = Union[StartOfGroup, AfterItem]


@dataclass(frozen=True)
class ReorderResult:
    sequence: Tuple[Item, ...]
    changes: Tuple[Change, ...]

    @property
    def ids(self) -> List[ItemId]:
        return [item.id for item in self.sequence]


def _index_of(items: Sequence[Item], item_id: ItemId) -> Optional[int]:
    for idx, item in enumerate(items):
        if item.id == item_id:
            return idx
    return None


def renumber(items: Iterable[Item]) -> ReorderResult:
    """Assign contiguous 1-based positions in the given order.

    Returns the rewritten sequence and the ``(id, position)`` pairs for items
    whose position changed.
    """
    sequence: List[Item] = []
    changes: List[Change] = []
    for idx, item in enumerate(items):
        new_position = idx + 1
        if item.position != new_position:
            changes.append((item.id, new_position))
            item = replace(item, position=new_position)
        sequence.append(item)
    return ReorderResult(sequence=tuple(sequence), changes=tuple(changes))


def reorder(group: Sequence[Item], moved_id: ItemId, target: Target) -> ReorderResult:
    """Relocate ``moved_id`` within ``group`` and report the position changes.

    ``group`` must be sorted ascending by current position. A drop onto the
    moved question itself is a no-op and returns the group untouched.

    Raises:
        NotFoundError: ``moved_id`` (or an ``AfterItem`` target claimed to be in
            the same category) is not in ``group``.
        CrossGroupError: the ``AfterItem`` target belongs to another category.
    """
    working = list(group)
    moved_idx = _index_of(working, moved_id)
    if moved_idx is None:
        raise NotFoundError(moved_id)
    moved = working[moved_idx]

    if isinstance(target, AfterItem):
        if target.category is not None and target.category != moved.category:
            raise CrossGroupError(moved.category, target.category)
        if target.item_id == moved_id:
            return ReorderResult(sequence=tuple(working), changes=())
        if _index_of(working, target.item_id) is None:
            raise NotFoundError(target.item_id)

    del working[moved_idx]
    if isinstance(target, StartOfGroup):
        insert_at = 0
    else:
        # Directly after the target in the post-removal sequence
        insert_at = _index_of(working, target.item_id) + 1  # type: ignore[operator]
    working.insert(insert_at, moved)

    result = renumber(working)
    logger.debug(
        "reorder category=%s moved=%s target=%s from=%s to=%s changes=%s",
        moved.category,
        moved_id,
        target,
        moved_idx,
        insert_at,
        len(result.changes),
    )
    return result


def apply_changes(group: Sequence[Item], changes: Iterable[Change]) -> List[Item]:
    """Return ``group`` with ``changes`` applied, ordered by new position."""
    updates = dict(changes)
    applied = [
        replace(item, position=updates[item.id]) if item.id in updates else item
        for item in group
    ]
    return sorted(applied, key=lambda it: it.position)


def group_items(items: Iterable[Item]) -> Dict[str, List[Item]]:
    """Bucket a flat item read by category, each bucket sorted by position.

    Ties keep their read order (the repository reads by position then id).
    """
    groups: Dict[str, List[Item]] = {}
    for item in items:
        groups.setdefault(item.category, []).append(item)
    for bucket in groups.values():
        bucket.sort(key=lambda it: it.position)
    return groups


__all__ = [
    "Item",
    "StartOfGroup",
    "AfterItem",
    "Target",
    "ReorderResult",
    "reorder",
    "renumber",
    "apply_changes",
    "group_items",
]
