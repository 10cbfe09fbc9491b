"""Persistence side of question reordering.

Reads a category's questions as reorder ``Item`` snapshots, applies the
``(id, question_order)`` changes computed by ``survey_admin.logic.reorder``
and restores contiguous 1-based ordering when some of those writes fail.

Each change is written in its own transaction: a batch is not atomic, so a
failure part-way leaves the category partially reordered until the recovery
pass re-reads and renumbers it. No lock is held between the read and the
writes; two editors reordering the same category at once may interleave.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Hashable, Iterable, List, Optional, Tuple

from sqlalchemy import text as sql_text

from survey_admin.db.base import get_engine
from survey_admin.logic.errors import PersistencePartialFailure
from survey_admin.logic.reorder import Change, Item, Target, renumber, reorder
from survey_admin.logic import repository_questions

logger = logging.getLogger(__name__)

PositionWriter = Callable[[int, int], bool]


@dataclass
class ReorderOutcome:
    category: str
    sequence: List[Item]
    changes: List[Change]
    recovered: bool = False
    failed_ids: List[Hashable] = field(default_factory=list)
    # Ids the recovery pass still could not renumber
    unresolved_ids: List[Hashable] = field(default_factory=list)


def read_group(category: str) -> List[Item]:
    """Return the category's questions ordered by ``question_order`` then id."""
    eng = get_engine()
    with eng.connect() as conn:
        rows = conn.execute(
            sql_text(
                "SELECT id, category, COALESCE(question_order, 0) FROM sustainability_questions "
                "WHERE category = :cat ORDER BY question_order ASC, id ASC"
            ),
            {"cat": category},
        ).fetchall()
    return [Item(id=int(r[0]), category=str(r[1]), position=int(r[2])) for r in rows]


def next_question_order(category: str) -> int:
    """Return the order value that appends a new question to ``category``.

    Uses MAX(question_order) + 1, falling back to COUNT(*) + 1 when the
    aggregate fails.
    """
    eng = get_engine()
    try:
        with eng.connect() as conn:
            row = conn.execute(
                sql_text(
                    "SELECT COALESCE(MAX(question_order), 0) FROM sustainability_questions WHERE category = :cat"
                ),
                {"cat": category},
            ).fetchone()
        return (int(row[0]) if row and row[0] is not None else 0) + 1
    except Exception:
        logger.error("next_question_order MAX failed category=%s", category, exc_info=True)

    with eng.connect() as conn2:
        cnt = conn2.execute(
            sql_text("SELECT COUNT(*) FROM sustainability_questions WHERE category = :cat"),
            {"cat": category},
        ).scalar_one()
    return int(cnt) + 1


def apply_position_changes(
    changes: Iterable[Change],
    *,
    write: Optional[PositionWriter] = None,
) -> List[Hashable]:
    """Persist each ``(id, position)`` independently and return the applied ids.

    Every change is attempted even after a failure. A write that raises or
    matches no row counts as failed.

    Raises:
        PersistencePartialFailure: at least one change was not applied.
    """
    write = write or repository_questions.update_question_order
    applied: List[Hashable] = []
    failed: List[Hashable] = []
    for item_id, position in changes:
        try:
            ok = write(item_id, position)
        except Exception:
            logger.error(
                "order_sequences.write_failed id=%s position=%s", item_id, position, exc_info=True
            )
            ok = False
        if ok:
            applied.append(item_id)
        else:
            failed.append(item_id)
    if failed:
        raise PersistencePartialFailure(failed=failed, applied=applied)
    return applied


def _recover(
    category: str, write: Optional[PositionWriter]
) -> Tuple[List[Item], List[Change], List[Hashable]]:
    """Re-read ``category`` and renumber it from the persisted truth.

    Returns the authoritative sequence, the repair changes that were written
    and the ids that still could not be written.
    """
    fresh = read_group(category)
    repair = renumber(fresh)
    still_failed: List[Hashable] = []
    if repair.changes:
        try:
            apply_position_changes(repair.changes, write=write)
        except PersistencePartialFailure as exc:
            still_failed = list(exc.failed)
            logger.error(
                "order_sequences.recover_incomplete category=%s failed=%s", category, still_failed
            )
    written = [change for change in repair.changes if change[0] not in still_failed]
    return read_group(category), written, still_failed


def reorder_questions(
    category: str,
    moved_id: int,
    target: Target,
    *,
    write: Optional[PositionWriter] = None,
) -> ReorderOutcome:
    """Move ``moved_id`` within ``category`` and persist the new order.

    On partial write failure the optimistic result is discarded: the category
    is re-read, renumbered and returned as stored, with ``recovered`` set.
    ``changes`` then holds only the repair writes; ``sequence`` is authoritative.
    ``NotFoundError`` and ``CrossGroupError`` propagate before any write.
    """
    group = read_group(category)
    result = reorder(group, moved_id, target)
    logger.info(
        "questions.reorder.computed category=%s moved=%s target=%s before=%s after=%s changes=%s",
        category,
        moved_id,
        target,
        [it.id for it in group],
        result.ids,
        list(result.changes),
    )
    try:
        apply_position_changes(result.changes, write=write)
    except PersistencePartialFailure as exc:
        logger.error(
            "questions.reorder.partial_failure category=%s failed=%s applied=%s",
            category,
            list(exc.failed),
            list(exc.applied),
        )
        sequence, repaired, still_failed = _recover(category, write)
        return ReorderOutcome(
            category=category,
            sequence=sequence,
            changes=repaired,
            recovered=True,
            failed_ids=list(exc.failed),
            unresolved_ids=still_failed,
        )
    logger.info("questions.reorder.applied category=%s changes=%s", category, len(result.changes))
    return ReorderOutcome(category=category, sequence=list(result.sequence), changes=list(result.changes))


__all__ = [
    "ReorderOutcome",
    "read_group",
    "next_question_order",
    "apply_position_changes",
    "reorder_questions",
]
