"""Unit tests for the category-scoped reorder engine.

Pure computation only: no database, no application.
"""

from __future__ import annotations

import itertools
from typing import List, Sequence

import pytest

from survey_admin.logic.errors import CrossGroupError, NotFoundError, PersistencePartialFailure, ReorderError
from survey_admin.logic.reorder import (
    AfterItem,
    Item,
    StartOfGroup,
    apply_changes,
    group_items,
    renumber,
    reorder,
)


def _group(ids: Sequence[str], category: str = "X") -> List[Item]:
    return [Item(id=i, category=category, position=idx + 1) for idx, i in enumerate(ids)]


# -----------------------------
# Scenarios
# -----------------------------


def test_move_last_after_first():
    group = _group("ABCD")

    result = reorder(group, "D", AfterItem("A"))

    assert result.ids == ["A", "D", "B", "C"]
    assert list(result.changes) == [("D", 2), ("B", 3), ("C", 4)]


def test_move_first_to_start_is_noop():
    group = _group("ABC")

    result = reorder(group, "A", StartOfGroup())

    assert result.ids == ["A", "B", "C"]
    assert result.changes == ()


def test_cross_group_target_is_rejected():
    group = _group("ABC", category="X")
    target = AfterItem.of(Item(id="Z", category="Y", position=1))

    with pytest.raises(CrossGroupError) as excinfo:
        reorder(group, "B", target)

    assert excinfo.value.moved_category == "X"
    assert excinfo.value.target_category == "Y"
    # Input left untouched
    assert [it.position for it in group] == [1, 2, 3]


def test_unknown_moved_id_raises_not_found():
    with pytest.raises(NotFoundError) as excinfo:
        reorder(_group("ABC"), "Q", StartOfGroup())
    assert excinfo.value.item_id == "Q"


def test_unknown_target_in_same_category_raises_not_found():
    with pytest.raises(NotFoundError) as excinfo:
        reorder(_group("ABC"), "A", AfterItem("Z", category="X"))
    assert excinfo.value.item_id == "Z"


def test_unknown_target_without_category_raises_not_found():
    with pytest.raises(NotFoundError):
        reorder(_group("ABC"), "A", AfterItem("Z"))


def test_drop_onto_self_is_noop():
    group = _group("ABCD")

    result = reorder(group, "C", AfterItem("C"))

    assert result.ids == ["A", "B", "C", "D"]
    assert result.changes == ()


def test_downward_move_lands_after_target():
    result = reorder(_group("ABCD"), "A", AfterItem("C"))

    assert result.ids == ["B", "C", "A", "D"]
    assert list(result.changes) == [("B", 1), ("C", 2), ("A", 3)]


def test_start_gives_position_one_and_shifts_preceding_items():
    result = reorder(_group("ABCDE"), "D", StartOfGroup())

    assert result.ids == ["D", "A", "B", "C", "E"]
    assert list(result.changes) == [("D", 1), ("A", 2), ("B", 3), ("C", 4)]
    # Items after the moved one keep their slot
    assert result.sequence[4].position == 5


def test_last_after_second_to_last_is_noop_when_adjacent():
    result = reorder(_group("ABCD"), "D", AfterItem("C"))

    assert result.ids == ["A", "B", "C", "D"]
    assert result.changes == ()


def test_adjacent_upward_move_swaps_two_items():
    result = reorder(_group("ABCD"), "D", AfterItem("B"))

    assert result.ids == ["A", "B", "D", "C"]
    assert list(result.changes) == [("D", 3), ("C", 4)]


def test_single_item_group():
    result = reorder(_group("A"), "A", StartOfGroup())
    assert result.ids == ["A"]
    assert result.changes == ()


def test_non_contiguous_positions_are_normalised():
    group = [
        Item(id="A", category="X", position=2),
        Item(id="B", category="X", position=5),
        Item(id="C", category="X", position=5),
        Item(id="D", category="X", position=9),
    ]

    result = reorder(group, "D", AfterItem("A"))

    assert result.ids == ["A", "D", "B", "C"]
    assert [it.position for it in result.sequence] == [1, 2, 3, 4]
    assert list(result.changes) == [("A", 1), ("D", 2), ("B", 3), ("C", 4)]


def test_integer_ids_are_supported():
    group = [Item(id=10 + i, category="Energy", position=i + 1) for i in range(3)]

    result = reorder(group, 12, AfterItem(10, category="Energy"))

    assert result.ids == [10, 12, 11]


def test_input_sequence_is_not_mutated():
    group = _group("ABCD")
    snapshot = list(group)

    reorder(group, "A", AfterItem("D"))

    assert group == snapshot


# -----------------------------
# Properties over every move of small groups
# -----------------------------


def _all_moves(ids: str):
    for moved in ids:
        yield moved, StartOfGroup()
        for target in ids:
            yield moved, AfterItem(target)


@pytest.mark.parametrize("ids", ["A", "AB", "ABC", "ABCD", "ABCDE"])
def test_every_move_is_a_permutation_with_contiguous_positions(ids):
    group = _group(ids)
    for moved, target in _all_moves(ids):
        result = reorder(group, moved, target)

        assert sorted(result.ids) == sorted(ids), (moved, target)
        assert [it.position for it in result.sequence] == list(range(1, len(ids) + 1))


@pytest.mark.parametrize("ids", ["AB", "ABC", "ABCDE"])
def test_change_list_reproduces_final_positions(ids):
    group = _group(ids)
    for moved, target in _all_moves(ids):
        result = reorder(group, moved, target)
        changed_ids = [cid for cid, _ in result.changes]

        assert len(changed_ids) == len(set(changed_ids))
        assert set(changed_ids) <= set(ids)
        assert apply_changes(group, result.changes) == list(result.sequence)


@pytest.mark.parametrize("ids", ["ABC", "ABCDE"])
def test_moved_item_lands_directly_after_target(ids):
    group = _group(ids)
    for moved, target in itertools.permutations(ids, 2):
        result = reorder(group, moved, AfterItem(target))
        assert result.ids.index(moved) == result.ids.index(target) + 1


@pytest.mark.parametrize("ids", ["AB", "ABCD"])
def test_dropping_into_current_slot_changes_nothing(ids):
    group = _group(ids)

    assert reorder(group, ids[0], StartOfGroup()).changes == ()
    for prev, cur in zip(ids, ids[1:]):
        result = reorder(group, cur, AfterItem(prev))
        assert result.changes == ()
        assert result.ids == list(ids)


# -----------------------------
# Helpers
# -----------------------------


def test_renumber_contiguous_group_reports_no_changes():
    result = renumber(_group("ABC"))
    assert result.changes == ()


def test_renumber_reports_only_moved_positions():
    items = [
        Item(id="A", category="X", position=1),
        Item(id="B", category="X", position=3),
        Item(id="C", category="X", position=3),
    ]
    assert list(renumber(items).changes) == [("B", 2)]


def test_group_items_buckets_by_category_and_sorts_by_position():
    items = [
        Item(id=3, category="Water", position=2),
        Item(id=1, category="Energy", position=2),
        Item(id=2, category="Energy", position=1),
        Item(id=4, category="Water", position=1),
    ]

    groups = group_items(items)

    assert [it.id for it in groups["Energy"]] == [2, 1]
    assert [it.id for it in groups["Water"]] == [4, 3]


def test_after_item_of_carries_category():
    target = AfterItem.of(Item(id=7, category="GHG", position=3))
    assert target.item_id == 7
    assert target.category == "GHG"
    assert target.kind == "afterItem"


def test_errors_expose_problem_codes():
    cross = CrossGroupError("X", "Y").to_problem()
    assert cross["status"] == 409
    assert cross["code"] == "REORDER_CROSS_GROUP"
    assert cross["detail"] == "Questions can only be reordered within the same category"

    missing = NotFoundError(5).to_problem()
    assert missing["status"] == 404
    assert missing["code"] == "REORDER_ITEM_NOT_FOUND"


def test_partial_failure_carries_ids_and_no_http_mapping_of_its_own():
    exc = PersistencePartialFailure(failed=[3], applied=[1, 2])

    assert exc.failed == (3,)
    assert exc.applied == (1, 2)
    assert str(exc) == "1 position update(s) failed, 2 applied"
    # Recovered in the adapter, never rendered as a response
    assert "status" not in vars(PersistencePartialFailure)
    assert exc.status == ReorderError.status
