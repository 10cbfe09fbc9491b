"""Reorder error taxonomy.

Each error carries the problem+json ``code`` and HTTP ``status`` the global
handler in ``survey_admin.http.problem`` uses to shape the response, so route
modules never hardcode them.
"""

from __future__ import annotations

from typing import Any, Hashable, Iterable, Optional


class ReorderError(Exception):
    """Base class for recoverable reorder failures."""

    code = "REORDER_ERROR"
    status = 400
    title = "Reorder Failed"

    def to_problem(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "status": self.status,
            "detail": str(self),
            "code": self.code,
        }


class NotFoundError(ReorderError):
    """The moved item (or an in-group target) is absent from the snapshot."""

    code = "REORDER_ITEM_NOT_FOUND"
    status = 404
    title = "Not Found"

    def __init__(self, item_id: Hashable) -> None:
        super().__init__(f"question {item_id} not found in category snapshot")
        self.item_id = item_id


class CrossGroupError(ReorderError):
    """The drop target lives in a different category than the moved item."""

    code = "REORDER_CROSS_GROUP"
    status = 409
    title = "Conflict"

    def __init__(self, moved_category: str, target_category: Optional[str]) -> None:
        super().__init__("Questions can only be reordered within the same category")
        self.moved_category = moved_category
        self.target_category = target_category

    def to_problem(self) -> dict[str, Any]:
        problem = super().to_problem()
        problem["moved_category"] = self.moved_category
        problem["target_category"] = self.target_category
        return problem


class PersistencePartialFailure(ReorderError):
    """Some position updates failed while others were applied.

    Never reaches the client as an error: the adapter re-reads the category
    and reports the authoritative state instead.
    """

    def __init__(self, failed: Iterable[Hashable], applied: Iterable[Hashable]) -> None:
        self.failed = tuple(failed)
        self.applied = tuple(applied)
        super().__init__(
            f"{len(self.failed)} position update(s) failed, {len(self.applied)} applied"
        )


__all__ = [
    "ReorderError",
    "NotFoundError",
    "CrossGroupError",
    "PersistencePartialFailure",
]
