"""Pydantic bodies for the drag-and-drop reorder endpoint.

The drop target is a tagged union on ``kind``: ``start`` for the drop zone
above a category's first question, ``afterItem`` for a drop onto a question.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class StartTarget(BaseModel):
    kind: Literal["start"]
    # Category of the drop zone; defaults to the moved question's category
    category: Optional[str] = None


class AfterItemTarget(BaseModel):
    kind: Literal["afterItem"]
    item_id: int


DropTarget = Annotated[Union[StartTarget, AfterItemTarget], Field(discriminator="kind")]


class ReorderRequest(BaseModel):
    moved_id: int
    target: DropTarget


class OrderEntry(BaseModel):
    id: int
    question_order: int


class ReorderResponse(BaseModel):
    success: bool = True
    category: str
    questions: List[OrderEntry]
    changes: List[OrderEntry]
    recovered: bool = False
    failed_ids: List[int] = Field(default_factory=list)
    unresolved_ids: List[int] = Field(default_factory=list)


__all__ = [
    "StartTarget",
    "AfterItemTarget",
    "DropTarget",
    "ReorderRequest",
    "OrderEntry",
    "ReorderResponse",
]
