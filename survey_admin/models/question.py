"""Pydantic request bodies for the question library."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

# Fields a create or full update must carry (question_order is resolved on create)
REQUIRED_QUESTION_FIELDS = ("category", "question_text", "question_type", "answer_type", "max_points")


class QuestionBody(BaseModel):
    """Create/update payload.

    Every field is optional at the schema level so that an order-only PUT
    validates; routes check ``missing_required`` for the other operations.
    """

    category: Optional[str] = None
    question_order: Optional[int] = Field(default=None, gt=0)
    question_text: Optional[str] = None
    question_type: Optional[str] = None
    answer_type: Optional[str] = None
    effort_rating: Optional[float] = None
    impact_rating: Optional[float] = None
    max_points: Optional[int] = Field(default=None, ge=0)

    def is_order_only(self) -> bool:
        return self.model_fields_set == {"question_order"}

    def missing_required(self, *, include_order: bool = False) -> Optional[str]:
        names: List[str] = list(REQUIRED_QUESTION_FIELDS)
        if include_order:
            names.insert(1, "question_order")
        for name in names:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                return name
        return None


__all__ = ["QuestionBody", "REQUIRED_QUESTION_FIELDS"]
