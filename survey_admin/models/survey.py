"""Pydantic bodies for annual surveys and answers."""

from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

SurveyStatus = Literal["draft", "in_progress", "completed", "archived"]


class SurveyCreate(BaseModel):
    client_partner_id: Optional[int] = None
    client_id: Optional[int] = None
    vendor_id: Optional[int] = None
    survey_year: Optional[int] = Field(default=None, ge=2000, le=2100)
    survey_name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    include_all_questions: bool = True
    question_ids: List[int] = Field(default_factory=list)


class SurveyUpdate(BaseModel):
    survey_name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[SurveyStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    completion_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    actual_points_earned: Optional[int] = Field(default=None, ge=0)


class AnswerBody(BaseModel):
    answer_value: Optional[str] = None
    points_earned: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None


__all__ = ["SurveyStatus", "SurveyCreate", "SurveyUpdate", "AnswerBody"]
