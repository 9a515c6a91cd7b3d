"""
Namhae Welfare — Pydantic Models for Survey Sessions & Answers
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, StrictInt


class SurveyCategory(str, Enum):
    """The four fixed question groups, in survey order."""
    HEALTH = "health"
    LIVING = "living"
    ECONOMIC = "economic"
    SOCIAL = "social"


class SessionStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"


class Question(BaseModel):
    """One multiple-choice survey question."""
    id: int
    text: str
    type: str = "radio"
    options: list[str]


class SurveyStartRequest(BaseModel):
    user_key: Optional[str] = None


class AnswerItem(BaseModel):
    """A single selected option, as sent by the survey wizard."""
    question_id: StrictInt
    question: str = ""
    answer: str


class AnswerSubmission(BaseModel):
    session_id: Optional[str] = None
    category: Optional[str] = None
    answers: list[AnswerItem] = Field(default_factory=list)


class SurveySession(BaseModel):
    id: str
    user_id: str
    status: SessionStatus
    created_at: datetime
    completed_at: Optional[datetime] = None


class SurveyResponse(BaseModel):
    """A stored answer with its derived 1-5 score."""
    session_id: str
    category: SurveyCategory
    question_id: int
    question: str
    answer: str
    score: int = Field(ge=1, le=5)


class SessionProgress(BaseModel):
    session_id: str
    status: SessionStatus
    answered_categories: list[SurveyCategory] = []
    missing_categories: list[SurveyCategory] = []
    answered_questions: int = 0
