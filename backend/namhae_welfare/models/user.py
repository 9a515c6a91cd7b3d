"""
Namhae Welfare — Pydantic Models for Residents
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel


class AgeGroup(str, Enum):
    """Coarse age bucket. Only used in rationale text, never for filtering."""
    SUPER_ELDERLY = "super-elderly"   # 85+
    ELDERLY = "elderly"               # 75-84
    PRE_ELDERLY = "pre-elderly"       # 65-74
    GENERAL = "general"

    @property
    def label(self) -> str:
        """Korean label shown to residents."""
        return AGE_GROUP_LABELS[self]


AGE_GROUP_LABELS = {
    AgeGroup.SUPER_ELDERLY: "초고령",
    AgeGroup.ELDERLY: "고령",
    AgeGroup.PRE_ELDERLY: "준고령",
    AgeGroup.GENERAL: "일반",
}


class UserCreate(BaseModel):
    """Registration form. Fields are optional here so blanks get a single Korean error."""
    name: Optional[str] = None
    birth_date: Optional[str] = None   # YYYY-MM-DD
    address: Optional[str] = None
    district_code: Optional[str] = None


class User(BaseModel):
    """A registered resident. Immutable after creation."""
    id: str
    user_key: str
    name: str
    birth_date: date
    address: str
    district_code: str
    age_group: AgeGroup
    created_at: datetime
