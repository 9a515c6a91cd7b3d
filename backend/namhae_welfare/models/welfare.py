"""
Namhae Welfare — Pydantic Models for Welfare Services & Recommendations
"""

from typing import Optional

from pydantic import BaseModel


class WelfareService(BaseModel):
    """Static catalog entry for one benefit program."""
    id: int
    name: str
    category: str
    description: str
    benefits: str
    requirements: str
    contact_info: str
    is_national: bool
    target_age_min: int
    target_age_max: int

    def covers_age(self, age: int) -> bool:
        """Inclusive on both ends."""
        return self.target_age_min <= age <= self.target_age_max


class Recommendation(WelfareService):
    """A catalog entry scored for one resident. Recomputed on every request."""
    score: float
    reason: str


class RecommendationRequest(BaseModel):
    session_id: Optional[str] = None
