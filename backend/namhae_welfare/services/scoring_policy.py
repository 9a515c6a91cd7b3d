"""
Namhae Welfare — Recommendation Scoring Policy
Pluggable interface that turns an age-eligible welfare service into a score and a rationale.
The default policy is a placeholder: a random score in [0.7, 1.0) and a templated reason.
"""

import math
import random
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from namhae_welfare.models.user import AgeGroup
from namhae_welfare.models.welfare import WelfareService


@dataclass
class ScoredService:
    """Policy output for one service."""
    score: float
    reason: str


class ScoringPolicy(ABC):
    """Base class for recommendation scoring policies."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Policy name for logging."""
        ...

    @abstractmethod
    def score(self, service: WelfareService, age: int, age_group: AgeGroup) -> ScoredService:
        """Score one service that already passed the age filter."""
        ...


# Per-program rationale; {group} is the Korean age-group label.
REASON_TEMPLATES = {
    "기초연금": "{group} 어르신께 안정적인 소득 보장이 필요합니다.",
    "노인맞춤돌봄서비스": "{group} 어르신께 맞춤형 돌봄 서비스를 추천합니다.",
    "노인일자리 사업": "활동적인 {group} 어르신께 적합한 일자리입니다.",
    "의료비 지원": "{group} 어르신의 의료비 부담을 덜어드립니다.",
    "치매검진 서비스": "{group} 어르신의 뇌건강 관리를 위해 추천합니다.",
}
DEFAULT_REASON = "{group} 어르신께 도움이 될 서비스입니다."


def build_reason(service_name: str, age_group: AgeGroup) -> str:
    template = REASON_TEMPLATES.get(service_name, DEFAULT_REASON)
    return template.format(group=age_group.label)


class RandomBandPolicy(ScoringPolicy):
    """
    Uniform random score in [low, high). Survey answers are not consulted.
    Pass a seeded random.Random for reproducible output.
    """

    def __init__(self, low: float = 0.7, high: float = 1.0, rng: Optional[random.Random] = None):
        if not 0.0 <= low < high <= 1.0:
            raise ValueError(f"Invalid score band [{low}, {high})")
        self.low = low
        self.high = high
        self.rng = rng or random.Random()

    @property
    def name(self) -> str:
        return "random-band"

    def score(self, service: WelfareService, age: int, age_group: AgeGroup) -> ScoredService:
        value = self.low + self.rng.random() * (self.high - self.low)
        if value >= self.high:
            # float rounding can land on the open upper bound
            value = math.nextafter(self.high, self.low)
        return ScoredService(score=value, reason=build_reason(service.name, age_group))
