"""
Namhae Welfare — Recommendation Selector
Age-filters the welfare catalog for a resident and ranks the matches through the scoring policy.
Age is recomputed from the birth date on every call; stored survey answers are not read.
"""

from typing import Optional

from namhae_welfare.config import get_settings
from namhae_welfare.core.database import WelfareDatabase, get_database
from namhae_welfare.core.errors import NotFoundError
from namhae_welfare.models.user import User
from namhae_welfare.models.welfare import Recommendation
from namhae_welfare.services.scoring_policy import RandomBandPolicy, ScoringPolicy
from namhae_welfare.services.survey_service import SurveySessionManager, get_survey_manager
from namhae_welfare.services.user_registry import (
    UserRegistry,
    calculate_age,
    get_user_registry,
)
from namhae_welfare.services.welfare_catalog import WelfareCatalog, get_welfare_catalog
from namhae_welfare.utils.logger import logger


class RecommendationSelector:
    """Builds the ranked top-N welfare program list for a session or user key."""

    def __init__(
        self,
        db: Optional[WelfareDatabase] = None,
        registry: Optional[UserRegistry] = None,
        surveys: Optional[SurveySessionManager] = None,
        catalog: Optional[WelfareCatalog] = None,
        policy: Optional[ScoringPolicy] = None,
        limit: Optional[int] = None,
    ):
        self.db = db or get_database()
        self.registry = registry or get_user_registry()
        self.surveys = surveys or get_survey_manager()
        self.catalog = catalog or get_welfare_catalog()
        self.policy = policy or RandomBandPolicy()
        self.limit = limit if limit is not None else get_settings().recommendation_limit

    async def recommend(self, session_id: Optional[str]) -> dict:
        """
        Recommendations for the user owning session_id.
        Returns {"recommendations": [...], "user_info": {"age_group", "age"}}.
        """
        try:
            session = await self.surveys.get_session(session_id)
            user = await self.registry.find_by_id(session.user_id)
        except NotFoundError:
            raise NotFoundError("사용자 정보를 찾을 수 없습니다.")

        age, ranked = self._rank_for(user)
        return {
            "recommendations": ranked,
            "user_info": {"age_group": user.age_group.value, "age": age},
        }

    async def recommend_by_key(self, user_key: Optional[str]) -> dict:
        """
        Recommendations driven by the user's most recent session.
        A user who never started a survey gets {"has_survey": False} instead of an error.
        """
        try:
            user = await self.registry.find_by_key(user_key)
        except NotFoundError:
            raise NotFoundError("결과를 찾을 수 없습니다.")

        session = self.db.latest_session_for_user(user.id)
        if session is None:
            return {"has_survey": False, "message": "아직 설문조사를 완료하지 않았습니다."}

        age, ranked = self._rank_for(user)
        return {
            "has_survey": True,
            "session_id": session["id"],
            "user_info": {"name": user.name, "age_group": user.age_group.value, "age": age},
            "recommendations": ranked,
        }

    def _rank_for(self, user: User) -> tuple[int, list[Recommendation]]:
        age = calculate_age(user.birth_date)
        candidates = self.catalog.services_for_age(age)

        scored = []
        for service in candidates:
            result = self.policy.score(service, age, user.age_group)
            scored.append(
                Recommendation(**service.model_dump(), score=result.score, reason=result.reason)
            )
        scored.sort(key=lambda r: r.score, reverse=True)
        top = scored[: self.limit]

        logger.info(
            f"🎯 {len(top)}/{len(candidates)} recommendation(s) for user {user.id} "
            f"(age {age}, policy {self.policy.name})"
        )
        return age, top


# --- Singleton ---
_selector: RecommendationSelector | None = None


def get_recommendation_selector() -> RecommendationSelector:
    """Returns a cached Recommendation Selector instance."""
    global _selector
    if _selector is None:
        _selector = RecommendationSelector()
    return _selector
