"""
Namhae Welfare — Recommendations API Router
Ranked welfare programs for a survey session, and result lookup by user key.
"""

from fastapi import APIRouter

from namhae_welfare.models.welfare import RecommendationRequest
from namhae_welfare.services.recommendation_service import get_recommendation_selector

router = APIRouter()


@router.post("/recommendations")
async def create_recommendations(request: RecommendationRequest):
    """Top programs for the user who owns the session."""
    result = await get_recommendation_selector().recommend(request.session_id)
    return {
        "success": True,
        "recommendations": [r.model_dump() for r in result["recommendations"]],
        "user_info": result["user_info"],
    }


@router.get("/results/{user_key}")
async def get_results(user_key: str):
    """Returning residents skip the survey and fetch results with their key."""
    result = await get_recommendation_selector().recommend_by_key(user_key)
    if not result["has_survey"]:
        return {"success": True, **result}

    return {
        "success": True,
        "has_survey": True,
        "user_info": result["user_info"],
        "recommendations": [r.model_dump() for r in result["recommendations"]],
    }
