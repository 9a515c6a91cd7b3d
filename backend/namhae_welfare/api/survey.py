"""
Namhae Welfare — Survey API Router
Session start, per-category answer submission, and progress lookup.
"""

from fastapi import APIRouter

from namhae_welfare.models.survey import AnswerSubmission, SurveyStartRequest
from namhae_welfare.services.survey_service import get_survey_manager

router = APIRouter()


@router.post("/start")
async def start_survey(request: SurveyStartRequest):
    """Open a survey session and return the full question catalog."""
    session, questions = await get_survey_manager().start(request.user_key)
    return {
        "success": True,
        "session_id": session.id,
        "questions": questions,
    }


@router.post("/answer")
async def submit_answers(submission: AnswerSubmission):
    """
    Save one category's answers. Re-submitting a category replaces the
    earlier answers instead of adding rows.
    """
    progress = await get_survey_manager().submit_answers(
        submission.session_id,
        submission.category,
        submission.answers,
    )
    return {
        "success": True,
        "status": progress.status.value,
        "answered_categories": [c.value for c in progress.answered_categories],
    }


@router.get("/{session_id}")
async def get_survey_progress(session_id: str):
    """Session status and which categories are fully answered."""
    progress = await get_survey_manager().get_progress(session_id)
    return {"success": True, **progress.model_dump(mode="json")}
