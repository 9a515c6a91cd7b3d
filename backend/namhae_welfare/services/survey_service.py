"""
Namhae Welfare — Survey Session Manager
Opens survey sessions, upserts per-question answers, and tracks session status.

Session lifecycle:
    active ──(every one of the 12 questions answered)──▶ completed
The transition is checked inside the same transaction as the answer upsert,
so a session is completed exactly once, when its last missing answer lands.
"""

import uuid
from typing import Optional

from namhae_welfare.core.database import WelfareDatabase, get_database
from namhae_welfare.core.errors import NotFoundError, ValidationError
from namhae_welfare.models.survey import (
    AnswerItem,
    SessionProgress,
    SurveyCategory,
    SurveyResponse,
    SurveySession,
)
from namhae_welfare.services.survey_questions import (
    CATEGORY_ORDER,
    QUESTION_CATALOG,
    all_question_ids,
    category_of_question,
    parse_category,
    question_ids_for,
    questions_payload,
    score_answer,
)
from namhae_welfare.services.user_registry import UserRegistry, get_user_registry
from namhae_welfare.utils.logger import logger


class SurveySessionManager:
    """Server-side state for the four-step survey wizard."""

    def __init__(
        self,
        db: Optional[WelfareDatabase] = None,
        registry: Optional[UserRegistry] = None,
    ):
        self.db = db or get_database()
        self.registry = registry or get_user_registry()

    async def start(self, user_key: Optional[str]) -> tuple[SurveySession, dict]:
        """Open a new session for a registered user. Returns the session and the question catalog."""
        user = await self.registry.find_by_key(user_key)
        row = self.db.insert_session(str(uuid.uuid4()), user.id)
        session = SurveySession(**row)
        logger.info(f"📝 Survey session {session.id} started for user {user.id}")
        return session, questions_payload()

    async def get_session(self, session_id: Optional[str]) -> SurveySession:
        row = self.db.get_session(session_id) if session_id else None
        if not row:
            raise NotFoundError("설문 세션을 찾을 수 없습니다.")
        return SurveySession(**row)

    async def submit_answers(
        self,
        session_id: Optional[str],
        category: Optional[str],
        answers: list[AnswerItem],
    ) -> SessionProgress:
        """
        Store answers for one category, replacing earlier answers to the same questions.
        Partial submissions are accepted; the wizard enforces completeness per step.
        """
        parsed = parse_category(category)
        if parsed is None:
            raise ValidationError(f"알 수 없는 설문 항목입니다: {category}")

        for item in answers:
            if category_of_question(item.question_id) != parsed:
                raise ValidationError(
                    f"{item.question_id}번 문항은 '{parsed.value}' 항목에 속하지 않습니다."
                )

        session = await self.get_session(session_id)

        # Last answer wins when the same question appears twice in one payload.
        latest: dict[int, AnswerItem] = {item.question_id: item for item in answers}
        questions_by_id = {q.id: q for q in QUESTION_CATALOG[parsed]}

        rows = [
            SurveyResponse(
                session_id=session.id,
                category=parsed,
                question_id=item.question_id,
                question=item.question or questions_by_id[item.question_id].text,
                answer=item.answer,
                score=score_answer(item.answer),
            ).model_dump(mode="json")
            for item in latest.values()
        ]

        completed_now = self.db.save_responses(session.id, rows, all_question_ids())
        logger.info(f"💾 Saved {len(rows)} '{parsed.value}' answer(s) for session {session.id}")
        if completed_now:
            logger.info(f"✅ Survey session {session.id} completed")

        return await self.get_progress(session.id)

    async def get_progress(self, session_id: Optional[str]) -> SessionProgress:
        """Which categories are fully answered, derived from stored responses."""
        session = await self.get_session(session_id)
        answered_ids = {r.question_id for r in await self.list_responses(session.id)}

        answered: list[SurveyCategory] = []
        missing: list[SurveyCategory] = []
        for category in CATEGORY_ORDER:
            if question_ids_for(category) <= answered_ids:
                answered.append(category)
            else:
                missing.append(category)

        return SessionProgress(
            session_id=session.id,
            status=session.status,
            answered_categories=answered,
            missing_categories=missing,
            answered_questions=len(answered_ids),
        )

    async def list_responses(self, session_id: Optional[str]) -> list[SurveyResponse]:
        session = await self.get_session(session_id)
        return [
            SurveyResponse(**{k: r[k] for k in SurveyResponse.model_fields})
            for r in self.db.list_responses(session.id)
        ]


# --- Singleton ---
_manager: SurveySessionManager | None = None


def get_survey_manager() -> SurveySessionManager:
    """Returns a cached Survey Session Manager instance."""
    global _manager
    if _manager is None:
        _manager = SurveySessionManager()
    return _manager
