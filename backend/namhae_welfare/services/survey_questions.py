"""
Namhae Welfare — Survey Question Catalog
Fixed questionnaire: 4 categories x 3 multiple-choice questions, plus the answer score table.
"""

from namhae_welfare.models.survey import Question, SurveyCategory


CATEGORY_ORDER = [
    SurveyCategory.HEALTH,
    SurveyCategory.LIVING,
    SurveyCategory.ECONOMIC,
    SurveyCategory.SOCIAL,
]

QUESTION_CATALOG: dict[SurveyCategory, list[Question]] = {
    # ═══════════ 건강 ═══════════
    SurveyCategory.HEALTH: [
        Question(id=1, text="현재 건강상태는 어떠신가요?",
                 options=["매우 좋음", "좋음", "보통", "나쁨", "매우 나쁨"]),
        Question(id=2, text="만성질환을 앓고 계신가요?",
                 options=["없음", "1개", "2개", "3개 이상"]),
        Question(id=3, text="일상생활에 도움이 필요하신가요?",
                 options=["전혀 필요없음", "약간 필요", "많이 필요", "항상 필요"]),
    ],
    # ═══════════ 생활 ═══════════
    SurveyCategory.LIVING: [
        Question(id=4, text="현재 거주 형태는?",
                 options=["독거", "부부", "자녀와 함께", "기타"]),
        Question(id=5, text="주거환경에 만족하십니까?",
                 options=["매우 만족", "만족", "보통", "불만족", "매우 불만족"]),
        Question(id=6, text="외출 빈도는 어떻게 되시나요?",
                 options=["매일", "주 3-4회", "주 1-2회", "월 1-2회", "거의 없음"]),
    ],
    # ═══════════ 경제 ═══════════
    SurveyCategory.ECONOMIC: [
        Question(id=7, text="현재 경제상태는?",
                 options=["여유로움", "보통", "약간 부족", "매우 부족"]),
        Question(id=8, text="주요 소득원은?",
                 options=["근로소득", "연금", "자녀지원", "기타"]),
        Question(id=9, text="의료비 부담은?",
                 options=["부담없음", "약간 부담", "상당한 부담", "매우 부담"]),
    ],
    # ═══════════ 사회 ═══════════
    SurveyCategory.SOCIAL: [
        Question(id=10, text="사회활동 참여 정도는?",
                 options=["매우 활발", "활발", "보통", "소극적", "거의 없음"]),
        Question(id=11, text="가족/친구와의 관계는?",
                 options=["매우 좋음", "좋음", "보통", "좋지 않음", "매우 좋지 않음"]),
        Question(id=12, text="지역사회 활동에 관심이 있으신가요?",
                 options=["매우 관심", "관심", "보통", "관심없음", "전혀 없음"]),
    ],
}

# Option text -> ordinal score (5 = best). Options not listed here score NEUTRAL_SCORE.
ANSWER_SCORES: dict[str, int] = {
    "매우 좋음": 5, "좋음": 4, "보통": 3, "나쁨": 2, "매우 나쁨": 1,
    "없음": 5, "1개": 4, "2개": 3, "3개 이상": 2,
    "전혀 필요없음": 5, "약간 필요": 4, "많이 필요": 2, "항상 필요": 1,
    "여유로움": 5, "약간 부족": 2, "매우 부족": 1,
    "매우 활발": 5, "활발": 4, "소극적": 2, "거의 없음": 1,
}
NEUTRAL_SCORE = 3


def score_answer(answer: str) -> int:
    """Map a selected option to its 1-5 score."""
    return ANSWER_SCORES.get(answer, NEUTRAL_SCORE)


def parse_category(value: str | None) -> SurveyCategory | None:
    """Return the category for a raw string, or None if it is not one of the four."""
    try:
        return SurveyCategory(value)
    except ValueError:
        return None


def question_ids_for(category: SurveyCategory) -> set[int]:
    return {q.id for q in QUESTION_CATALOG[category]}


def all_question_ids() -> set[int]:
    return {q.id for questions in QUESTION_CATALOG.values() for q in questions}


def category_of_question(question_id: int) -> SurveyCategory | None:
    for category, questions in QUESTION_CATALOG.items():
        if any(q.id == question_id for q in questions):
            return category
    return None


def questions_payload() -> dict[str, list[dict]]:
    """The full catalog as sent to the survey wizard, keyed by category value."""
    return {
        category.value: [q.model_dump() for q in QUESTION_CATALOG[category]]
        for category in CATEGORY_ORDER
    }
