# Models module
from namhae_welfare.models.user import AgeGroup, UserCreate, User
from namhae_welfare.models.survey import (
    SurveyCategory, SessionStatus, Question,
    SurveyStartRequest, AnswerItem, AnswerSubmission,
    SurveySession, SurveyResponse, SessionProgress,
)
from namhae_welfare.models.welfare import WelfareService, Recommendation, RecommendationRequest
