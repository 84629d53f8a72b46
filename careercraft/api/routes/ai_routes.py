"""
AI Routes

POST /ai/resume-feedback - Markdown review of the seeker's stored resume
POST /ai/generate-test-questions - Generate MCQs for a mock test
POST /ai/career-roadmap - Career roadmap chat (seeker only)
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database

from careercraft.db.mongodb import get_mongo_db
from careercraft.core.auth import CurrentUser, get_current_seeker, get_current_user
from careercraft.services.ai_client import AIClient, get_ai_client
from careercraft.services.ai_service import AIService
from careercraft.services.storage import ResumeStorage, get_resume_storage
from careercraft.schemas.schemas import (
    CareerRoadmapRequest, CareerRoadmapResponse, GenerateQuestionsRequest,
    GeneratedQuestionsResponse, ResumeFeedbackResponse,
)

router = APIRouter(prefix="/ai", tags=["AI"])


@router.post("/resume-feedback", response_model=ResumeFeedbackResponse)
def resume_feedback(
    seeker: CurrentUser = Depends(get_current_seeker),
    db: Database = Depends(get_mongo_db),
    client: AIClient = Depends(get_ai_client),
    storage: ResumeStorage = Depends(get_resume_storage),
):
    suggestions = AIService(client, db=db, storage=storage).resume_feedback(seeker)
    return ResumeFeedbackResponse(suggestions=suggestions)


@router.post("/generate-test-questions", response_model=GeneratedQuestionsResponse)
def generate_test_questions(
    request: GenerateQuestionsRequest,
    user: CurrentUser = Depends(get_current_user),
    client: AIClient = Depends(get_ai_client),
):
    """
    Generate multiple-choice questions (4 options each).

    numberOfQuestions must be between 1 and 20.
    """
    questions = AIService(client).generate_test_questions(request)
    return GeneratedQuestionsResponse(
        message=f"{len(questions)} questions generated successfully.",
        questions=questions,
    )


@router.post("/career-roadmap", response_model=CareerRoadmapResponse)
def career_roadmap(
    request: CareerRoadmapRequest,
    seeker: CurrentUser = Depends(get_current_seeker),
    client: AIClient = Depends(get_ai_client),
):
    return CareerRoadmapResponse(roadmap=AIService(client).career_roadmap(request))
