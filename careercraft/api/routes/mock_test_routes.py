"""
Mock Test Routes

POST /mock-tests - Create a mock test (any authenticated user)
GET /mock-tests - List published mock tests
GET /mock-tests/my-attempts - Seeker's attempt history
GET /mock-tests/attempts/{attempt_id} - Full result of one attempt (owner only)
GET /mock-tests/{test_id}/attempt - Test questions without answers (seeker only)
POST /mock-tests/{test_id}/submit - Submit answers and get the score (seeker only)
"""

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from typing import List, Optional

from careercraft.db.mongodb import get_mongo_db
from careercraft.core.auth import CurrentUser, get_current_seeker, get_current_user
from careercraft.services.mock_test_service import MockTestService
from careercraft.services.mongo_service import serialize_doc, serialize_docs
from careercraft.schemas.schemas import (
    AttemptResponse, AttemptSummary, MockTestCreate, MockTestForAttempt, MockTestResponse,
    MockTestSummary, SubmitAttemptRequest, SubmitAttemptResponse,
)

router = APIRouter(prefix="/mock-tests", tags=["Mock Tests"])


@router.post("", response_model=MockTestResponse, status_code=201)
def create_mock_test(
    request: MockTestCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Database = Depends(get_mongo_db),
):
    """Create and publish a mock test. Total marks are computed from the questions."""
    test = MockTestService(db).create_mock_test(user, request)
    return {**serialize_doc(test), "question_count": len(test["questions"])}


@router.get("", response_model=List[MockTestSummary])
def list_mock_tests(
    category: Optional[str] = Query(None),
    difficulty: Optional[str] = Query(None),
    db: Database = Depends(get_mongo_db),
):
    return serialize_docs(MockTestService(db).list_mock_tests(category, difficulty))


@router.get("/my-attempts", response_model=List[AttemptSummary])
def my_attempts(seeker: CurrentUser = Depends(get_current_seeker), db: Database = Depends(get_mongo_db)):
    return serialize_docs(MockTestService(db).list_my_attempts(seeker))


@router.get("/attempts/{attempt_id}", response_model=AttemptResponse)
def attempt_result(attempt_id: str, seeker: CurrentUser = Depends(get_current_seeker), db: Database = Depends(get_mongo_db)):
    """Per-question review including correct answers and explanations."""
    return serialize_doc(MockTestService(db).get_attempt_result(seeker, attempt_id))


@router.get("/{test_id}/attempt", response_model=MockTestForAttempt)
def test_for_attempt(test_id: str, seeker: CurrentUser = Depends(get_current_seeker), db: Database = Depends(get_mongo_db)):
    return serialize_doc(MockTestService(db).get_test_for_attempt(test_id))


@router.post("/{test_id}/submit", response_model=SubmitAttemptResponse, status_code=201)
def submit_test(
    test_id: str,
    request: SubmitAttemptRequest,
    seeker: CurrentUser = Depends(get_current_seeker),
    db: Database = Depends(get_mongo_db),
):
    """
    Score the submitted answers and store the attempt.

    startTime is the client's clock when the test was opened; it defaults to now.
    """
    attempt = MockTestService(db).submit_attempt(seeker, test_id, request.answers, request.start_time)
    return SubmitAttemptResponse(
        message="Test submitted successfully!",
        attempt_id=str(attempt["_id"]),
        score=attempt["score"],
        total_marks_possible=attempt["total_marks_possible"],
        percentage=attempt["percentage"],
    )
