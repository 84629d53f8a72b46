"""
Mock Test Service - question banks, attempts and scoring.

Flow for a seeker:
1. list_mock_tests()            -> published tests (summary)
2. get_test_for_attempt(id)     -> questions without answers
3. submit_attempt(...)          -> scored, persisted attempt
4. get_attempt_result(id)       -> full per-question review
"""

import logging
from datetime import datetime
from typing import List, Optional
from bson import ObjectId
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from careercraft.core.auth import CurrentUser
from careercraft.core.exceptions import Conflict, Forbidden, InvalidState, NotFound
from careercraft.db.mongodb import COLLECTIONS, get_collection
from careercraft.schemas.schemas import AttemptStatus, MockTestCreate, MockTestStatus, SubmittedAnswer
from careercraft.services.mongo_service import CollectionService, as_naive_utc, to_object_id, utcnow

logger = logging.getLogger(__name__)

SUMMARY_FIELDS = {
    "title": 1, "description": 1, "category": 1, "topic": 1,
    "difficulty_level": 1, "total_marks": 1, "duration_minutes": 1, "questions": 1,
}
ATTEMPT_SUMMARY_FIELDS = {
    "mock_test_title": 1, "category": 1, "score": 1, "total_marks_possible": 1, "percentage": 1,
    "status": 1, "created_at": 1, "time_taken_seconds": 1, "mock_test_id": 1,
}


# ============================================================
# SCORING HELPERS
# ============================================================

def question_marks(question: dict) -> int:
    marks = question.get("marks")
    return 1 if marks is None else marks


def compute_total_marks(questions: List[dict]) -> int:
    return sum(question_marks(q) for q in questions)


def compute_total_marks_possible(mock_test: dict) -> int:
    """
    Stored total, recomputed from the questions when it is missing or when it
    is 0 although the questions carry marks.
    """
    stored = mock_test.get("total_marks")
    questions = mock_test.get("questions") or []
    recomputed = compute_total_marks(questions)
    if stored is None or (stored == 0 and recomputed > 0):
        logger.warning(
            "Recalculating total marks for test %s (stored total was %s)", mock_test.get("_id"), stored
        )
        return recomputed
    return stored


def compute_percentage(score: int, total: int) -> float:
    if not total:
        return 0
    return round(score / total * 100, 2)


def score_answers(mock_test: dict, answers: List[SubmittedAnswer]):
    """
    Grade submitted answers against the test's questions.

    Returns (score, answer_records). Answers referencing an unknown question
    are skipped.
    """
    questions = {str(q["_id"]): q for q in mock_test.get("questions", [])}
    score = 0
    records = []

    for answer in answers:
        question = questions.get(answer.question_id)
        if question is None:
            logger.warning("Question %s not found in test %s", answer.question_id, mock_test.get("_id"))
            continue

        is_correct = (
            answer.selected_option_index is not None
            and answer.selected_option_index == question["correct_option_index"]
        )
        marks_awarded = question_marks(question) if is_correct else 0
        score += marks_awarded

        records.append({
            "question_id": question["_id"],
            "question_text": question["question_text"],
            "options_provided": list(question["options"]),
            "selected_option_index": answer.selected_option_index,
            "correct_option_index": question["correct_option_index"],
            "is_correct": is_correct,
            "marks_awarded": marks_awarded,
            "explanation": question.get("explanation") or "",
        })

    return score, records


def build_mock_test_document(data: MockTestCreate, created_by: Optional[ObjectId] = None) -> dict:
    """New published test document; every question gets its own _id."""
    questions = []
    for question in data.questions:
        doc = question.model_dump()
        doc["_id"] = ObjectId()
        if question.difficulty is not None:
            doc["difficulty"] = question.difficulty.value
        questions.append(doc)

    now = utcnow()
    return {
        "title": data.title,
        "description": data.description,
        "category": data.category,
        "topic": data.topic,
        "difficulty_level": data.difficulty_level.value,
        "questions": questions,
        "total_marks": compute_total_marks(questions),
        "duration_minutes": data.duration_minutes,
        "status": MockTestStatus.published.value,
        "created_by": created_by,
        "created_at": now,
        "updated_at": now,
    }


class AttemptLifecycle:
    """inprogress -> completed | abandoned. Terminal states don't move."""

    TRANSITIONS = {
        AttemptStatus.inprogress: {AttemptStatus.completed, AttemptStatus.abandoned},
        AttemptStatus.completed: set(),
        AttemptStatus.abandoned: set(),
    }

    def __init__(self, start_time: datetime):
        self.status = AttemptStatus.inprogress
        self.start_time = start_time
        self.end_time: Optional[datetime] = None

    def _move(self, target: AttemptStatus):
        if target not in self.TRANSITIONS[self.status]:
            raise InvalidState(f"Cannot move attempt from {self.status.value} to {target.value}.")
        self.status = target

    def complete(self, end_time: datetime):
        self._move(AttemptStatus.completed)
        self.end_time = end_time

    def abandon(self, end_time: datetime):
        self._move(AttemptStatus.abandoned)
        self.end_time = end_time

    @property
    def time_taken_seconds(self) -> Optional[int]:
        if self.end_time is None:
            return None
        return round((self.end_time - self.start_time).total_seconds())


# ============================================================
# SERVICE
# ============================================================

class MockTestService(CollectionService):
    collection_name = COLLECTIONS["mock_tests"]

    def __init__(self, db=None):
        super().__init__(db)
        self.attempts = get_collection(COLLECTIONS["test_attempts"], db)

    def create_mock_test(self, actor: CurrentUser, data: MockTestCreate) -> dict:
        doc = build_mock_test_document(data, created_by=to_object_id(actor.id, "User"))
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise Conflict("A mock test with this title already exists.")

        doc["_id"] = result.inserted_id
        logger.info("User %s created mock test %s", actor.id, result.inserted_id)
        return doc

    def list_mock_tests(self, category: Optional[str] = None, difficulty: Optional[str] = None) -> List[dict]:
        query = {"status": MockTestStatus.published.value}
        if category:
            query["category"] = category
        if difficulty:
            query["difficulty_level"] = difficulty

        tests = list(self.collection.find(query, SUMMARY_FIELDS).sort([("created_at", DESCENDING), ("_id", DESCENDING)]))
        for test in tests:
            test["question_count"] = len(test.pop("questions", []))
        return tests

    def get_test_for_attempt(self, test_id) -> dict:
        """Published test with the answer key stripped from every question."""
        test = self.collection.find_one({
            "_id": to_object_id(test_id, "Mock test"),
            "status": MockTestStatus.published.value,
        })
        if not test:
            raise NotFound("Mock test not found or not available.")

        test["questions"] = [
            {
                "_id": q["_id"],
                "question_text": q["question_text"],
                "options": q["options"],
                "marks": question_marks(q),
                "difficulty": q.get("difficulty"),
            }
            for q in test.get("questions", [])
        ]
        return test

    def submit_attempt(
        self,
        actor: CurrentUser,
        test_id,
        answers: List[SubmittedAnswer],
        start_time: Optional[datetime] = None,
    ) -> dict:
        """Grade and persist a completed attempt. Returns the stored attempt."""
        mock_test = self.collection.find_one({"_id": to_object_id(test_id, "Mock test")})
        if not mock_test:
            raise NotFound("Mock test not found.")

        lifecycle = AttemptLifecycle(as_naive_utc(start_time) or utcnow())
        score, records = score_answers(mock_test, answers)
        lifecycle.complete(utcnow())

        total = compute_total_marks_possible(mock_test)
        now = utcnow()
        attempt = {
            "seeker_id": to_object_id(actor.id, "User"),
            "mock_test_id": mock_test["_id"],
            "mock_test_title": mock_test["title"],
            "category": mock_test["category"],
            "topic": mock_test.get("topic"),
            "answers": records,
            "score": score,
            "total_marks_possible": total,
            "percentage": compute_percentage(score, total),
            "status": lifecycle.status.value,
            "start_time": lifecycle.start_time,
            "end_time": lifecycle.end_time,
            "time_taken_seconds": lifecycle.time_taken_seconds,
            "created_at": now,
            "updated_at": now,
        }
        result = self.attempts.insert_one(attempt)
        attempt["_id"] = result.inserted_id
        logger.info("Seeker %s scored %s/%s on test %s", actor.id, score, total, mock_test["_id"])
        return attempt

    def get_attempt_result(self, actor: CurrentUser, attempt_id) -> dict:
        attempt = self.attempts.find_one({"_id": to_object_id(attempt_id, "Test attempt")})
        if not attempt:
            raise NotFound("Test attempt not found.")
        if str(attempt["seeker_id"]) != actor.id:
            raise Forbidden("Not authorized to view this attempt.")
        return attempt

    def list_my_attempts(self, actor: CurrentUser) -> List[dict]:
        return list(
            self.attempts.find({"seeker_id": to_object_id(actor.id, "User")}, ATTEMPT_SUMMARY_FIELDS)
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        )
