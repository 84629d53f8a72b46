"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.

Wire format is camelCase (what the SPA sends and reads); Python attributes
and MongoDB documents are snake_case. Request models forbid unknown fields.
"""

import re
from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt, field_validator, model_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Literal, Union
from datetime import datetime
from enum import Enum


LINKEDIN_URL_PATTERN = re.compile(r"^(https?://)?(www\.)?linkedin\.com/in/[a-zA-Z0-9_-]+/?$")
MAX_GENERATED_QUESTIONS = 20


# ============================================================
# BASE MODELS
# ============================================================

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RequestModel(CamelModel):
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    seeker = "seeker"
    company_recruiter = "company_recruiter"
    admin = "admin"


class JobType(str, Enum):
    full_time = "Full-time"
    part_time = "Part-time"
    internship = "Internship"
    contract = "Contract"
    temporary = "Temporary"
    remote = "Remote"


class ExperienceLevel(str, Enum):
    entry = "Entry-level"
    mid = "Mid-level"
    senior = "Senior-level"
    lead = "Lead"
    manager = "Manager"
    executive = "Executive"
    not_specified = "Not Specified"


class JobStatus(str, Enum):
    open = "open"
    closed = "closed"
    archived = "archived"


class JobSort(str, Enum):
    newest = "newest"
    oldest = "oldest"


class ApplicationStatus(str, Enum):
    applied = "applied"
    viewed = "viewed"
    shortlisted = "shortlisted"
    interviewing = "interviewing"
    offered = "offered"
    rejected = "rejected"
    hired = "hired"
    withdrawn = "withdrawn"


class MockTestDifficulty(str, Enum):
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"
    mixed = "Mixed"


class QuestionDifficulty(str, Enum):
    easy = "Easy"
    medium = "Medium"
    hard = "Hard"
    beginner = "Beginner"
    intermediate = "Intermediate"
    advanced = "Advanced"


class MockTestStatus(str, Enum):
    draft = "draft"
    published = "published"
    archived = "archived"


class AttemptStatus(str, Enum):
    inprogress = "inprogress"
    completed = "completed"
    abandoned = "abandoned"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterSeekerRequest(RequestModel):
    full_name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=6)

class RegisterRecruiterRequest(RegisterSeekerRequest):
    company_name: str = Field(..., min_length=1)

class LoginRequest(RequestModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

class ForgotPasswordRequest(RequestModel):
    email: EmailStr

class ResetPasswordRequest(RequestModel):
    password: str = Field(..., min_length=6)

class UserResponse(CamelModel):
    id: str
    full_name: str
    email: str
    role: UserRole
    company_name: Optional[str] = None
    bio: str = ""
    skills: List[str] = []
    resume_url: str = ""
    resume_file_name: str = ""
    profile_photo_url: str = ""
    linkedin_url: str = Field("", alias="linkedInUrl")
    portfolio_url: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class AuthResponse(UserResponse):
    message: str


# ============================================================
# PROFILE SCHEMAS
# ============================================================

class SeekerProfileUpdate(RequestModel):
    full_name: Optional[str] = Field(None, min_length=1)
    bio: Optional[str] = Field(None, max_length=500)
    skills: Optional[Union[List[str], str]] = None
    linkedin_url: Optional[str] = Field(None, alias="linkedInUrl")
    portfolio_url: Optional[str] = None

    @field_validator("skills")
    @classmethod
    def skills_as_list(cls, v):
        if v is None:
            return v
        if isinstance(v, str):
            v = [v]
        return [s.strip() for s in v if s and s.strip()]

    @field_validator("linkedin_url")
    @classmethod
    def linkedin_profile_url(cls, v):
        if v and not LINKEDIN_URL_PATTERN.match(v):
            raise ValueError("Please provide a valid LinkedIn profile URL")
        return v

class ResumeUploadResponse(CamelModel):
    message: str
    resume_url: str
    resume_file_name: str


# ============================================================
# JOB SCHEMAS
# ============================================================

class JobCreate(RequestModel):
    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    location: str = Field(..., min_length=1)
    salary: Optional[str] = None
    job_type: JobType
    experience_level: ExperienceLevel = ExperienceLevel.not_specified
    category: str = Field(..., min_length=1)
    skills_required: List[str] = []
    application_deadline: Optional[datetime] = None
    application_instructions: Optional[str] = None

class JobUpdate(RequestModel):
    title: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    location: Optional[str] = Field(None, min_length=1)
    salary: Optional[str] = None
    job_type: Optional[JobType] = None
    experience_level: Optional[ExperienceLevel] = None
    category: Optional[str] = Field(None, min_length=1)
    skills_required: Optional[List[str]] = None
    application_deadline: Optional[datetime] = None
    application_instructions: Optional[str] = None
    status: Optional[JobStatus] = None

class JobFilters(CamelModel):
    search: Optional[str] = None
    location: Optional[str] = None
    category: Optional[str] = None
    job_type: Optional[str] = None
    experience_level: Optional[str] = None

class JobResponse(CamelModel):
    id: str
    title: str
    description: str
    company_name: str
    posted_by: str
    location: str
    salary: Optional[str] = None
    job_type: str
    experience_level: str
    category: str
    skills_required: List[str] = []
    application_deadline: Optional[datetime] = None
    application_instructions: Optional[str] = None
    status: JobStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

class JobListResponse(CamelModel):
    jobs: List[JobResponse]
    current_page: int
    total_pages: int
    total_jobs: int


# ============================================================
# APPLICATION SCHEMAS
# ============================================================

class ApplicationStatusUpdate(RequestModel):
    status: str

class JobSummary(CamelModel):
    id: str
    title: str
    company_name: str
    location: str
    job_type: str
    status: str

class SeekerSummary(CamelModel):
    id: str
    full_name: str
    email: str
    skills: List[str] = []
    bio: str = ""
    resume_url: str = ""
    resume_file_name: str = ""
    linkedin_url: str = Field("", alias="linkedInUrl")
    portfolio_url: str = ""
    profile_photo_url: str = ""

class ApplicationResponse(CamelModel):
    id: str
    job_id: str
    seeker_id: str
    recruiter_id: str
    company_name: str
    job_title: str
    seeker_name: str
    seeker_email: str
    resume_url: str
    resume_file_name: Optional[str] = None
    status: ApplicationStatus
    application_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    job: Optional[JobSummary] = None
    seeker: Optional[SeekerSummary] = None

class ApplicationActionResponse(CamelModel):
    message: str
    application: ApplicationResponse


# ============================================================
# MOCK TEST SCHEMAS
# ============================================================

class QuestionCreate(RequestModel):
    question_text: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=2)
    correct_option_index: int = Field(..., ge=0)
    explanation: str = ""
    marks: int = Field(1, ge=0)
    difficulty: Optional[QuestionDifficulty] = None

    @model_validator(mode="after")
    def correct_index_in_bounds(self):
        if self.correct_option_index >= len(self.options):
            raise ValueError("Correct option index is out of bounds for this question.")
        return self

class MockTestCreate(RequestModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    category: str = Field(..., min_length=1)
    topic: Optional[str] = None
    difficulty_level: MockTestDifficulty = MockTestDifficulty.intermediate
    questions: List[QuestionCreate] = Field(..., min_length=1)
    duration_minutes: int = Field(..., ge=1)

class QuestionResponse(CamelModel):
    id: str
    question_text: str
    options: List[str]
    correct_option_index: int
    explanation: str = ""
    marks: int = 1
    difficulty: Optional[str] = None

class QuestionForAttempt(CamelModel):
    id: str
    question_text: str
    options: List[str]
    marks: int = 1
    difficulty: Optional[str] = None

class MockTestSummary(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    category: str
    topic: Optional[str] = None
    difficulty_level: str
    total_marks: int
    duration_minutes: int
    question_count: int = 0

class MockTestResponse(MockTestSummary):
    questions: List[QuestionResponse]
    status: MockTestStatus
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

class MockTestForAttempt(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    category: str
    topic: Optional[str] = None
    difficulty_level: str
    questions: List[QuestionForAttempt]
    total_marks: int
    duration_minutes: int

class SubmittedAnswer(RequestModel):
    question_id: str
    selected_option_index: Optional[int] = None

class SubmitAttemptRequest(RequestModel):
    answers: List[SubmittedAnswer] = []
    start_time: Optional[datetime] = None

    @field_validator("answers")
    @classmethod
    def one_answer_per_question(cls, v):
        seen = set()
        for answer in v:
            if answer.question_id in seen:
                raise ValueError(f"Question {answer.question_id} is answered more than once.")
            seen.add(answer.question_id)
        return v

class SubmitAttemptResponse(CamelModel):
    message: str
    attempt_id: str
    score: int
    total_marks_possible: int
    percentage: float

class AnswerReview(CamelModel):
    question_id: str
    question_text: str
    options_provided: List[str]
    selected_option_index: Optional[int] = None
    correct_option_index: int
    is_correct: bool
    marks_awarded: int
    explanation: str = ""

class AttemptSummary(CamelModel):
    id: str
    mock_test_id: str
    mock_test_title: str
    category: str
    score: int
    total_marks_possible: int
    percentage: float
    status: AttemptStatus
    time_taken_seconds: Optional[int] = None
    created_at: datetime

class AttemptResponse(AttemptSummary):
    seeker_id: str
    topic: Optional[str] = None
    answers: List[AnswerReview]
    start_time: datetime
    end_time: Optional[datetime] = None


# ============================================================
# AI SCHEMAS
# ============================================================

class GenerateQuestionsRequest(RequestModel):
    category: str
    topic: str
    difficulty_level: str = "Intermediate"
    number_of_questions: int = 5
    question_type: Literal["MCQ_4_OPTIONS"] = "MCQ_4_OPTIONS"

    @field_validator("category", "topic")
    @classmethod
    def required_text(cls, v):
        if not v or not v.strip():
            raise ValueError("Category and topic are required to generate questions.")
        return v.strip()

    @field_validator("number_of_questions")
    @classmethod
    def question_count_in_range(cls, v):
        if v < 1 or v > MAX_GENERATED_QUESTIONS:
            raise ValueError(f"Number of questions must be between 1 and {MAX_GENERATED_QUESTIONS}.")
        return v

class GeneratedQuestion(CamelModel):
    """Strict shape every AI-generated question must have."""
    model_config = ConfigDict(extra="ignore")

    question_text: str = Field(..., min_length=1)
    options: List[str] = Field(..., min_length=4, max_length=4)
    correct_option_index: StrictInt = Field(..., ge=0, le=3)
    explanation: str = Field(..., min_length=1)
    marks: int = 1
    difficulty: Optional[str] = None

class GeneratedQuestionsResponse(CamelModel):
    message: str
    questions: List[GeneratedQuestion]

class ChatTurn(RequestModel):
    role: Literal["user", "model", "assistant"]
    text: str

class CareerRoadmapRequest(RequestModel):
    role: Optional[str] = None
    current_message: str = Field(..., min_length=1)
    conversation_history: List[ChatTurn] = []

class CareerRoadmapResponse(CamelModel):
    roadmap: str

class ResumeFeedbackResponse(CamelModel):
    suggestions: str


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(CamelModel):
    message: str
