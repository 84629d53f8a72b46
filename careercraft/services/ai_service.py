"""
AI Service - resume review, mock-test question generation, career roadmap chat.

PURPOSE:
- Resume review: resume text -> Markdown feedback (returned verbatim)
- Question generation: category/topic -> JSON array of MCQs, parsed ONCE and
  validated against GeneratedQuestion before anything is returned
- Career roadmap: conversational, with a structured template on the first turn

Request bodies are validated by their models, before any upstream client is built.
"""

import json
import logging
import re
from typing import List
from pydantic import TypeAdapter, ValidationError as PydanticValidationError

from careercraft.core.auth import CurrentUser
from careercraft.core.exceptions import (
    ExtractionError,
    InsufficientContent,
    MalformedAiResponse,
    NotFound,
    PreconditionFailed,
)
from careercraft.schemas.schemas import CareerRoadmapRequest, GeneratedQuestion, GenerateQuestionsRequest
from careercraft.services.ai_client import AIClient
from careercraft.services.storage import ResumeStorage
from careercraft.services.user_service import UserService
from careercraft.utils.file_upload import extract_text

logger = logging.getLogger(__name__)

MIN_RESUME_CHARS = 50
MAX_RESUME_CHARS = 30000

RESUME_TEMPERATURE = 0.6
QUESTIONS_TEMPERATURE = 0.7
ROADMAP_TEMPERATURE = 0.7

FENCE_PATTERN = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
ARRAY_START_PATTERN = re.compile(r"\[\s*\{")

generated_questions_adapter = TypeAdapter(List[GeneratedQuestion])
json_decoder = json.JSONDecoder()


# ============================================================
# PROMPTS
# ============================================================

RESUME_REVIEW_PROMPT = """You are an expert career coach and resume reviewer, specializing in tech industry roles (like Software Engineering, Data Science, Product Management, AI/ML).
Analyze the following resume text thoroughly and provide comprehensive, actionable suggestions for improvement.

**Desired Output Format:**
Structure your feedback using Markdown. Use headings (e.g., ## Section Title) for distinct categories of feedback and bullet points for individual suggestions, with clear newlines between points.

**Areas to Focus On (provide detailed feedback for each):**
1. **Overall Impression & Summary (2-3 sentences):** perceived strengths and one key area for immediate improvement.
2. **Contact Information & Header:** completeness (name, phone, email, LinkedIn, portfolio/GitHub) and a professional email address.
3. **Summary/Objective Statement (if present):** clarity, conciseness, impact, and whether it is tailored to tech roles.
4. **Experience Section:** strong action verbs (suggest 2-3 if weak ones are used), quantified achievements (show 1-2 examples of how to quantify a point), clarity and relevance.
5. **Projects Section (if present):** project description and the candidate's role, technologies used, measurable outcomes.
6. **Skills Section:** relevance to modern tech roles, organization by category, appropriate proficiency levels.
7. **Education Section:** degree, major, university and graduation date; relevant coursework for recent graduates.
8. **ATS Optimization & Keywords:** relevant keywords for common tech roles; suggest 2-3 that may be missing.
9. **Formatting & Readability:** consistency, bullet usage, ease of reading and appropriate length.
10. **Actionable Next Steps (2-3 key takeaways):** the most critical improvements to make.

If the resume text is very short, lacks detail or is poorly structured, make that a primary point of your feedback and explain why it is a problem.

Resume Text:
---
{resume_text}
---
End of Resume Text. Provide your feedback in Markdown format now."""

QUESTIONS_PROMPT = """You are an expert technical instructor and question writer.
Generate {count} Multiple Choice Questions (MCQs) for a mock test.

Subject Category: "{category}"
Specific Topic: "{topic}"
Target Difficulty Level: "{difficulty}"

Each question must have exactly 4 distinct answer options.
Indicate the correct answer by its 0-based index (0, 1, 2, or 3).
Provide a concise explanation of why the correct answer is correct.
Assign 1 mark to each question.
The difficulty field of each question should reflect that question's own difficulty ('Easy', 'Medium' or 'Hard').

Respond with a single JSON array and nothing else. Each element must be an object formatted EXACTLY as:
{{
  "questionText": "string",
  "options": ["string", "string", "string", "string"],
  "correctOptionIndex": 0,
  "explanation": "string",
  "marks": 1,
  "difficulty": "Medium"
}}

Do not include any text before or after the JSON array."""

ROADMAP_PROMPT = """You are an experienced career advisor and mentor in the tech industry.
A user is asking for a career roadmap to become a "{role}". Their specific initial query was: "{message}".

Provide a structured and actionable roadmap that includes:
1. **Introduction to the Role (2-3 sentences):** what a {role} does.
2. **Core Skills to Master:** key technical skills.
3. **Learning Phases (Foundational, Intermediate, Advanced):** topics to learn and types of learning resources for each phase.
4. **Project Ideas:** 2-3 types of projects.
5. **Portfolio Building:** why it matters.
6. **Interview Preparation:** key areas to focus on.
7. **Continuous Learning:** how to stay up to date.

Format the entire response in Markdown with headings (## Section Title) and bullet points.
Keep the roadmap practical and motivating.

Now, generate the roadmap for the role: "{role}"."""


# ============================================================
# JSON HELPERS
# ============================================================

def extract_json_array(text: str) -> str:
    """
    Strip Markdown code fences and cut the text down to the JSON array of
    objects, if one is present. The array starts at the first `[` followed
    by `{` and ends where that array closes, so brackets in surrounding
    prose are ignored.
    """
    text = FENCE_PATTERN.sub("", text.strip())
    match = ARRAY_START_PATTERN.search(text)
    if match:
        try:
            _, length = json_decoder.raw_decode(text[match.start():])
            return text[match.start():match.start() + length]
        except json.JSONDecodeError:
            pass
    start = match.start() if match else text.find("[")
    end = text.rfind("]")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text


def parse_generated_questions(text: str) -> List[GeneratedQuestion]:
    """Parse the AI response once and validate every question. Any failure -> MalformedAiResponse."""
    raw = extract_json_array(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.error("AI question response is not valid JSON: %s", e)
        raise MalformedAiResponse("AI returned data in an unexpected format. Could not parse questions.")

    if not isinstance(data, list) or not data:
        raise MalformedAiResponse("AI response was not a valid array of questions or the array was empty.")

    try:
        return generated_questions_adapter.validate_python(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        index = first["loc"][0] if first.get("loc") else "?"
        logger.error("AI question %s failed validation: %s", index, first.get("msg"))
        position = index + 1 if isinstance(index, int) else index
        raise MalformedAiResponse(
            f"Generated question at index {position} has an invalid structure. "
            "Please check options, correctOptionIndex, or explanation."
        )


# ============================================================
# SERVICE
# ============================================================

class AIService:
    def __init__(self, client: AIClient, db=None, storage: ResumeStorage = None):
        self.client = client
        self.db = db
        self.storage = storage

    def resume_feedback(self, actor: CurrentUser) -> str:
        seeker = UserService(self.db).get_by_id(actor.id)
        if not seeker:
            raise NotFound("Seeker profile not found.")
        if not seeker.get("resume_url"):
            raise PreconditionFailed("No resume uploaded. Please upload your resume first.")
        if not seeker.get("resume_key"):
            raise ExtractionError("Failed to process your resume: the stored file could not be located.")

        content = self.storage.download(seeker["resume_key"])
        resume_text = extract_text(content, seeker.get("resume_file_name") or seeker["resume_key"])

        if len(resume_text.strip()) < MIN_RESUME_CHARS:
            logger.warning("Resume for user %s produced only %d characters", actor.id, len(resume_text.strip()))
            raise InsufficientContent(
                "Could not extract sufficient text from the resume. "
                "Please ensure it is a text-based PDF and has enough content."
            )

        prompt = RESUME_REVIEW_PROMPT.format(resume_text=resume_text[:MAX_RESUME_CHARS])
        return self.client.complete(prompt, temperature=RESUME_TEMPERATURE)

    def generate_test_questions(self, request: GenerateQuestionsRequest) -> List[GeneratedQuestion]:
        count = request.number_of_questions
        prompt = QUESTIONS_PROMPT.format(
            count=count,
            category=request.category,
            topic=request.topic,
            difficulty=request.difficulty_level,
        )
        logger.info("Generating %d questions for %s / %s", count, request.category, request.topic)
        text = self.client.complete(prompt, temperature=QUESTIONS_TEMPERATURE)
        return parse_generated_questions(text)

    def career_roadmap(self, request: CareerRoadmapRequest) -> str:
        """
        First turn for a role (role given, no history): the roadmap template
        replaces the user's message. Otherwise the message continues the
        conversation.
        """
        history = request.conversation_history
        message = request.current_message

        if request.role and not history:
            message = ROADMAP_PROMPT.format(role=request.role, message=request.current_message)
        elif history and history[0].role != "user":
            logger.warning("Conversation history does not start with a user turn")

        return self.client.chat(history, message, temperature=ROADMAP_TEMPERATURE)
