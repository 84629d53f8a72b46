# tests/test_profile.py
from io import BytesIO

import pytest
from docx import Document

from careercraft.core.exceptions import ExtractionError, ValidationError
from careercraft.utils.file_upload import extract_text, validate_resume_upload

from conftest import completion

API = "/api/v1"
DOCX_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

RESUME_TEXT = (
    "Sam Seeker - Backend Developer. Three years building Python APIs with FastAPI and MongoDB; "
    "reduced p95 latency by 40% and led a migration to containerised deployments."
)


def make_docx(*paragraphs):
    doc = Document()
    for text in paragraphs:
        doc.add_paragraph(text)
    buffer = BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def upload(client, filename, content, content_type):
    return client.post(f"{API}/profile/seeker/me/resume", files={"resumeFile": (filename, content, content_type)})


# ============================================================
# PROFILE
# ============================================================

def test_get_and_update_profile(seeker):
    c, _ = seeker
    r = c.put(f"{API}/profile/seeker/me", json={
        "bio": "Backend developer",
        "skills": "Python",
        "linkedInUrl": "https://www.linkedin.com/in/sam-seeker",
    })
    assert r.status_code == 200
    body = r.json()
    assert body["skills"] == ["Python"]
    assert body["linkedInUrl"] == "https://www.linkedin.com/in/sam-seeker"
    assert body["fullName"] == "Sam Seeker"

    r = c.put(f"{API}/profile/seeker/me", json={"skills": ["Python", "  ", "Go"]})
    assert r.json()["skills"] == ["Python", "Go"]
    assert r.json()["bio"] == "Backend developer"

    assert c.get(f"{API}/profile/seeker/me").json()["skills"] == ["Python", "Go"]


def test_update_profile_validation(seeker):
    c, _ = seeker
    assert c.put(f"{API}/profile/seeker/me", json={"linkedInUrl": "https://example.com/me"}).status_code == 400
    assert c.put(f"{API}/profile/seeker/me", json={"bio": "x" * 501}).status_code == 400
    assert c.put(f"{API}/profile/seeker/me", json={"email": "new@example.com"}).status_code == 400


def test_profile_is_for_seekers(recruiter):
    c, _ = recruiter
    assert c.get(f"{API}/profile/seeker/me").status_code == 403


# ============================================================
# RESUME UPLOAD
# ============================================================

def test_upload_resume_stores_file(seeker, storage, db):
    c, user = seeker
    content = make_docx(RESUME_TEXT)
    r = upload(c, "Sam CV.docx", content, DOCX_TYPE)
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Resume uploaded successfully!"
    assert body["resumeFileName"] == "Sam CV.docx"
    assert body["resumeUrl"].startswith(f"http://localhost:8000/uploads/resumes/{user['id']}/")

    stored = db.users.find_one({"email": "seeker@example.com"})
    assert storage.download(stored["resume_key"]) == content


@pytest.mark.parametrize("filename,content_type", [
    ("cv.txt", "text/plain"),
    ("cv.pdf", "image/png"),
    ("cv.exe", "application/pdf"),
])
def test_upload_rejects_wrong_type(seeker, filename, content_type):
    c, _ = seeker
    r = upload(c, filename, b"%PDF-1.4 data", content_type)
    assert r.status_code == 400
    assert "Only PDF, DOC, and DOCX" in r.json()["detail"]


def test_upload_rejects_large_file(seeker):
    c, _ = seeker
    r = upload(c, "cv.pdf", b"x" * (5 * 1024 * 1024 + 1), "application/pdf")
    assert r.status_code == 400
    assert "too large" in r.json()["detail"]


def test_validate_resume_upload_accepts_doc():
    validate_resume_upload("old.DOC", "application/msword", b"binary")
    with pytest.raises(ValidationError):
        validate_resume_upload("", "application/pdf", b"x")


def test_extract_text():
    assert "FastAPI" in extract_text(make_docx(RESUME_TEXT), "cv.docx")
    with pytest.raises(ExtractionError):
        extract_text(b"not a pdf", "cv.pdf")
    with pytest.raises(ExtractionError):
        extract_text(b"binary", "cv.doc")


# ============================================================
# RESUME FEEDBACK
# ============================================================

def test_resume_feedback(seeker, openai_backend):
    c, _ = seeker
    upload(c, "cv.docx", make_docx(RESUME_TEXT), DOCX_TYPE)
    openai_backend.chat.completions.create.return_value = completion("## Overall Impression\n- Solid.")

    r = c.post(f"{API}/ai/resume-feedback")
    assert r.status_code == 200
    assert r.json() == {"suggestions": "## Overall Impression\n- Solid."}

    kwargs = openai_backend.chat.completions.create.call_args.kwargs
    assert kwargs["temperature"] == 0.6
    assert "reduced p95 latency by 40%" in kwargs["messages"][0]["content"]


def test_resume_feedback_truncates_long_resume(seeker, openai_backend):
    c, _ = seeker
    upload(c, "cv.docx", make_docx("A" * 40000), DOCX_TYPE)
    openai_backend.chat.completions.create.return_value = completion("ok")

    assert c.post(f"{API}/ai/resume-feedback").status_code == 200
    prompt = openai_backend.chat.completions.create.call_args.kwargs["messages"][0]["content"]
    assert "A" * 30000 in prompt
    assert "A" * 30001 not in prompt


def test_resume_feedback_without_resume(seeker, openai_backend):
    c, _ = seeker
    r = c.post(f"{API}/ai/resume-feedback")
    assert r.status_code == 400
    assert r.json()["detail"] == "No resume uploaded. Please upload your resume first."
    openai_backend.chat.completions.create.assert_not_called()


def test_resume_feedback_insufficient_text(seeker, openai_backend):
    c, _ = seeker
    upload(c, "cv.docx", make_docx("Sam Seeker", "Python"), DOCX_TYPE)
    r = c.post(f"{API}/ai/resume-feedback")
    assert r.status_code == 400
    assert "sufficient text" in r.json()["detail"]
    openai_backend.chat.completions.create.assert_not_called()


def test_resume_feedback_legacy_doc_fails_extraction(seeker, openai_backend):
    c, _ = seeker
    assert upload(c, "cv.doc", b"\xd0\xcf\x11\xe0 legacy word", "application/msword").status_code == 200
    r = c.post(f"{API}/ai/resume-feedback")
    assert r.status_code == 500
    assert "PDF or DOCX" in r.json()["detail"]
