"""
File Upload Utility - Validate resume uploads and extract their text.

Accepted formats:
- PDF (.pdf) - text extracted with PyPDF2
- Word (.docx) - text extracted with python-docx
- Legacy Word (.doc) - stored, but text extraction is not supported

Max file size: settings.resume_max_size_mb (5MB by default)
"""

import io
import logging
from docx import Document
from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError

from careercraft.core.config import get_settings
from careercraft.core.exceptions import ExtractionError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {'.pdf', '.doc', '.docx'}
ALLOWED_CONTENT_TYPES = {
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
}
TYPE_ERROR = "File upload failed: Only PDF, DOC, and DOCX files are allowed for resumes."


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


def validate_resume_upload(filename: str, content_type: str, content: bytes) -> None:
    """
    Check extension, content type and size of an uploaded resume.

    Raises:
        ValidationError when the file is missing, of the wrong type or too large
    """
    if not filename:
        raise ValidationError("No resume file uploaded. Please select a file.")

    if get_file_extension(filename) not in ALLOWED_EXTENSIONS:
        raise ValidationError(TYPE_ERROR)
    if (content_type or '').split(';')[0].strip().lower() not in ALLOWED_CONTENT_TYPES:
        raise ValidationError(TYPE_ERROR)

    max_mb = get_settings().resume_max_size_mb
    if len(content) > max_mb * 1024 * 1024:
        raise ValidationError(f"File too large. Maximum size: {max_mb}MB")
    if not content:
        raise ValidationError("Uploaded file is empty.")


def extract_text(content: bytes, filename: str) -> str:
    """Extract text from resume bytes based on the file extension."""
    ext = get_file_extension(filename or '')
    if ext == '.pdf':
        return extract_from_pdf(content)
    if ext == '.docx':
        return extract_from_docx(content)
    raise ExtractionError(
        f"Failed to process your resume: text extraction is not supported for '{ext or 'unknown'}' files. "
        "Please upload a PDF or DOCX."
    )


def extract_from_pdf(content: bytes) -> str:
    """Extract text from PDF bytes."""
    try:
        reader = PdfReader(io.BytesIO(content))
        text_parts = []
        for page in reader.pages:
            page_text = page.extract_text()
            if page_text:
                text_parts.append(page_text)
        return '\n'.join(text_parts)
    except (PdfReadError, ValueError, KeyError, TypeError) as e:
        logger.error("PDF text extraction failed: %s", e)
        raise ExtractionError(f"Failed to process your resume: error reading PDF ({e})")


def extract_from_docx(content: bytes) -> str:
    """Extract text from DOCX bytes."""
    try:
        doc = Document(io.BytesIO(content))
    except Exception as e:
        # python-docx surfaces zip, xml and package errors with different types
        logger.error("DOCX text extraction failed: %s", e)
        raise ExtractionError(f"Failed to process your resume: error reading DOCX ({e})")

    text_parts = []

    # Extract paragraphs
    for para in doc.paragraphs:
        if para.text.strip():
            text_parts.append(para.text)

    # Extract tables
    for table in doc.tables:
        for row in table.rows:
            row_text = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if row_text:
                text_parts.append(' | '.join(row_text))

    return '\n'.join(text_parts)
