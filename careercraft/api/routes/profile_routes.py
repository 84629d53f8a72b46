"""
Profile Routes

GET /profile/seeker/me - Seeker's own profile
PUT /profile/seeker/me - Update profile fields
POST /profile/seeker/me/resume - Upload resume (PDF/DOC/DOCX, max 5MB)
"""

from fastapi import APIRouter, Depends, File, UploadFile
from pymongo.database import Database

from careercraft.db.mongodb import get_mongo_db
from careercraft.core.auth import CurrentUser, get_current_seeker
from careercraft.services.mongo_service import serialize_doc
from careercraft.services.storage import ResumeStorage, get_resume_storage
from careercraft.services.user_service import UserService
from careercraft.utils.file_upload import validate_resume_upload
from careercraft.schemas.schemas import ResumeUploadResponse, SeekerProfileUpdate, UserResponse

router = APIRouter(prefix="/profile/seeker", tags=["Profile"])


@router.get("/me", response_model=UserResponse)
def get_profile(seeker: CurrentUser = Depends(get_current_seeker), db: Database = Depends(get_mongo_db)):
    return serialize_doc(UserService(db).get_seeker_profile(seeker))


@router.put("/me", response_model=UserResponse)
def update_profile(
    update: SeekerProfileUpdate,
    seeker: CurrentUser = Depends(get_current_seeker),
    db: Database = Depends(get_mongo_db),
):
    """Partial update. skills may be sent as a single string or a list."""
    return serialize_doc(UserService(db).update_seeker_profile(seeker, update))


@router.post("/me/resume", response_model=ResumeUploadResponse)
def upload_resume(
    resume_file: UploadFile = File(..., alias="resumeFile"),
    seeker: CurrentUser = Depends(get_current_seeker),
    db: Database = Depends(get_mongo_db),
    storage: ResumeStorage = Depends(get_resume_storage),
):
    """
    Upload a resume and make it the one used for applications.

    The file is validated, stored, and its URL saved on the profile.
    """
    content = resume_file.file.read()
    validate_resume_upload(resume_file.filename, resume_file.content_type, content)

    key, url = storage.upload(seeker.id, resume_file.filename, content, resume_file.content_type)
    user = UserService(db).set_resume(seeker, url, resume_file.filename, key)
    return ResumeUploadResponse(
        message="Resume uploaded successfully!",
        resume_url=user["resume_url"],
        resume_file_name=user["resume_file_name"],
    )
