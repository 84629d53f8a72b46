"""
Application Routes

POST /applications/job/{job_id}/apply - Apply to an open job (seeker only)
GET /applications/my-applications - Seeker's applications
GET /applications/job/{job_id}/applicants - Applicants for a job (owning recruiter only)
PUT /applications/{application_id}/status - Change application status (recruiter only)
"""

from fastapi import APIRouter, Depends
from pymongo.database import Database
from typing import List

from careercraft.db.mongodb import get_mongo_db
from careercraft.core.auth import CurrentUser, get_current_recruiter, get_current_seeker
from careercraft.services.application_service import ApplicationService
from careercraft.services.mongo_service import serialize_doc, serialize_docs
from careercraft.schemas.schemas import (
    ApplicationActionResponse, ApplicationResponse, ApplicationStatusUpdate
)

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.post("/job/{job_id}/apply", response_model=ApplicationActionResponse, status_code=201)
def apply_to_job(job_id: str, seeker: CurrentUser = Depends(get_current_seeker), db: Database = Depends(get_mongo_db)):
    """
    Apply to a job with the resume currently on the seeker's profile.

    The job title, company and resume are copied onto the application.
    """
    application = ApplicationService(db).apply(seeker, job_id)
    return {"message": "Application submitted successfully!", "application": serialize_doc(application)}


@router.get("/my-applications", response_model=List[ApplicationResponse])
def my_applications(seeker: CurrentUser = Depends(get_current_seeker), db: Database = Depends(get_mongo_db)):
    return serialize_docs(ApplicationService(db).list_seeker_applications(seeker))


@router.get("/job/{job_id}/applicants", response_model=List[ApplicationResponse])
def job_applicants(job_id: str, recruiter: CurrentUser = Depends(get_current_recruiter), db: Database = Depends(get_mongo_db)):
    return serialize_docs(ApplicationService(db).list_job_applicants(recruiter, job_id))


@router.put("/{application_id}/status", response_model=ApplicationActionResponse)
def update_status(
    application_id: str,
    update: ApplicationStatusUpdate,
    recruiter: CurrentUser = Depends(get_current_recruiter),
    db: Database = Depends(get_mongo_db),
):
    """Any status may be set; the allowed values are listed in the error for unknown ones."""
    application = ApplicationService(db).set_application_status(recruiter, application_id, update.status)
    return {"message": "Application status updated successfully.", "application": serialize_doc(application)}
