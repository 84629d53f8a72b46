"""
Job Routes

POST /jobs - Create job posting (recruiter only)
GET /jobs - List open jobs with filters and pagination
GET /jobs/my-jobs - List the caller's own postings (recruiter only)
GET /jobs/{job_id} - Get job details
PUT /jobs/{job_id} - Update job (owning recruiter only)
DELETE /jobs/{job_id} - Delete job (owning recruiter only)
"""

from fastapi import APIRouter, Depends, Query
from pymongo.database import Database
from typing import List, Optional

from careercraft.db.mongodb import get_mongo_db
from careercraft.core.auth import CurrentUser, get_current_recruiter
from careercraft.services.job_service import JobService
from careercraft.services.mongo_service import serialize_doc, serialize_docs
from careercraft.schemas.schemas import (
    JobCreate, JobFilters, JobListResponse, JobResponse, JobSort, JobUpdate, MessageResponse
)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


@router.post("", response_model=JobResponse, status_code=201)
def create_job(
    job: JobCreate,
    recruiter: CurrentUser = Depends(get_current_recruiter),
    db: Database = Depends(get_mongo_db),
):
    """Create a new job posting under the recruiter's company."""
    return serialize_doc(JobService(db).create_job(recruiter, job))


@router.get("", response_model=JobListResponse)
def list_jobs(
    search: Optional[str] = Query(None, description="Search title, description, company, category and skills"),
    location: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    job_type: Optional[str] = Query(None, alias="jobType"),
    experience_level: Optional[str] = Query(None, alias="experienceLevel"),
    sort_by: JobSort = Query(JobSort.newest, alias="sortBy"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Database = Depends(get_mongo_db),
):
    """List open job postings with filters and pagination."""
    filters = JobFilters(
        search=search,
        location=location,
        category=category,
        job_type=job_type,
        experience_level=experience_level,
    )
    result = JobService(db).list_open_jobs(filters, sort_by=sort_by, page=page, limit=limit)
    result["jobs"] = serialize_docs(result["jobs"])
    return result


@router.get("/my-jobs", response_model=List[JobResponse])
def list_my_jobs(recruiter: CurrentUser = Depends(get_current_recruiter), db: Database = Depends(get_mongo_db)):
    return serialize_docs(JobService(db).list_recruiter_jobs(recruiter))


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: str, db: Database = Depends(get_mongo_db)):
    """Get job details. Closed and archived jobs are returned too."""
    return serialize_doc(JobService(db).get(job_id))


@router.put("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: str,
    update: JobUpdate,
    recruiter: CurrentUser = Depends(get_current_recruiter),
    db: Database = Depends(get_mongo_db),
):
    return serialize_doc(JobService(db).update_job(recruiter, job_id, update))


@router.delete("/{job_id}", response_model=MessageResponse)
def delete_job(job_id: str, recruiter: CurrentUser = Depends(get_current_recruiter), db: Database = Depends(get_mongo_db)):
    JobService(db).delete_job(recruiter, job_id)
    return MessageResponse(message="Job removed successfully")
