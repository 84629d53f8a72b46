"""
Application Service - seeker <-> job applications.

An application stores a point-in-time snapshot of the job and seeker
(company name, job title, seeker name/email, resume) so later edits to the
job or profile don't rewrite history. One application per (job, seeker):
enforced by a pre-check and by the unique index as the backstop.
"""

import logging
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pymongo import DESCENDING
from pymongo.errors import DuplicateKeyError

from careercraft.core.auth import CurrentUser
from careercraft.core.exceptions import (
    Conflict,
    Forbidden,
    InvalidState,
    NotFound,
    PreconditionFailed,
    ValidationError,
)
from careercraft.db.mongodb import COLLECTIONS
from careercraft.schemas.schemas import ApplicationStatus, JobStatus
from careercraft.services.job_service import JobService
from careercraft.services.mongo_service import CollectionService, to_object_id, utcnow
from careercraft.services.user_service import UserService

logger = logging.getLogger(__name__)

SEEKER_SUMMARY_FIELDS = {
    "full_name": 1, "email": 1, "skills": 1, "bio": 1, "resume_url": 1, "resume_file_name": 1,
    "linkedin_url": 1, "portfolio_url": 1, "profile_photo_url": 1,
}


class ApplicationSnapshot(BaseModel):
    """Copies of job/seeker fields taken when the application is created."""
    model_config = ConfigDict(frozen=True)

    company_name: str
    job_title: str
    seeker_name: str
    seeker_email: str
    resume_url: str
    resume_file_name: Optional[str] = None

    @classmethod
    def capture(cls, job: dict, seeker: dict) -> "ApplicationSnapshot":
        return cls(
            company_name=job["company_name"],
            job_title=job["title"],
            seeker_name=seeker["full_name"],
            seeker_email=seeker["email"],
            resume_url=seeker["resume_url"],
            resume_file_name=seeker.get("resume_file_name") or None,
        )


class ApplicationService(CollectionService):
    collection_name = COLLECTIONS["applications"]

    def __init__(self, db=None):
        super().__init__(db)
        self.jobs = JobService(db)
        self.users = UserService(db)

    def _existing_application(self, job_id, seeker_id) -> Optional[dict]:
        return self.collection.find_one({"job_id": job_id, "seeker_id": seeker_id}, {"_id": 1})

    def apply(self, actor: CurrentUser, job_id) -> dict:
        """Create an `applied` application for the caller on an open job."""
        job = self.jobs.get(job_id)
        if job["status"] != JobStatus.open.value:
            raise InvalidState("This job is no longer open for applications.")

        seeker = self.users.get_by_id(actor.id)
        if not seeker or not seeker.get("resume_url"):
            raise PreconditionFailed("Please upload your resume to your profile before applying.")

        seeker_id = seeker["_id"]
        if self._existing_application(job["_id"], seeker_id):
            raise Conflict("You have already applied for this job.")

        snapshot = ApplicationSnapshot.capture(job, seeker)
        now = utcnow()
        doc = {
            "job_id": job["_id"],
            "seeker_id": seeker_id,
            "recruiter_id": job["posted_by"],
            **snapshot.model_dump(),
            "status": ApplicationStatus.applied.value,
            "application_date": now,
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            # Concurrent submit passed the pre-check; the unique index rejects it
            raise Conflict("You have already applied for this job.")

        doc["_id"] = result.inserted_id
        logger.info("Seeker %s applied to job %s", seeker_id, job["_id"])
        return doc

    def list_seeker_applications(self, actor: CurrentUser) -> List[dict]:
        """Caller's applications, newest first, each with a `job` summary (None if deleted)."""
        applications = list(
            self.collection.find({"seeker_id": to_object_id(actor.id, "User")})
            .sort([("application_date", DESCENDING), ("_id", DESCENDING)])
        )
        jobs = self.jobs.get_job_summaries([app["job_id"] for app in applications])
        for app in applications:
            app["job"] = jobs.get(app["job_id"])
        return applications

    def list_job_applicants(self, actor: CurrentUser, job_id) -> List[dict]:
        """Applications on one of the caller's jobs, each with a `seeker` profile summary."""
        job = self.jobs.get(job_id)
        if str(job["posted_by"]) != actor.id:
            raise Forbidden("Forbidden. You are not authorized to view applicants for this job.")

        applications = list(
            self.collection.find({"job_id": job["_id"]})
            .sort([("application_date", DESCENDING), ("_id", DESCENDING)])
        )
        seeker_ids = [app["seeker_id"] for app in applications]
        seekers = {
            seeker["_id"]: seeker
            for seeker in self.users.collection.find({"_id": {"$in": seeker_ids}}, SEEKER_SUMMARY_FIELDS)
        } if seeker_ids else {}
        for app in applications:
            app["seeker"] = seekers.get(app["seeker_id"])
        return applications

    def set_application_status(self, actor: CurrentUser, application_id, new_status: str) -> dict:
        """
        Any status may move to any other status; only the recruiter recorded
        on the application may change it.
        """
        allowed = [status.value for status in ApplicationStatus]
        if new_status not in allowed:
            raise ValidationError(f"Invalid status value. Allowed statuses are: {', '.join(allowed)}")

        application = self.collection.find_one({"_id": to_object_id(application_id, "Application")})
        if not application:
            raise NotFound("Application not found.")
        if str(application["recruiter_id"]) != actor.id:
            raise Forbidden("Forbidden. You are not authorized to update this application.")

        self.collection.update_one(
            {"_id": application["_id"]},
            {"$set": {"status": new_status, "updated_at": utcnow()}},
        )
        updated = self.collection.find_one({"_id": application["_id"]})
        updated["job"] = self.jobs.get_job_summaries([updated["job_id"]]).get(updated["job_id"])
        return updated
