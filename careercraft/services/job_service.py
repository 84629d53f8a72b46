"""
Job Service - job postings owned by recruiters.

Ownership rule: `posted_by` is set once at creation and decides who may
edit or delete a job. Only `open` jobs show up in the public listing;
direct lookups by id return any status.
"""

import logging
import math
import re
from typing import List
from pymongo import ASCENDING, DESCENDING

from careercraft.core.auth import CurrentUser
from careercraft.core.exceptions import Forbidden, NotFound, PreconditionFailed
from careercraft.db.mongodb import COLLECTIONS
from careercraft.schemas.schemas import JobCreate, JobFilters, JobSort, JobStatus, JobUpdate
from careercraft.services.mongo_service import CollectionService, to_object_id, utcnow

logger = logging.getLogger(__name__)

# Fields matched by the free-text `search` filter
SEARCH_FIELDS = ["title", "description", "company_name", "category", "skills_required"]


def build_open_jobs_filter(filters: JobFilters) -> dict:
    """Translate listing filters into a MongoDB query. Filters combine with AND."""
    query = {"status": JobStatus.open.value}

    terms = (filters.search or "").split()
    if terms:
        # a job matches when any term appears in any searchable field
        query["$or"] = [
            {field: {"$regex": re.escape(term), "$options": "i"}}
            for term in terms
            for field in SEARCH_FIELDS
        ]
    if filters.location:
        query["location"] = {"$regex": re.escape(filters.location.strip()), "$options": "i"}
    if filters.category:
        query["category"] = filters.category
    if filters.job_type:
        query["job_type"] = filters.job_type
    if filters.experience_level:
        query["experience_level"] = filters.experience_level

    return query


class JobService(CollectionService):
    collection_name = COLLECTIONS["jobs"]

    def get(self, job_id) -> dict:
        job = self.collection.find_one({"_id": to_object_id(job_id, "Job")})
        if not job:
            raise NotFound("Job not found.")
        return job

    def _get_owned(self, actor: CurrentUser, job_id) -> dict:
        job = self.get(job_id)
        if str(job["posted_by"]) != actor.id:
            logger.warning("User %s tried to modify job %s owned by %s", actor.id, job_id, job["posted_by"])
            raise Forbidden("User not authorized to modify this job.")
        return job

    def create_job(self, actor: CurrentUser, data: JobCreate) -> dict:
        if actor.role != "company_recruiter":
            raise Forbidden("Only recruiters can post jobs.")
        if not actor.company_name:
            raise PreconditionFailed("Company name not found for recruiter. Please update your profile.")

        now = utcnow()
        doc = data.model_dump()
        doc["job_type"] = data.job_type.value
        doc["experience_level"] = data.experience_level.value
        doc.update({
            "company_name": actor.company_name,
            "posted_by": to_object_id(actor.id, "User"),
            "status": JobStatus.open.value,
            "created_at": now,
            "updated_at": now,
        })
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info("Recruiter %s posted job %s", actor.id, result.inserted_id)
        return doc

    def update_job(self, actor: CurrentUser, job_id, update: JobUpdate) -> dict:
        job = self._get_owned(actor, job_id)

        changes = update.model_dump(exclude_unset=True)
        # Required fields can't be cleared; optional ones (salary, deadline...) can
        for field in ("title", "description", "location", "job_type", "experience_level",
                      "category", "skills_required", "status"):
            if changes.get(field) is None:
                changes.pop(field, None)
        for field in ("job_type", "experience_level", "status"):
            if field in changes:
                changes[field] = changes[field].value

        if changes:
            changes["updated_at"] = utcnow()
            self.collection.update_one({"_id": job["_id"]}, {"$set": changes})
        return self.get(job["_id"])

    def delete_job(self, actor: CurrentUser, job_id) -> None:
        job = self._get_owned(actor, job_id)
        self.collection.delete_one({"_id": job["_id"]})
        logger.info("Recruiter %s deleted job %s", actor.id, job["_id"])

    def list_open_jobs(
        self,
        filters: JobFilters,
        sort_by: JobSort = JobSort.newest,
        page: int = 1,
        limit: int = 10,
    ) -> dict:
        """
        Paginated listing of open jobs.

        Returns {"jobs", "current_page", "total_pages", "total_jobs"}.
        """
        query = build_open_jobs_filter(filters)
        direction = ASCENDING if sort_by == JobSort.oldest else DESCENDING
        skip = (page - 1) * limit

        jobs = list(
            self.collection.find(query)
            .sort([("created_at", direction), ("_id", direction)])
            .skip(skip)
            .limit(limit)
        )
        total_jobs = self.collection.count_documents(query)

        return {
            "jobs": jobs,
            "current_page": page,
            "total_pages": math.ceil(total_jobs / limit),
            "total_jobs": total_jobs,
        }

    def list_recruiter_jobs(self, actor: CurrentUser) -> List[dict]:
        """All jobs posted by the caller, any status, newest first."""
        return list(
            self.collection.find({"posted_by": to_object_id(actor.id, "User")})
            .sort([("created_at", DESCENDING), ("_id", DESCENDING)])
        )

    def get_job_summaries(self, job_ids: list) -> dict:
        """Map of job _id -> summary fields, for joining into application lists."""
        if not job_ids:
            return {}
        projection = {"title": 1, "company_name": 1, "location": 1, "job_type": 1, "status": 1}
        return {job["_id"]: job for job in self.collection.find({"_id": {"$in": job_ids}}, projection)}
