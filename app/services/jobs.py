# app/services/jobs.py
import logging
import math
import re
from typing import Optional, List, Dict, Any, Tuple

from app.core.errors import AlreadyApplied, DeadlinePassed, Forbidden, NotFound
from app.db.mongo import clean, to_object_id
from app.models.job import ApplicationStatus, JobCreate, JobSort, JobUpdate, ApplyIn
from app.repositories import jobs as jobs_repo
from app.repositories import users as users_repo
from app.utils.dates import utcnow, to_naive_utc

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ("title", "company", "location", "description", "skills")

Doc = Dict[str, Any]


async def _require_job(job_id: str) -> Doc:
    oid = to_object_id(job_id)
    job = await jobs_repo.get_job(oid) if oid else None
    if not job:
        raise NotFound("Job not found")
    return job

def _require_poster(job: Doc, user: Doc, action: str) -> None:
    if job.get("postedBy") != user["_id"]:
        raise Forbidden(f"Not authorized to {action}")

def job_view(job: Doc) -> Doc:
    out = clean(job)
    if "applicants" in job:
        out["applicantCount"] = len(job.get("applicants") or [])
    return out

def build_query(search: Optional[str], job_type: Optional[str], location: Optional[str]) -> Doc:
    query: Doc = {"isActive": True}
    if search:
        pattern = {"$regex": re.escape(search), "$options": "i"}
        query["$or"] = [{field: pattern} for field in SEARCH_FIELDS]
    if job_type:
        query["type"] = job_type
    if location:
        query["location"] = {"$regex": re.escape(location), "$options": "i"}
    return query

def build_sort(sort: Optional[str]) -> List[Tuple[str, int]]:
    if sort == JobSort.SALARY.value:
        return [("salary.min", -1)]
    return [("createdAt", -1)]


async def list_jobs(page: int, limit: int, search: Optional[str] = None, job_type: Optional[str] = None,
                    location: Optional[str] = None, sort: Optional[str] = None) -> Tuple[List[Doc], Doc]:
    query = build_query(search, job_type, location)
    jobs, total = await jobs_repo.list_jobs(query, build_sort(sort), (page - 1) * limit, limit)
    posters = await users_repo.summaries(j.get("postedBy") for j in jobs)
    data = []
    for j in jobs:
        view = job_view(j)
        poster = posters.get(j.get("postedBy"))
        if poster:
            view["postedBy"] = {"id": str(poster["_id"]), "name": poster.get("name")}
        data.append(view)
    pagination = {
        "totalItems": total,
        "totalPages": math.ceil(total / limit) if limit else 0,
        "currentPage": page,
    }
    return data, pagination

async def get_job(job_id: str) -> Doc:
    job = await _require_job(job_id)
    applicants = job.get("applicants") or []
    people = await users_repo.summaries([job.get("postedBy")] + [a.get("user") for a in applicants])
    view = job_view(job)
    if job.get("postedBy") in people:
        view["postedBy"] = clean(people[job["postedBy"]])
    for entry, raw in zip(view.get("applicants") or [], applicants):
        if raw.get("user") in people:
            entry["user"] = clean(people[raw["user"]])
    return view

async def create_job(payload: JobCreate, user: Doc) -> Doc:
    doc = payload.to_document()
    doc["applicationDeadline"] = to_naive_utc(payload.application_deadline)
    job = await jobs_repo.create_job(doc, user["_id"])
    logger.info("User %s posted job %s", user["_id"], job["_id"])
    return job_view(job)

async def update_job(job_id: str, payload: JobUpdate, user: Doc) -> Doc:
    job = await _require_job(job_id)
    _require_poster(job, user, "update this job")
    fields = payload.to_document(exclude_none=True)
    if "applicationDeadline" in fields:
        fields["applicationDeadline"] = to_naive_utc(payload.application_deadline)
    updated = await jobs_repo.update_fields(job["_id"], fields)
    return job_view(updated)

async def delete_job(job_id: str, user: Doc) -> None:
    job = await _require_job(job_id)
    _require_poster(job, user, "delete this job")
    await jobs_repo.delete_job(job["_id"])
    logger.info("Job %s removed by %s", job["_id"], user["_id"])


async def apply_for_job(job_id: str, payload: ApplyIn, user: Doc) -> None:
    job = await _require_job(job_id)
    if any(a.get("user") == user["_id"] for a in job.get("applicants") or []):
        raise AlreadyApplied()
    deadline = job.get("applicationDeadline")
    now = utcnow()
    if deadline is not None and deadline < now:
        raise DeadlinePassed()

    status = ApplicationStatus.APPLIED.value
    await jobs_repo.push_applicant(job["_id"], {
        "user": user["_id"],
        "status": status,
        "appliedAt": now,
        "resume": payload.resume,
        "coverLetter": payload.cover_letter,
    })
    try:
        await users_repo.push_applied_job(user["_id"], {"job": job["_id"], "status": status, "appliedAt": now})
    except Exception:
        logger.exception("Application of %s to %s failed on user side; rolling back", user["_id"], job["_id"])
        await jobs_repo.pull_applicant(job["_id"], user["_id"])
        raise
    logger.info("User %s applied for job %s", user["_id"], job["_id"])

async def toggle_save(job_id: str, user: Doc) -> bool:
    """Flip the job's presence in the user's savedJobs; returns the new state."""
    job = await _require_job(job_id)
    fresh = await users_repo.get_user(user["_id"])
    if not fresh:
        raise NotFound("User not found")
    if job["_id"] in (fresh.get("savedJobs") or []):
        await users_repo.pull_from_sets(user["_id"], {"savedJobs": job["_id"]})
        return False
    await users_repo.add_to_sets(user["_id"], {"savedJobs": job["_id"]})
    return True

async def update_application_status(job_id: str, applicant_id: str, status: str, user: Doc) -> None:
    job = await _require_job(job_id)
    _require_poster(job, user, "update application status")
    applicant_oid = to_object_id(applicant_id)
    if applicant_oid is None or not any(a.get("user") == applicant_oid for a in job.get("applicants") or []):
        raise NotFound("Applicant not found")
    await jobs_repo.set_applicant_status(job["_id"], applicant_oid, status)
    await users_repo.set_applied_status(applicant_oid, job["_id"], status)
    logger.info("Application of %s to job %s set to %s", applicant_oid, job["_id"], status)
