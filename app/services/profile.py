# app/services/profile.py
import logging
from typing import List, Dict, Any

from bson import ObjectId

from app.core.errors import DuplicateResource, NotFound
from app.db.mongo import clean, find_by_ids, to_object_id, COMMUNITIES, JOBS
from app.models.base import ApiModel
from app.models.user import ProfileUpdate
from app.repositories import jobs as jobs_repo
from app.repositories import users as users_repo

logger = logging.getLogger(__name__)

COMMUNITY_CARD = {"name": 1, "image": 1, "members": 1}
COMMUNITY_LIST = {"name": 1, "description": 1, "image": 1, "tags": 1, "isPopular": 1, "members": 1}
APPLIED_JOB_CARD = {"title": 1, "company": 1, "location": 1, "type": 1}

Doc = Dict[str, Any]


async def _fresh(user: Doc) -> Doc:
    current = await users_repo.get_user(user["_id"])
    if not current:
        raise NotFound("User not found")
    return current

def _community_card(c: Doc, fields) -> Doc:
    out = {"id": str(c["_id"])}
    for f in fields:
        if f != "members":
            out[f] = clean(c.get(f))
    out["memberCount"] = len(c.get("members") or [])
    return out

async def _communities(ids: List[ObjectId], projection: Doc) -> List[Doc]:
    docs = await find_by_ids(COMMUNITIES, ids, projection)
    return [_community_card(c, projection) for c in docs]


async def my_profile(user: Doc) -> Doc:
    current = await _fresh(user)
    view = clean(current)
    view["joinedCommunities"] = await _communities(current.get("joinedCommunities") or [], COMMUNITY_CARD)

    applied = current.get("appliedJobs") or []
    jobs = {j["_id"]: j for j in await find_by_ids(JOBS, [a.get("job") for a in applied], APPLIED_JOB_CARD)}
    view["appliedJobs"] = []
    for entry in applied:
        item = clean(entry)
        if entry.get("job") in jobs:
            item["job"] = clean(jobs[entry["job"]])
        view["appliedJobs"].append(item)
    return view

async def public_profile(user_id: str) -> Doc:
    oid = to_object_id(user_id)
    target = await users_repo.get_user(oid, users_repo.PUBLIC_HIDDEN) if oid else None
    if not target:
        raise NotFound("User not found")
    view = clean(target)
    view["joinedCommunities"] = await _communities(target.get("joinedCommunities") or [], COMMUNITY_CARD)
    return view

async def update_profile(user: Doc, payload: ProfileUpdate) -> Doc:
    await _fresh(user)
    fields = payload.to_document(exclude_none=True)
    if "email" in fields and await users_repo.email_taken(fields["email"], exclude_id=user["_id"]):
        raise DuplicateResource("email already exists", error={"field": "email"})
    updated = await users_repo.update_fields(user["_id"], fields)
    logger.info("Profile updated for user %s (%s)", user["_id"], ", ".join(sorted(fields)))
    return clean(updated)


async def add_entry(user: Doc, field: str, entry: ApiModel) -> List[Doc]:
    """Prepend an experience/education entry; newest first."""
    current = await _fresh(user)
    item = {"_id": ObjectId(), **entry.to_document()}
    entries = [item] + list(current.get(field) or [])
    await users_repo.update_fields(user["_id"], {field: entries})
    return clean(entries)

async def remove_entry(user: Doc, field: str, entry_id: str, label: str) -> List[Doc]:
    current = await _fresh(user)
    oid = to_object_id(entry_id)
    entries = list(current.get(field) or [])
    remaining = [e for e in entries if e.get("_id") != oid]
    if oid is None or len(remaining) == len(entries):
        raise NotFound(f"{label} not found")
    await users_repo.update_fields(user["_id"], {field: remaining})
    return clean(remaining)


async def joined_communities(user: Doc) -> List[Doc]:
    current = await _fresh(user)
    ids = [i for i in current.get("joinedCommunities") or [] if isinstance(i, ObjectId)]
    return await _communities(ids, COMMUNITY_LIST)

async def applied_jobs(user: Doc) -> List[Doc]:
    current = await _fresh(user)
    applied = [a for a in current.get("appliedJobs") or [] if a.get("job")]
    jobs = await find_by_ids(JOBS, [a["job"] for a in applied], jobs_repo.SUMMARY_FIELDS)
    by_id = {a["job"]: a for a in applied}
    out = []
    for job in jobs:
        application = by_id.get(job["_id"], {})
        out.append({
            "job": clean(job),
            "status": application.get("status", "applied"),
            "appliedAt": application.get("appliedAt"),
        })
    return out

async def saved_jobs(user: Doc) -> List[Doc]:
    current = await _fresh(user)
    ids = [i for i in current.get("savedJobs") or [] if i]
    return clean(await find_by_ids(JOBS, ids, jobs_repo.SUMMARY_FIELDS))
