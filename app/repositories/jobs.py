# app/repositories/jobs.py
from typing import Optional, List, Dict, Any, Tuple
from bson import ObjectId

from app.db.mongo import get_db, JOBS
from app.utils.dates import utcnow

LIST_FIELDS = {
    "title": 1, "company": 1, "location": 1, "type": 1, "description": 1, "salary": 1,
    "skills": 1, "benefits": 1, "companyLogo": 1, "postedBy": 1, "createdAt": 1,
}
SUMMARY_FIELDS = {
    "title": 1, "company": 1, "location": 1, "type": 1, "description": 1, "salary": 1,
    "applicationDeadline": 1,
}


async def create_job(doc: Dict[str, Any], posted_by: ObjectId) -> Dict[str, Any]:
    db = get_db()
    now = utcnow()
    payload = {**doc, "postedBy": posted_by, "applicants": [], "isActive": True, "createdAt": now, "updatedAt": now}
    res = await db[JOBS].insert_one(payload)
    return await get_job(res.inserted_id)

async def get_job(job_id: ObjectId) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[JOBS].find_one({"_id": job_id})

async def list_jobs(query: Dict[str, Any], sort: List[Tuple[str, int]], skip: int, limit: int) -> Tuple[List[Dict[str, Any]], int]:
    db = get_db()
    total = await db[JOBS].count_documents(query)
    cur = db[JOBS].find(query, LIST_FIELDS).sort(sort).skip(skip).limit(limit)
    out = []
    async for d in cur:
        out.append(d)
    return out, total

async def update_fields(job_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    db = get_db()
    await db[JOBS].update_one({"_id": job_id}, {"$set": {**fields, "updatedAt": utcnow()}})
    return await get_job(job_id)

async def delete_job(job_id: ObjectId) -> bool:
    db = get_db()
    res = await db[JOBS].delete_one({"_id": job_id})
    return res.deleted_count > 0

async def push_applicant(job_id: ObjectId, applicant: Dict[str, Any]) -> None:
    db = get_db()
    await db[JOBS].update_one({"_id": job_id}, {"$push": {"applicants": applicant}})

async def pull_applicant(job_id: ObjectId, user_id: ObjectId) -> None:
    db = get_db()
    await db[JOBS].update_one({"_id": job_id}, {"$pull": {"applicants": {"user": user_id}}})

async def set_applicant_status(job_id: ObjectId, user_id: ObjectId, status: str) -> None:
    db = get_db()
    await db[JOBS].update_one(
        {"_id": job_id, "applicants.user": user_id},
        {"$set": {"applicants.$.status": status, "updatedAt": utcnow()}},
    )
