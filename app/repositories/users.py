# app/repositories/users.py
from typing import Optional, Dict, Any, Iterable
from datetime import datetime
from bson import ObjectId

from app.db.mongo import get_db, find_by_ids, USERS
from app.utils.dates import utcnow

# never leaves the repository unless explicitly asked for
SECRET_FIELDS = {"password": 0, "resetPasswordToken": 0, "resetPasswordExpire": 0}
# what other users may see
PUBLIC_HIDDEN = {**SECRET_FIELDS, "email": 0, "savedJobs": 0, "appliedJobs": 0, "notifiedCommunities": 0}
SUMMARY_FIELDS = {"name": 1, "profileImage": 1}


def new_user_document(name: str, email: str, password_hash: str) -> Dict[str, Any]:
    now = utcnow()
    return {
        "name": name,
        "email": email,
        "password": password_hash,
        "profileImage": "",
        "bio": "",
        "title": "",
        "website": "",
        "phone": "",
        "location": "",
        "skills": [],
        "socialLinks": {"linkedin": "", "github": "", "twitter": "", "website": ""},
        "experience": [],
        "education": [],
        "savedJobs": [],
        "appliedJobs": [],
        "joinedCommunities": [],
        "notifiedCommunities": [],
        "createdAt": now,
        "updatedAt": now,
    }

async def create_user(name: str, email: str, password_hash: str) -> Dict[str, Any]:
    db = get_db()
    doc = new_user_document(name, email, password_hash)
    res = await db[USERS].insert_one(doc)
    return await get_user(res.inserted_id)

async def get_user(user_id: ObjectId, projection: Optional[Dict[str, int]] = None) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[USERS].find_one({"_id": user_id}, projection or SECRET_FIELDS)

async def get_user_with_password(email: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[USERS].find_one({"email": email})

async def get_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[USERS].find_one({"email": email}, SECRET_FIELDS)

async def email_taken(email: str, exclude_id: Optional[ObjectId] = None) -> bool:
    db = get_db()
    query: Dict[str, Any] = {"email": email}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    return await db[USERS].find_one(query, {"_id": 1}) is not None

async def update_fields(user_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    db = get_db()
    await db[USERS].update_one({"_id": user_id}, {"$set": {**fields, "updatedAt": utcnow()}})
    return await get_user(user_id)

async def add_to_sets(user_id: ObjectId, values: Dict[str, Any]) -> None:
    db = get_db()
    await db[USERS].update_one({"_id": user_id}, {"$addToSet": values})

async def pull_from_sets(user_id: ObjectId, values: Dict[str, Any]) -> None:
    db = get_db()
    await db[USERS].update_one({"_id": user_id}, {"$pull": values})

async def push_applied_job(user_id: ObjectId, entry: Dict[str, Any]) -> None:
    db = get_db()
    await db[USERS].update_one({"_id": user_id}, {"$push": {"appliedJobs": entry}})

async def set_applied_status(user_id: ObjectId, job_id: ObjectId, status: str) -> None:
    db = get_db()
    await db[USERS].update_one(
        {"_id": user_id, "appliedJobs.job": job_id},
        {"$set": {"appliedJobs.$.status": status}},
    )

async def set_reset_token(user_id: ObjectId, token_hash: str, expires_at: datetime) -> None:
    db = get_db()
    await db[USERS].update_one(
        {"_id": user_id},
        {"$set": {"resetPasswordToken": token_hash, "resetPasswordExpire": expires_at}},
    )

async def find_by_reset_token(token_hash: str, now: datetime) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[USERS].find_one(
        {"resetPasswordToken": token_hash, "resetPasswordExpire": {"$gt": now}},
        SECRET_FIELDS,
    )

async def set_password(user_id: ObjectId, password_hash: str) -> None:
    db = get_db()
    await db[USERS].update_one(
        {"_id": user_id},
        {
            "$set": {"password": password_hash, "updatedAt": utcnow()},
            "$unset": {"resetPasswordToken": "", "resetPasswordExpire": ""},
        },
    )

async def summaries(user_ids: Iterable[ObjectId]) -> Dict[ObjectId, Dict[str, Any]]:
    """id -> {_id, name, profileImage} for populating references."""
    ids = list({i for i in user_ids if i is not None})
    docs = await find_by_ids(USERS, ids, SUMMARY_FIELDS)
    return {d["_id"]: d for d in docs}

