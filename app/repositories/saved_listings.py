# app/repositories/saved_listings.py
from typing import Optional, List, Dict, Any, Tuple

from app.db.mongo import get_db, SAVED_LISTINGS


async def find_listing(user_id: str, application_url: str) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[SAVED_LISTINGS].find_one({"user_id": user_id, "application_url": application_url})

async def insert_listing(doc: Dict[str, Any]) -> str:
    db = get_db()
    res = await db[SAVED_LISTINGS].insert_one(dict(doc))
    return str(res.inserted_id)

async def delete_by_oid(oid) -> bool:
    db = get_db()
    res = await db[SAVED_LISTINGS].delete_one({"_id": oid})
    return res.deleted_count > 0

async def delete_listing(user_id: str, job_id: str) -> bool:
    db = get_db()
    res = await db[SAVED_LISTINGS].delete_one({"user_id": user_id, "job_id": job_id})
    return res.deleted_count > 0

async def list_listings(user_id: str, limit: int = 50, skip: int = 0) -> Tuple[List[Dict[str, Any]], int]:
    db = get_db()
    total = await db[SAVED_LISTINGS].count_documents({"user_id": user_id})
    cur = db[SAVED_LISTINGS].find({"user_id": user_id}).sort("saved_at", -1).skip(skip).limit(limit)
    out = []
    async for d in cur:
        out.append(d)
    return out, total
