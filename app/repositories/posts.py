# app/repositories/posts.py
from typing import Optional, List, Dict, Any
from bson import ObjectId

from app.db.mongo import get_db, POSTS
from app.utils.dates import utcnow


async def create_post(doc: Dict[str, Any]) -> Dict[str, Any]:
    db = get_db()
    now = utcnow()
    payload = {**doc, "likes": [], "comments": [], "createdAt": now, "updatedAt": now}
    res = await db[POSTS].insert_one(payload)
    return await get_post(res.inserted_id)

async def get_post(post_id: ObjectId) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[POSTS].find_one({"_id": post_id})

async def list_for_community(community_id: ObjectId) -> List[Dict[str, Any]]:
    db = get_db()
    out = []
    async for d in db[POSTS].find({"community": community_id}).sort("createdAt", -1):
        out.append(d)
    return out

async def add_like(post_id: ObjectId, user_id: ObjectId) -> Optional[Dict[str, Any]]:
    db = get_db()
    await db[POSTS].update_one({"_id": post_id}, {"$addToSet": {"likes": user_id}})
    return await get_post(post_id)

async def remove_like(post_id: ObjectId, user_id: ObjectId) -> Optional[Dict[str, Any]]:
    db = get_db()
    await db[POSTS].update_one({"_id": post_id}, {"$pull": {"likes": user_id}})
    return await get_post(post_id)

async def push_comment(post_id: ObjectId, comment: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    db = get_db()
    await db[POSTS].update_one(
        {"_id": post_id},
        {"$push": {"comments": comment}, "$set": {"updatedAt": utcnow()}},
    )
    return await get_post(post_id)

async def delete_post(post_id: ObjectId) -> bool:
    db = get_db()
    res = await db[POSTS].delete_one({"_id": post_id})
    return res.deleted_count > 0
