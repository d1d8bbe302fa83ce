# app/repositories/communities.py
from typing import Optional, List, Dict, Any
from bson import ObjectId

from app.db.mongo import get_db, COMMUNITIES
from app.utils.dates import utcnow

LIST_FIELDS = {"name": 1, "description": 1, "image": 1, "tags": 1, "isPopular": 1, "members": 1, "createdAt": 1}


async def create_community(doc: Dict[str, Any], creator_id: ObjectId) -> Dict[str, Any]:
    db = get_db()
    payload = {
        **doc,
        "isPopular": False,
        "createdBy": creator_id,
        "members": [creator_id],
        "moderators": [creator_id],
        "posts": [],
        "createdAt": utcnow(),
    }
    res = await db[COMMUNITIES].insert_one(payload)
    return await get_community(res.inserted_id)

async def get_community(community_id: ObjectId) -> Optional[Dict[str, Any]]:
    db = get_db()
    return await db[COMMUNITIES].find_one({"_id": community_id})

async def find_by_name(name: str, exclude_id: Optional[ObjectId] = None) -> Optional[Dict[str, Any]]:
    db = get_db()
    query: Dict[str, Any] = {"name": name}
    if exclude_id is not None:
        query["_id"] = {"$ne": exclude_id}
    return await db[COMMUNITIES].find_one(query, {"_id": 1})

async def list_communities() -> List[Dict[str, Any]]:
    db = get_db()
    out = []
    async for d in db[COMMUNITIES].find({}, LIST_FIELDS).sort("createdAt", -1):
        out.append(d)
    return out

async def update_fields(community_id: ObjectId, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    db = get_db()
    if fields:
        await db[COMMUNITIES].update_one({"_id": community_id}, {"$set": fields})
    return await get_community(community_id)

async def add_member(community_id: ObjectId, user_id: ObjectId) -> None:
    db = get_db()
    await db[COMMUNITIES].update_one({"_id": community_id}, {"$addToSet": {"members": user_id}})

async def remove_member(community_id: ObjectId, user_id: ObjectId) -> None:
    # leaving also drops moderator rights
    db = get_db()
    await db[COMMUNITIES].update_one(
        {"_id": community_id},
        {"$pull": {"members": user_id, "moderators": user_id}},
    )

async def restore_member(community_id: ObjectId, user_id: ObjectId, moderator: bool) -> None:
    db = get_db()
    values: Dict[str, Any] = {"members": user_id}
    if moderator:
        values["moderators"] = user_id
    await db[COMMUNITIES].update_one({"_id": community_id}, {"$addToSet": values})

async def add_post(community_id: ObjectId, post_id: ObjectId) -> None:
    db = get_db()
    await db[COMMUNITIES].update_one({"_id": community_id}, {"$push": {"posts": post_id}})

async def pull_post(community_id: ObjectId, post_id: ObjectId) -> None:
    db = get_db()
    await db[COMMUNITIES].update_one({"_id": community_id}, {"$pull": {"posts": post_id}})
