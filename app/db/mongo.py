# app/db/mongo.py
import logging
from typing import Optional, Any, Dict, List

import motor.motor_asyncio as _motor_asyncio
from bson import ObjectId

from app.core.config import get_settings

logger = logging.getLogger(__name__)

USERS = "users"
COMMUNITIES = "communities"
POSTS = "posts"
JOBS = "jobs"
SAVED_LISTINGS = "saved_jobs"

_mongo_client: Optional[_motor_asyncio.AsyncIOMotorClient] = None

def get_mongo_client():
    """
    Returns a cached Motor client.
    """
    global _mongo_client
    if _mongo_client is None:
        settings = get_settings()
        _mongo_client = _motor_asyncio.AsyncIOMotorClient(settings.MONGODB_URI)
    return _mongo_client

def get_db():
    client = get_mongo_client()
    settings = get_settings()
    return client[settings.MONGODB_DB]

async def init_db():
    client = get_mongo_client()
    await client.admin.command("ping")
    logger.info("MongoDB connected (db=%s)", get_settings().MONGODB_DB)

def close_db():
    global _mongo_client
    if _mongo_client is not None:
        _mongo_client.close()
        _mongo_client = None


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse a 24-hex id; None for anything that is not one."""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value) and len(value) == 24:
        return ObjectId(value)
    return None

def clean(value: Any) -> Any:
    # JSON-safe copy: _id -> id, ObjectId -> str
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, list):
        return [clean(v) for v in value]
    if isinstance(value, dict):
        out = {}
        for k, v in value.items():
            if k == "_id":
                out["id"] = clean(v)
            else:
                out[k] = clean(v)
        return out
    return value

async def find_by_ids(collection: str, ids: List[ObjectId], projection: Optional[Dict[str, int]] = None) -> List[Dict[str, Any]]:
    """Resolve a list of references in one query (order not preserved)."""
    if not ids:
        return []
    db = get_db()
    out = []
    async for d in db[collection].find({"_id": {"$in": list(ids)}}, projection):
        out.append(d)
    return out
