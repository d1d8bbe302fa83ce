# app/services/saved_listings.py
"""Bookmarks for externally sourced job listings, keyed by application URL."""
import logging
import time
from typing import List, Dict, Any, Tuple

from app.core.errors import NotFound
from app.db.mongo import clean
from app.models.job import SavedListingIn
from app.repositories import saved_listings as listings_repo
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)


async def toggle_listing(user_id: str, listing: SavedListingIn) -> bool:
    existing = await listings_repo.find_listing(user_id, listing.application_url)
    if existing:
        await listings_repo.delete_by_oid(existing["_id"])
        logger.info("Removed saved listing for user %s: %s", user_id, listing.title)
        return False
    doc = {
        **listing.model_dump(),
        "job_id": f"job-{int(time.time() * 1000)}",
        "saved_at": utcnow(),
        "user_id": user_id,
    }
    await listings_repo.insert_listing(doc)
    logger.info("Saved listing for user %s: %s", user_id, listing.title)
    return True

async def list_listings(user_id: str, limit: int, skip: int) -> Tuple[List[Dict[str, Any]], int]:
    docs, total = await listings_repo.list_listings(user_id, limit=limit, skip=skip)
    return clean(docs), total

async def remove_listing(user_id: str, job_id: str) -> None:
    if not await listings_repo.delete_listing(user_id, job_id):
        raise NotFound("Saved job not found")
