# app/api/saved_listings.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_optional_user
from app.core.errors import ValidationFailed
from app.models.job import SavedListingIn
from app.services import saved_listings as listings_service

router = APIRouter(prefix="/jobs", tags=["Saved Listings"])


@router.post("/save")
async def toggle_saved_listing(
    listing: SavedListingIn,
    user_id: Optional[str] = Query(None),
    user=Depends(get_optional_user),
):
    owner = str(user["_id"]) if user else user_id
    if not owner:
        raise ValidationFailed("User ID is required")
    saved = await listings_service.toggle_listing(owner, listing)
    return {"success": True, "is_saved": saved, "message": "Job saved" if saved else "Job removed from saved"}

@router.get("/saved/{user_id}")
async def get_saved_listings(user_id: str, limit: int = Query(50, ge=1, le=100), skip: int = Query(0, ge=0)):
    jobs, total = await listings_service.list_listings(user_id, limit, skip)
    return {"success": True, "total": total, "limit": limit, "skip": skip, "jobs": jobs}

@router.delete("/saved/{user_id}/{job_id}")
async def delete_saved_listing(user_id: str, job_id: str):
    await listings_service.remove_listing(user_id, job_id)
    return {"success": True, "message": "Job removed from saved"}
