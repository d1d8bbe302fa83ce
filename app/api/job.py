# app/api/job.py
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from app.api.deps import get_current_user
from app.models.job import ApplyIn, JobCreate, JobType, JobUpdate, StatusUpdate
from app.services import jobs as jobs_service

router = APIRouter(prefix="/job", tags=["Jobs"])


@router.get("")
async def list_jobs(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None),
    type: Optional[JobType] = Query(None),
    location: Optional[str] = Query(None),
    sort: Optional[str] = Query(None),
):
    data, pagination = await jobs_service.list_jobs(
        page,
        limit,
        search=search,
        job_type=type.value if type else None,
        location=location,
        sort=sort,
    )
    return {"success": True, "count": len(data), "pagination": pagination, "data": data}

@router.post("", status_code=201)
async def create_job(payload: JobCreate, user=Depends(get_current_user)):
    data = await jobs_service.create_job(payload, user)
    return {"success": True, "data": data}

@router.get("/{job_id}")
async def get_job(job_id: str):
    data = await jobs_service.get_job(job_id)
    return {"success": True, "data": data}

@router.put("/{job_id}")
async def update_job(job_id: str, payload: JobUpdate, user=Depends(get_current_user)):
    data = await jobs_service.update_job(job_id, payload, user)
    return {"success": True, "data": data}

@router.delete("/{job_id}")
async def delete_job(job_id: str, user=Depends(get_current_user)):
    await jobs_service.delete_job(job_id, user)
    return {"success": True, "message": "Job removed"}

@router.put("/{job_id}/apply")
async def apply_for_job(job_id: str, payload: Optional[ApplyIn] = Body(None), user=Depends(get_current_user)):
    await jobs_service.apply_for_job(job_id, payload or ApplyIn(), user)
    return {"success": True, "message": "Applied for job successfully"}

@router.put("/{job_id}/save")
async def save_job(job_id: str, user=Depends(get_current_user)):
    is_saved = await jobs_service.toggle_save(job_id, user)
    return {"success": True, "message": "Job saved" if is_saved else "Job unsaved", "isSaved": is_saved}

@router.put("/{job_id}/application/{user_id}")
async def update_application_status(job_id: str, user_id: str, payload: StatusUpdate, user=Depends(get_current_user)):
    await jobs_service.update_application_status(job_id, user_id, payload.status, user)
    return {"success": True, "message": f"Application status updated to {payload.status}"}
