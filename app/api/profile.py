# app/api/profile.py
from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.models.user import EducationIn, ExperienceIn, ProfileUpdate
from app.services import profile as profile_service

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("")
async def get_my_profile(user=Depends(get_current_user)):
    data = await profile_service.my_profile(user)
    return {"success": True, "data": data}

@router.put("")
async def update_profile(payload: ProfileUpdate, user=Depends(get_current_user)):
    data = await profile_service.update_profile(user, payload)
    return {"success": True, "data": data}

@router.get("/user/{user_id}")
async def get_user_profile(user_id: str):
    data = await profile_service.public_profile(user_id)
    return {"success": True, "data": data}

@router.put("/experience")
async def add_experience(payload: ExperienceIn, user=Depends(get_current_user)):
    data = await profile_service.add_entry(user, "experience", payload)
    return {"success": True, "data": data}

@router.delete("/experience/{exp_id}")
async def delete_experience(exp_id: str, user=Depends(get_current_user)):
    data = await profile_service.remove_entry(user, "experience", exp_id, "Experience")
    return {"success": True, "data": data}

@router.put("/education")
async def add_education(payload: EducationIn, user=Depends(get_current_user)):
    data = await profile_service.add_entry(user, "education", payload)
    return {"success": True, "data": data}

@router.delete("/education/{edu_id}")
async def delete_education(edu_id: str, user=Depends(get_current_user)):
    data = await profile_service.remove_entry(user, "education", edu_id, "Education")
    return {"success": True, "data": data}

@router.get("/communities")
async def get_joined_communities(user=Depends(get_current_user)):
    data = await profile_service.joined_communities(user)
    return {"success": True, "count": len(data), "data": data}

@router.get("/jobs/applied")
async def get_applied_jobs(user=Depends(get_current_user)):
    data = await profile_service.applied_jobs(user)
    return {"success": True, "count": len(data), "data": data}

@router.get("/jobs/saved")
async def get_saved_jobs(user=Depends(get_current_user)):
    data = await profile_service.saved_jobs(user)
    return {"success": True, "count": len(data), "data": data}
