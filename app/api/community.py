# app/api/community.py
from typing import Optional

from fastapi import APIRouter, Body, Depends

from app.api.deps import get_current_user, get_optional_user, resolve_actor
from app.models.base import ActorClaim
from app.models.community import CommunityCreate, CommunityUpdate, PostCreate, CommentCreate
from app.services import community as community_service

router = APIRouter(prefix="/community", tags=["Community"])


def _claimed(claim: Optional[ActorClaim]) -> Optional[str]:
    return claim.user_id if claim else None


@router.get("")
async def list_communities():
    data = await community_service.list_communities()
    return {"success": True, "count": len(data), "data": data}

@router.post("", status_code=201)
async def create_community(payload: CommunityCreate, user=Depends(get_current_user)):
    data = await community_service.create_community(payload, user)
    return {"success": True, "data": data}

@router.get("/{community_id}")
async def get_community(community_id: str):
    data = await community_service.get_community(community_id)
    return {"success": True, "data": data}

@router.put("/{community_id}")
async def update_community(community_id: str, payload: CommunityUpdate, user=Depends(get_current_user)):
    data = await community_service.update_community(community_id, payload, user)
    return {"success": True, "data": data}

@router.put("/{community_id}/join")
async def join_community(
    community_id: str,
    claim: Optional[ActorClaim] = Body(None),
    user=Depends(get_optional_user),
):
    actor = await resolve_actor(user, _claimed(claim), strict=True)
    message, data = await community_service.join_community(community_id, actor)
    return {"success": True, "message": message, "data": data}

@router.put("/{community_id}/leave")
async def leave_community(
    community_id: str,
    claim: Optional[ActorClaim] = Body(None),
    user=Depends(get_optional_user),
):
    actor = await resolve_actor(user, _claimed(claim), strict=True)
    message, data = await community_service.leave_community(community_id, actor)
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return body

@router.put("/{community_id}/notifications")
async def toggle_notifications(community_id: str, user=Depends(get_current_user)):
    enabled = await community_service.toggle_notifications(community_id, user)
    message = "Notifications enabled" if enabled else "Notifications disabled"
    return {"success": True, "message": message, "enabled": enabled}

@router.get("/{community_id}/posts")
async def get_community_posts(community_id: str):
    data = await community_service.list_posts(community_id)
    return {"success": True, "count": len(data), "data": data}

@router.post("/{community_id}/posts", status_code=201)
async def create_post(community_id: str, payload: PostCreate, user=Depends(get_optional_user)):
    # unknown or malformed claimed ids fall back to an anonymous post
    actor = await resolve_actor(user, payload.user_id, strict=False)
    data = await community_service.create_post(community_id, payload, actor)
    return {"success": True, "data": data}

@router.post("/posts/{post_id}/like")
async def like_post(post_id: str, claim: Optional[ActorClaim] = Body(None), user=Depends(get_optional_user)):
    actor = await resolve_actor(user, _claimed(claim), strict=False)
    post = await community_service.like_post(post_id, actor)
    if post is None:
        return {"success": False, "message": "Authentication required to like posts"}
    return {"success": True, "message": "Post liked successfully", "likeCount": post["likeCount"], "data": post}

@router.delete("/posts/{post_id}/like")
async def unlike_post(post_id: str, claim: Optional[ActorClaim] = Body(None), user=Depends(get_optional_user)):
    actor = await resolve_actor(user, _claimed(claim), strict=False)
    post = await community_service.unlike_post(post_id, actor)
    if post is None:
        return {"success": False, "message": "Authentication required to unlike posts"}
    return {"success": True, "message": "Post unliked successfully", "likeCount": post["likeCount"], "data": post}

@router.post("/posts/{post_id}/comments", status_code=201)
async def add_comment(post_id: str, payload: CommentCreate, user=Depends(get_current_user)):
    data = await community_service.add_comment(post_id, payload.text, user)
    return {"success": True, "count": len(data), "data": data}

@router.delete("/posts/{post_id}")
async def delete_post(post_id: str, user=Depends(get_current_user)):
    await community_service.delete_post(post_id, user)
    return {"success": True, "message": "Post deleted successfully"}
