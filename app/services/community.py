# app/services/community.py
"""
Community, membership and post operations.

Membership lives on both sides: ``community.members``/``moderators`` and the
user's ``joinedCommunities``/``notifiedCommunities``. Every join/leave writes
the community first and the user second; if the second write fails the first
one is undone before the error propagates. There is no storage transaction,
so concurrent requests can still interleave between the two writes.
"""
import logging
from typing import Optional, List, Dict, Any, Tuple, Type

from bson import ObjectId

from app.core.errors import (
    AppError, AlreadyLiked, DuplicateResource, Forbidden, LastModeratorConstraint,
    NotAMember, NotFound, NotLiked, ValidationFailed,
)
from app.db.mongo import clean, find_by_ids, to_object_id, POSTS
from app.models.community import CommunityCreate, CommunityUpdate, PostCreate
from app.repositories import communities as communities_repo
from app.repositories import posts as posts_repo
from app.repositories import users as users_repo
from app.utils.dates import utcnow

logger = logging.getLogger(__name__)

ANONYMOUS_AUTHOR = "Anonymous User"

Doc = Dict[str, Any]


async def _require_community(community_id: str, malformed: Type[AppError] = NotFound) -> Doc:
    oid = to_object_id(community_id)
    if oid is None:
        if malformed is ValidationFailed:
            raise ValidationFailed("Invalid community ID format", error={"provided_id": community_id})
        raise NotFound("Community not found")
    community = await communities_repo.get_community(oid)
    if not community:
        raise NotFound("Community not found", error={"community_id": community_id})
    return community

async def _require_post(post_id: str) -> Doc:
    oid = to_object_id(post_id)
    post = await posts_repo.get_post(oid) if oid else None
    if not post:
        raise NotFound("Post not found")
    return post


def community_view(community: Doc) -> Doc:
    out = clean(community)
    out["memberCount"] = len(community.get("members") or [])
    return out

def community_summary(community: Doc) -> Doc:
    return {
        "id": str(community["_id"]),
        "name": community.get("name"),
        "description": community.get("description"),
        "memberCount": len(community.get("members") or []),
    }

def post_view(post: Doc, authors: Optional[Dict[ObjectId, Doc]] = None) -> Doc:
    out = clean(post)
    out["likeCount"] = len(post.get("likes") or [])
    out["commentCount"] = len(post.get("comments") or [])
    author_id = post.get("author")
    if authors and author_id in authors:
        out["author"] = clean(authors[author_id])
    return out

async def _post_views(posts: List[Doc]) -> List[Doc]:
    ids = [p.get("author") for p in posts]
    for p in posts:
        ids.extend(c.get("user") for c in p.get("comments") or [])
    people = await users_repo.summaries(ids)
    views = []
    for p in posts:
        view = post_view(p, people)
        for comment in view.get("comments") or []:
            uid = to_object_id(comment.get("user"))
            if uid in people:
                comment["user"] = clean(people[uid])
        views.append(view)
    return views


async def list_communities() -> List[Doc]:
    communities = await communities_repo.list_communities()
    people = await users_repo.summaries(m for c in communities for m in c.get("members") or [])
    out = []
    for c in communities:
        view = community_view(c)
        view["members"] = [clean(people[m]) for m in c.get("members") or [] if m in people]
        out.append(view)
    return out

async def get_community(community_id: str) -> Doc:
    community = await _require_community(community_id)
    people = await users_repo.summaries(
        list(community.get("members") or []) + list(community.get("moderators") or [])
    )
    view = community_view(community)
    view["members"] = [clean(people[m]) for m in community.get("members") or [] if m in people]
    view["moderators"] = [clean(people[m]) for m in community.get("moderators") or [] if m in people]
    order = list(community.get("posts") or [])
    found = {p["_id"]: p for p in await find_by_ids(POSTS, order)}
    posts = [found[pid] for pid in order if pid in found]
    view["posts"] = await _post_views(posts)
    return view

async def create_community(payload: CommunityCreate, user: Doc) -> Doc:
    if await communities_repo.find_by_name(payload.name):
        raise DuplicateResource("A community with this name already exists")
    community = await communities_repo.create_community(payload.to_document(), user["_id"])
    await users_repo.add_to_sets(
        user["_id"],
        {"joinedCommunities": community["_id"], "notifiedCommunities": community["_id"]},
    )
    logger.info("User %s created community %s", user["_id"], community["_id"])
    return community_view(community)

async def update_community(community_id: str, payload: CommunityUpdate, user: Doc) -> Doc:
    community = await _require_community(community_id)
    if user["_id"] not in (community.get("moderators") or []):
        raise Forbidden("Not authorized to update this community")
    fields = payload.to_document(exclude_none=True)
    if "name" in fields and await communities_repo.find_by_name(fields["name"], exclude_id=community["_id"]):
        raise DuplicateResource("A community with this name already exists")
    updated = await communities_repo.update_fields(community["_id"], fields)
    return community_view(updated)


async def _add_membership(community_id: ObjectId, user_id: ObjectId) -> None:
    await communities_repo.add_member(community_id, user_id)
    try:
        # notifications default to on for new members
        await users_repo.add_to_sets(
            user_id, {"joinedCommunities": community_id, "notifiedCommunities": community_id}
        )
    except Exception:
        logger.exception("Join of %s to %s failed on user side; rolling back", user_id, community_id)
        await communities_repo.remove_member(community_id, user_id)
        raise

async def join_community(community_id: str, actor: Optional[Doc]) -> Tuple[str, Doc]:
    community = await _require_community(community_id, malformed=ValidationFailed)
    if actor is None:
        return "Authentication required to join community", community_summary(community)

    user_id = actor["_id"]
    if user_id in (community.get("members") or []):
        return "Already a member", community_view(community)

    await _add_membership(community["_id"], user_id)
    logger.info("User %s joined community %s", user_id, community["_id"])
    community = await communities_repo.get_community(community["_id"])
    return "Joined community successfully", community_view(community)

async def leave_community(community_id: str, actor: Optional[Doc]) -> Tuple[str, Optional[Doc]]:
    community = await _require_community(community_id, malformed=ValidationFailed)
    if actor is None:
        return "Authentication required to leave community", community_summary(community)

    user_id = actor["_id"]
    members = community.get("members") or []
    moderators = community.get("moderators") or []
    if user_id not in members:
        raise NotAMember()
    is_moderator = user_id in moderators
    if is_moderator and len(moderators) == 1 and len(members) > 1:
        raise LastModeratorConstraint()

    await communities_repo.remove_member(community["_id"], user_id)
    try:
        await users_repo.pull_from_sets(
            user_id, {"joinedCommunities": community["_id"], "notifiedCommunities": community["_id"]}
        )
    except Exception:
        logger.exception("Leave of %s from %s failed on user side; rolling back", user_id, community["_id"])
        await communities_repo.restore_member(community["_id"], user_id, moderator=is_moderator)
        raise
    logger.info("User %s left community %s", user_id, community["_id"])
    return "Left community successfully", None

async def toggle_notifications(community_id: str, user: Doc) -> bool:
    """Flip the user's notification subscription; returns the new state."""
    community = await _require_community(community_id)
    if user["_id"] not in (community.get("members") or []):
        raise NotAMember()
    fresh = await users_repo.get_user(user["_id"]) or user
    if community["_id"] in (fresh.get("notifiedCommunities") or []):
        await users_repo.pull_from_sets(user["_id"], {"notifiedCommunities": community["_id"]})
        return False
    await users_repo.add_to_sets(user["_id"], {"notifiedCommunities": community["_id"]})
    return True


async def create_post(community_id: str, payload: PostCreate, actor: Optional[Doc]) -> Doc:
    community = await _require_community(community_id)

    if actor is not None:
        author = actor["_id"]
        author_name = payload.author_name or actor.get("name") or ANONYMOUS_AUTHOR
        # posting makes the author a member
        if author not in (community.get("members") or []):
            await _add_membership(community["_id"], author)
            logger.info("User %s auto-joined community %s by posting", author, community["_id"])
    else:
        author = None
        author_name = payload.author_name or ANONYMOUS_AUTHOR

    doc = {
        "title": payload.title or "Post",
        "content": payload.content,
        "images": payload.images,
        "tags": payload.tags,
        "community": community["_id"],
        "authorName": author_name,
    }
    if author is not None:
        doc["author"] = author
    post = await posts_repo.create_post(doc)
    await communities_repo.add_post(community["_id"], post["_id"])
    views = await _post_views([post])
    return views[0]

async def list_posts(community_id: str) -> List[Doc]:
    community = await _require_community(community_id)
    posts = await posts_repo.list_for_community(community["_id"])
    return await _post_views(posts)

async def like_post(post_id: str, actor: Optional[Doc]) -> Optional[Doc]:
    post = await _require_post(post_id)
    if actor is None:
        return None
    if actor["_id"] in (post.get("likes") or []):
        raise AlreadyLiked()
    updated = await posts_repo.add_like(post["_id"], actor["_id"])
    return post_view(updated)

async def unlike_post(post_id: str, actor: Optional[Doc]) -> Optional[Doc]:
    post = await _require_post(post_id)
    if actor is None:
        return None
    if actor["_id"] not in (post.get("likes") or []):
        raise NotLiked()
    updated = await posts_repo.remove_like(post["_id"], actor["_id"])
    return post_view(updated)

async def add_comment(post_id: str, text: str, user: Doc) -> List[Doc]:
    post = await _require_post(post_id)
    comment = {"_id": ObjectId(), "user": user["_id"], "text": text, "createdAt": utcnow()}
    updated = await posts_repo.push_comment(post["_id"], comment)
    views = await _post_views([updated])
    return views[0]["comments"]

async def delete_post(post_id: str, user: Doc) -> None:
    post = await _require_post(post_id)
    authorized = post.get("author") is not None and post.get("author") == user["_id"]
    if not authorized:
        community = await communities_repo.get_community(post.get("community"))
        if community and (
            user["_id"] in (community.get("moderators") or [])
            or community.get("createdBy") == user["_id"]
        ):
            authorized = True
    if not authorized:
        raise Forbidden(
            "Not authorized to delete this post. Only the author or community moderators can delete posts."
        )
    if post.get("community"):
        await communities_repo.pull_post(post["community"], post["_id"])
    await posts_repo.delete_post(post["_id"])
    logger.info("Post %s deleted by %s", post["_id"], user["_id"])
