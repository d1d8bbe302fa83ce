# app/models/community.py
from typing import List, Optional
from pydantic import Field

from app.models.base import ApiModel


class CommunityCreate(ApiModel):
    name: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    tags: List[str] = Field(default_factory=list)
    image: str = ""


class CommunityUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    tags: Optional[List[str]] = None
    image: Optional[str] = None
    is_popular: Optional[bool] = None


class PostCreate(ApiModel):
    title: str = "Post"
    content: str = ""
    images: List[str] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)
    # guest flow: either a claimed user id or just a display name
    user_id: Optional[str] = None
    author_name: Optional[str] = None


class CommentCreate(ApiModel):
    text: str = Field(..., min_length=1)
