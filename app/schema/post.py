"""
Post schemas.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """Body for POST /my-posts. content is checked by PostService so an empty one is a 400."""
    title: Optional[str] = Field(None, max_length=255)
    content: Optional[str] = None
    video_url: Optional[str] = None
    video_description: Optional[str] = None


class PostResponse(BaseModel):
    id: int
    user_id: int
    title: Optional[str] = None
    content: str
    video_url: Optional[str] = None
    video_description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class FeedPostResponse(PostResponse):
    """Public feed item with the author's display fields."""
    author_username: Optional[str] = None
    author_first_name: Optional[str] = None
    author_last_name: Optional[str] = None
    author_avatar_url: Optional[str] = None


class PostListResponse(BaseModel):
    posts: List[PostResponse]


class FeedResponse(BaseModel):
    posts: List[FeedPostResponse]


class PostCreateResponse(BaseModel):
    message: str = "Post created successfully"
    post: PostResponse
