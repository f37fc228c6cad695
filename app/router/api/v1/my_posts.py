"""
Own posts API: list, create, delete (protected).
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from app.core.database import Database, get_db
from app.core.dependencies import get_current_user
from app.core.exceptions import ValidationError
from app.schema.auth import MessageResponse
from app.schema.post import PostCreate, PostCreateResponse, PostListResponse
from app.service.post_service import PostService

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=PostListResponse)
def list_my_posts(
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Posts owned by the caller, newest first."""
    return PostListResponse(posts=PostService(db).list_own(current_user["id"]))


@router.post("", response_model=PostCreateResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    data: PostCreate,
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Create a post. content is required; title and video fields are optional."""
    post = PostService(db).create(current_user["id"], data)
    return PostCreateResponse(post=post)


@router.delete("", response_model=MessageResponse)
def delete_post(
    id: Optional[int] = Query(None, description="Id of the post to delete."),
    current_user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
):
    """Delete one of the caller's posts. Someone else's post is reported as not found."""
    if id is None:
        raise ValidationError("Post ID is required")
    PostService(db).delete(current_user["id"], id)
    return MessageResponse(message="Post deleted successfully")
