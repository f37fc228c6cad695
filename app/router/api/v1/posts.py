"""
Public feed.
"""
from fastapi import APIRouter, Depends

from app.core.database import Database, get_db
from app.schema.post import FeedResponse
from app.service.post_service import PostService

router = APIRouter()


@router.get("", response_model=FeedResponse)
def list_posts(db: Database = Depends(get_db)):
    """All posts, newest first, with author display fields. No auth required."""
    return FeedResponse(posts=PostService(db).list_public())
