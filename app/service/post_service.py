"""
Post ownership service.
Every mutation is scoped to the local user id resolved from the caller's identity.
"""
import logging
from typing import List, Optional

from app.core.database import Database
from app.core.exceptions import NotFoundOrForbidden, ValidationError
from app.crud import post_crud
from app.schema.post import FeedPostResponse, PostCreate, PostResponse

logger = logging.getLogger(__name__)


def _none_if_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


class PostService:
    """Public feed, own posts, create and owner-only delete. Posts are never edited."""

    def __init__(self, db: Database):
        self.db = db

    def list_public(self) -> List[FeedPostResponse]:
        return [FeedPostResponse.model_validate(row) for row in post_crud.list_public(self.db)]

    def list_own(self, user_id: int) -> List[PostResponse]:
        return [PostResponse.model_validate(row) for row in post_crud.list_by_user(self.db, user_id=user_id)]

    def create(self, user_id: int, obj_in: PostCreate) -> PostResponse:
        """
        Create a post owned by user_id.

        Optional fields that are missing or blank are stored as NULL.

        Raises:
            ValidationError: content is missing or blank
        """
        if not obj_in.content or not obj_in.content.strip():
            raise ValidationError("Content is required")

        post = post_crud.create_from_dict(
            self.db,
            obj_in={
                "user_id": user_id,
                "title": _none_if_blank(obj_in.title),
                "content": obj_in.content,
                "video_url": _none_if_blank(obj_in.video_url),
                "video_description": _none_if_blank(obj_in.video_description),
            },
        )
        logger.info(f"Post created: id={post['id']}, user_id={user_id}")
        return PostResponse.model_validate(post)

    def delete(self, user_id: int, post_id: int) -> None:
        """
        Delete a post the user owns.

        Raises:
            NotFoundOrForbidden: No such post, or it belongs to someone else
        """
        if not post_crud.delete_by_user_and_id(self.db, user_id=user_id, post_id=post_id):
            raise NotFoundOrForbidden("Post")
        logger.info(f"Post deleted: id={post_id}, user_id={user_id}")
