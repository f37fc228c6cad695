from app.model.user import User
from app.model.post import Post

__all__ = ["User", "Post"]
