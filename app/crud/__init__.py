from app.crud.user_crud import user_crud
from app.crud.post_crud import post_crud

__all__ = [
    "user_crud",
    "post_crud",
]
