"""
API Router - all endpoints.
"""
from fastapi import APIRouter
from app.router.api.v1 import identity, my_posts, posts, profile, schema

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(
    posts.router,
    prefix="/posts",
    tags=["Feed"],
)

api_router.include_router(
    my_posts.router,
    prefix="/my-posts",
    tags=["Posts"],
)

api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["Profile"],
)

api_router.include_router(
    identity.router,
    tags=["Identity"],
)

api_router.include_router(
    schema.router,
    prefix="/schema",
    tags=["Schema"],
)
