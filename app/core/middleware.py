"""
Session Middleware - attaches the bearer token and any cached identity to each request.
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from app.session import extract_token


class SessionMiddleware(BaseHTTPMiddleware):
    """Loads the cached identity from Redis based on Authorization header."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request.state.token = extract_token(request.headers.get("authorization"))
        request.state.identity = None

        store = getattr(request.app.state, "session_store", None)
        if request.state.token and store is not None:
            request.state.identity = store.get(request.state.token)

        response = await call_next(request)
        return response
