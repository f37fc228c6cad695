from .session_layer import (
    SessionStore,
    extract_token,
)

__all__ = [
    "SessionStore",
    "extract_token",
]
