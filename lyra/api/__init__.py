"""
API module for LYRA.

Provides REST API endpoints for the chat front end.
"""
from lyra.api.models import (
    StartRequest,
    AnswerRequest,
    ChatResponse,
    SessionResponse,
    ResetRequest,
    ResetResponse,
    CommentRequest,
    CommentResponse,
)

__all__ = [
    "StartRequest",
    "AnswerRequest",
    "ChatResponse",
    "SessionResponse",
    "ResetRequest",
    "ResetResponse",
    "CommentRequest",
    "CommentResponse",
]
