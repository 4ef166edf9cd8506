"""
FastAPI server for LYRA.

Provides REST API endpoints for the chat front end.

Usage:
    python -m lyra.api.server
    # or
    uvicorn lyra.api.server:app --reload --port 8000
"""
import os
import traceback
import uuid
import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()

from lyra import __version__
from lyra.api.models import (
    StartRequest,
    AnswerRequest,
    ChatResponse,
    SessionResponse,
    ResetRequest,
    ResetResponse,
    CommentRequest,
    CommentResponse,
    HealthResponse,
)
from lyra.core.config import get_config
from lyra.core.controller import LyraController, LyraResponse, create_controller
from lyra.core.errors import (
    CatalogError,
    InvalidOptionError,
    NoActiveQuestionError,
    SessionFinishedError,
)
from lyra.data.catalog import get_catalog
from lyra.interview.commentary import Commentator
from lyra.utils.logger import get_logger, set_log_level
from lyra.utils.webhook import WebhookLogger, close_webhook_loggers, get_webhook_logger

logger = get_logger("api.server")

# Conversation logging for production
CONVERSATION_LOG_DIR = Path(os.getenv("CONVERSATION_LOG_DIR", "logs/sessions"))


def log_conversation(session_id: str, event: str, response: LyraResponse, user_message: Optional[str] = None):
    """Log one turn to a per-session JSONL file."""
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "event": event,
        "user_message": user_message,
        "response_type": response.response_type,
        "question_id": response.question_id,
        "comment": response.comment,
        "question_count": response.question_count,
    }
    if response.result:
        log_entry["result_class_id"] = response.result.get("class_id")

    try:
        CONVERSATION_LOG_DIR.mkdir(parents=True, exist_ok=True)
        with open(CONVERSATION_LOG_DIR / f"{session_id}.jsonl", "a") as f:
            f.write(json.dumps(log_entry) + "\n")
    except Exception as e:
        logger.error(f"Failed to write conversation log: {e}")

    logger.info(f"CONVERSATION [{session_id}]: {json.dumps(log_entry)}")


# Initialize FastAPI app
app = FastAPI(
    title="LYRA API",
    description="Adaptive class-matching questionnaire",
    version=__version__,
)


@app.on_event("startup")
async def startup_event():
    """Load the catalog once so the first request is not slow and bad data fails fast."""
    if get_config().log_level:
        set_log_level(get_config().log_level)
    if os.environ.get("LYRA_SKIP_PRELOAD", "").lower() in ("1", "true", "yes"):
        logger.info("Catalog preload SKIPPED (LYRA_SKIP_PRELOAD=1)")
        return
    catalog = get_catalog()
    logger.info(f"Catalog ready: {catalog.counts()}")


@app.on_event("shutdown")
async def shutdown_event():
    """Flush pending analytics events before the process exits."""
    global _analytics
    close_webhook_loggers()
    _analytics = None


# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Session storage: session_id -> LyraController
sessions: Dict[str, LyraController] = {}

# Side channels shared by every session
_commentator: Optional[Commentator] = None
_analytics: Optional[WebhookLogger] = None


def get_commentator() -> Commentator:
    global _commentator
    if _commentator is None:
        _commentator = Commentator(get_config())
    return _commentator


def get_analytics() -> WebhookLogger:
    global _analytics
    if _analytics is None:
        config = get_config()
        _analytics = get_webhook_logger(
            url=config.webhook_url or get_catalog().webhook_url,
            timeout=config.webhook_timeout_seconds,
        )
    return _analytics


def new_controller() -> LyraController:
    return create_controller(
        catalog=get_catalog(),
        config=get_config(),
        commentator=get_commentator(),
        analytics=get_analytics(),
    )


def get_or_create_session(session_id: Optional[str] = None) -> tuple[str, LyraController]:
    """Get existing session or create a new one."""
    if session_id and session_id in sessions:
        return session_id, sessions[session_id]

    new_session_id = session_id or str(uuid.uuid4())
    sessions[new_session_id] = new_controller()
    logger.info(f"Created new session: {new_session_id}")
    return new_session_id, sessions[new_session_id]


def to_chat_response(session_id: str, response: LyraResponse) -> ChatResponse:
    return ChatResponse(
        response_type=response.response_type,
        message=response.message,
        session_id=session_id,
        comment=response.comment,
        question_id=response.question_id,
        options=response.options,
        result=response.result,
        question_count=response.question_count,
    )


# API Endpoints

@app.get("/", response_model=HealthResponse)
async def root():
    """Health check endpoint."""
    config = get_config()
    return HealthResponse(
        status="online",
        service="LYRA API",
        version=__version__,
        config={
            "max_questions": config.max_questions,
            "min_lead": config.min_lead,
            "max_alive": config.max_alive,
            "commentary_enabled": config.commentary_enabled,
        }
    )


@app.post("/chat/start", response_model=ChatResponse)
def chat_start(request: StartRequest):
    """
    Open a questionnaire and return its first question.

    Calling it again for an active session returns the current question.
    """
    try:
        session_id, controller = get_or_create_session(request.session_id)
        response = controller.start(language=request.language, intro=request.intro)
        log_conversation(session_id, "start", response, user_message=request.intro)
        return to_chat_response(session_id, response)

    except CatalogError as e:
        logger.error(f"Catalog unavailable: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"Error in /chat/start: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/chat/answer", response_model=ChatResponse)
def chat_answer(request: AnswerRequest):
    """
    Answer the current question.

    Returns the next question, or the result once the questionnaire stops.
    """
    controller = sessions.get(request.session_id)
    if controller is None:
        raise HTTPException(status_code=404, detail="Session not found")

    try:
        response = controller.answer(request.option)
        log_conversation(request.session_id, "answer", response, user_message=request.option)
        return to_chat_response(request.session_id, response)

    except InvalidOptionError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (SessionFinishedError, NoActiveQuestionError) as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        logger.error(f"Error in /chat/answer: {e}\n{traceback.format_exc()}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/session/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str):
    """Get current session state."""
    if session_id not in sessions:
        raise HTTPException(status_code=404, detail="Session not found")

    controller = sessions[session_id]
    state = controller.session.snapshot()

    return SessionResponse(
        session_id=session_id,
        asked=state["asked"],
        answers=state["answers"],
        excluded=state["excluded"],
        scores=state["scores"],
        user_language=state["user_language"],
        finished=controller.finished,
        current_question_id=controller.current_question.id if controller.current_question else None,
        conversation_history=controller.history,
    )


@app.post("/session/reset", response_model=ResetResponse)
async def reset_session(request: ResetRequest):
    """Reset session or create new one."""
    session_id = request.session_id or str(uuid.uuid4())

    if session_id in sessions:
        sessions[session_id].reset()
    else:
        sessions[session_id] = new_controller()
    logger.info(f"Reset session: {session_id}")

    return ResetResponse(
        session_id=session_id,
        status="reset"
    )


@app.delete("/session/{session_id}")
async def delete_session(session_id: str):
    """Delete a session."""
    if session_id in sessions:
        del sessions[session_id]
        logger.info(f"Deleted session: {session_id}")
        return {"status": "deleted", "session_id": session_id}
    raise HTTPException(status_code=404, detail="Session not found")


@app.get("/sessions")
async def list_sessions():
    """List all active sessions."""
    return {
        "active_sessions": len(sessions),
        "session_ids": list(sessions.keys())
    }


@app.get("/status")
async def get_status():
    """Get server status including catalog counts."""
    config = get_config()
    try:
        catalog_counts = get_catalog().counts()
    except CatalogError as e:
        catalog_counts = {"error": str(e)}
    return {
        "status": "online",
        "config": {
            "max_questions": config.max_questions,
            "min_lead": config.min_lead,
            "max_alive": config.max_alive,
            "catalog_dir": config.catalog_dir,
        },
        "catalog": catalog_counts,
        "active_sessions": len(sessions),
    }


@app.post("/comment", response_model=CommentResponse)
def comment(request: CommentRequest):
    """
    One-off commentary on a question/answer pair.

    Never fails: an unavailable model yields ok=false.
    """
    text = get_commentator().comment(request.question, request.answer, request.language)
    if text is None:
        return CommentResponse(ok=False)
    return CommentResponse(ok=True, text=text)


if __name__ == "__main__":
    import uvicorn

    print("=" * 60)
    print("LYRA API Server")
    print("=" * 60)
    print("API Documentation: http://localhost:8000/docs")
    print("Status endpoint:   http://localhost:8000/status")
    print("")
    print("Environment variables:")
    print("  LYRA_DATA_DIR=...     - Catalog directory (questions.json, effects.json, ...)")
    print("  LYRA_WEBHOOK_URL=...  - Analytics webhook")
    print("  LYRA_SKIP_PRELOAD=1   - Load the catalog on first request instead of at startup")
    print("=" * 60)

    uvicorn.run(app, host="0.0.0.0", port=8000)
