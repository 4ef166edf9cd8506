"""
Pydantic models for LYRA API requests and responses.
"""
from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List


class StartRequest(BaseModel):
    """Request model for opening a questionnaire."""
    session_id: Optional[str] = Field(default=None, description="Session ID (auto-generated if not provided)")
    language: Optional[str] = Field(default=None, description="Language tag for commentary, e.g. 'en'")
    intro: Optional[str] = Field(default=None, max_length=500, description="Optional self description typed before the quiz")


class AnswerRequest(BaseModel):
    """Request model for answering the current question."""
    session_id: str = Field(description="Session ID returned by /chat/start")
    option: str = Field(description="Label of the chosen option")


class OptionModel(BaseModel):
    id: str
    label: str


class LinkModel(BaseModel):
    label: str
    href: str


class ResultModel(BaseModel):
    """Recommended class with rationale, tips and links."""
    class_id: Optional[str] = None
    name: Optional[str] = None
    summary: str = ""
    why: List[str] = Field(default_factory=list)
    tips: List[str] = Field(default_factory=list)
    links: List[LinkModel] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Response model for the chat endpoints."""
    response_type: str = Field(description="'question', 'result' or 'no_recommendation'")
    message: str = Field(description="Question text or rendered result")
    session_id: str = Field(description="Session ID")
    comment: Optional[str] = Field(default=None, description="Short remark on the previous answer")

    # Question-specific fields
    question_id: Optional[str] = Field(default=None, description="ID of the question being asked")
    options: Optional[List[OptionModel]] = Field(default=None, description="Selectable options for the question")

    # Result-specific fields
    result: Optional[ResultModel] = Field(default=None, description="Final recommendation")

    question_count: int = Field(default=0, description="Number of questions answered so far")


class SessionResponse(BaseModel):
    """Response model for session state endpoint."""
    session_id: str
    asked: List[str]
    answers: Dict[str, str]
    excluded: List[str]
    scores: Dict[str, int]
    user_language: str
    finished: bool
    current_question_id: Optional[str] = None
    conversation_history: List[Dict[str, str]]


class ResetRequest(BaseModel):
    """Request model for session reset."""
    session_id: Optional[str] = None


class ResetResponse(BaseModel):
    """Response model for session reset."""
    session_id: str
    status: str


class CommentRequest(BaseModel):
    """Request model for a stand-alone commentary call."""
    question: str
    answer: str
    language: str = "en"


class CommentResponse(BaseModel):
    ok: bool
    text: str = ""


class HealthResponse(BaseModel):
    """Response model for health check."""
    status: str
    service: str
    version: str
    config: Dict[str, Any]
