# backend/models.py
from datetime import datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class ChatTurn(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str


class ChatRequest(BaseModel):
    query: Optional[str] = None
    mode: Literal["A", "B"] = "B"
    messages: List[ChatTurn] = []
    selected_project: Optional[str] = None
    session_id: Optional[str] = None
    api_key: Optional[str] = None
    participant_id: Optional[str] = None


class Source(BaseModel):
    """A citation returned by the RAG service; unknown keys are kept."""

    model_config = ConfigDict(extra="allow")

    filename: str = ""
    text_preview: str = ""


class ChatResponse(BaseModel):
    content: str
    timestamp: str = Field(default_factory=utc_timestamp)
    session_id: str
    sources: List[Source] = []


class ErrorResponse(BaseModel):
    error: str
    details: str
