# backend/mapping.py
"""
Translate between the UI's chat request and the shapes the upstream
backends speak, and back into a single ChatResponse shape.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from backend.errors import EmptyQueryError, InvalidResponseError
from backend.models import ChatRequest, Source

logger = logging.getLogger(__name__)

INITIAL_REVIEW_PROMPT = (
    "Generate an initial code review summary for this pull request: "
    "intent, main changes, risky areas and suggested follow-ups."
)

_TEXT_KEYS = ("answer", "content", "message", "response")
_SESSION_KEYS = ("session_id", "sessionId")


def api_mode(mode: str) -> str:
    return "co_reviewer" if mode == "A" else "interactive_assistant"


def resolve_query(req: ChatRequest) -> str:
    if req.query and req.query.strip():
        return req.query
    for turn in reversed(req.messages):
        if turn.role == "user" and turn.content.strip():
            return turn.content
    if req.mode == "A":
        return INITIAL_REVIEW_PROMPT
    raise EmptyQueryError("Provide a query or at least one user message.")


def build_rag_request(req: ChatRequest, query: str) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "query": query,
        "pr_id": req.selected_project,
        "mode": api_mode(req.mode),
        "session_id": req.session_id or None,
    }
    if req.participant_id:
        body["participant_id"] = req.participant_id
    return body


def _first_text(data: Dict[str, Any]) -> Optional[str]:
    for key in _TEXT_KEYS:
        value = data.get(key)
        if isinstance(value, str) and value:
            return value
    # OpenAI chat completion
    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        message = choices[0].get("message") if isinstance(choices[0], dict) else None
        if isinstance(message, dict) and message.get("content"):
            return message["content"]
    return None


def _session_id(data: Dict[str, Any]) -> Optional[str]:
    for key in _SESSION_KEYS:
        if data.get(key):
            return str(data[key])
    if data.get("choices") and data.get("id"):
        return str(data["id"])
    return None


def normalize_sources(raw: Any) -> List[Source]:
    if not isinstance(raw, list):
        return []
    sources: List[Source] = []
    for item in raw:
        if isinstance(item, str):
            sources.append(Source(filename=item))
        elif isinstance(item, dict):
            entry = {str(k): v for k, v in item.items() if v is not None}
            for key in ("filename", "text_preview"):
                if key in entry:
                    entry[key] = str(entry[key])
            sources.append(Source(**entry))
        else:
            logger.warning("Dropping unrecognised source entry: %r", item)
    return sources


def normalize_backend_response(data: Any) -> Tuple[str, str, List[Source]]:
    """
    Accepts a RAG answer ({answer, session_id, sources}), a proxy/mock reply
    ({content|message, sessionId}) or an OpenAI chat completion and returns
    (content, session_id, sources).
    """
    if not isinstance(data, dict):
        raise InvalidResponseError(
            "Invalid response format from backend API: Not an object"
        )
    content = _first_text(data)
    session_id = _session_id(data)
    if not content or not session_id:
        logger.error("Backend response missing required properties: %s", data)
        raise InvalidResponseError(
            "Invalid response format from backend API: Missing required properties"
        )
    return content, session_id, normalize_sources(data.get("sources"))


def normalize_projects(data: Any) -> List[Dict[str, str]]:
    items = data.get("projects", []) if isinstance(data, dict) else data
    if not isinstance(items, list):
        return []
    projects = []
    for item in items:
        if isinstance(item, (str, int)):
            projects.append({"id": str(item), "name": str(item)})
        elif isinstance(item, dict):
            pid = item.get("id") or item.get("pr_id")
            if pid is None:
                continue
            name = item.get("name") or item.get("title") or pid
            projects.append({"id": str(pid), "name": str(name)})
    return projects
