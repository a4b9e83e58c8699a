# frontend/api_client.py
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from frontend.settings_store import UserSettings

logger = logging.getLogger(__name__)

PROXY_URL = os.getenv("ASSISTANT_API_URL", "http://127.0.0.1:8000").rstrip("/")
TIMEOUT = float(os.getenv("ASSISTANT_API_TIMEOUT", "180"))


class ApiError(Exception):
    pass


@dataclass
class ChatReply:
    content: str
    timestamp: str
    session_id: Optional[str] = None
    sources: List[Dict[str, Any]] = field(default_factory=list)


def parse_chat_reply(data: Any) -> ChatReply:
    if not isinstance(data, dict):
        raise ApiError("Unexpected reply from proxy: not an object")
    content = data.get("content") or data.get("message")
    if not content:
        raise ApiError("Unexpected reply from proxy: no content")
    return ChatReply(
        content=content,
        timestamp=data.get("timestamp") or datetime.now().astimezone().isoformat(),
        session_id=data.get("session_id") or data.get("sessionId"),
        sources=data.get("sources") or [],
    )


def send_chat(
    mode: str,
    messages: List[Dict[str, str]],
    settings: UserSettings,
    session_id: Optional[str] = None,
    query: Optional[str] = None,
) -> ChatReply:
    payload = {
        "query": query,
        "mode": mode,
        "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
        "selected_project": settings.selected_project or None,
        "session_id": session_id,
        "api_key": settings.api_key or None,
        "participant_id": settings.participant_id or None,
    }
    try:
        r = requests.post(f"{PROXY_URL}/api/chat", json=payload, timeout=TIMEOUT)
    except requests.RequestException as e:
        raise ApiError(f"Request failed: {e}") from e
    if not r.ok:
        raise ApiError(f"Request failed: {r.status_code} - {r.text}")
    try:
        data = r.json()
    except ValueError as e:
        raise ApiError(f"Unexpected reply from proxy: body is not JSON ({e})") from e
    return parse_chat_reply(data)


def list_projects() -> List[Dict[str, str]]:
    try:
        r = requests.get(f"{PROXY_URL}/api/projects", timeout=TIMEOUT)
        r.raise_for_status()
        return r.json().get("projects", [])
    except (requests.RequestException, ValueError, AttributeError) as e:
        logger.warning("Could not load projects: %s", e)
        return []


def format_time(ts: Optional[str]) -> str:
    """ISO timestamp -> local 24h "HH:MM"."""
    if not ts:
        return ""
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError:
        return ""
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone()
    return parsed.strftime("%H:%M")
