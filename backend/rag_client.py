# backend/rag_client.py
import logging
from typing import Any, Dict

import requests

from backend import config
from backend.errors import BackendError, InvalidResponseError

logger = logging.getLogger(__name__)


def query_rag(payload: Dict[str, Any]) -> Any:
    """POST one query to the RAG service. A single attempt, no retries."""
    url = f"{config.RAG_API_URL}/chat"
    logger.info("Sending request to backend API: %s", payload)
    try:
        r = requests.post(url, json=payload, timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise BackendError(
            f"Failed to fetch from backend API: {type(e).__name__}: {e}"
        ) from e

    if not r.ok:
        logger.error("Error from backend API: %s %s %s", r.status_code, r.reason, r.text)
        raise BackendError(f"Failed to fetch from backend API: {r.reason}")

    try:
        data = r.json()
    except ValueError as e:
        raise InvalidResponseError(
            "Invalid response format from backend API: body is not JSON"
        ) from e
    logger.debug("Backend API response received: %.200s", r.text)
    return data


def fetch_projects() -> Any:
    url = f"{config.RAG_API_URL}/projects"
    try:
        r = requests.get(url, timeout=config.REQUEST_TIMEOUT)
    except requests.RequestException as e:
        raise BackendError(f"Failed to fetch projects: {type(e).__name__}: {e}") from e
    if not r.ok:
        raise BackendError(f"Failed to fetch projects: {r.reason}")
    try:
        return r.json()
    except ValueError as e:
        raise InvalidResponseError("Failed to fetch projects: body is not JSON") from e
