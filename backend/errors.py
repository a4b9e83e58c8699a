# backend/errors.py


class BackendError(Exception):
    """Upstream backend (RAG service or LLM provider) could not answer."""


class InvalidResponseError(BackendError):
    """Upstream answered with a payload we can't map to a chat reply."""


class EmptyQueryError(ValueError):
    """Nothing to ask: no query and no user turn in the history."""
