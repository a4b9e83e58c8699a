# backend/config.py
import os

from dotenv import load_dotenv

load_dotenv()

CHAT_BACKEND = os.getenv("CHAT_BACKEND", "rag").lower()
if CHAT_BACKEND not in ("rag", "llm"):
    raise RuntimeError(
        f"Unsupported CHAT_BACKEND={CHAT_BACKEND!r}. Use 'rag' or 'llm' in your .env"
    )

USE_MOCK_API = os.getenv("USE_MOCK_API", "false").lower() == "true"
MOCK_DELAY_SECONDS = float(os.getenv("MOCK_DELAY_SECONDS", "2"))

# RAG service (external retrieval-augmented backend)
RAG_API_URL = os.getenv("RAG_API_URL", "http://localhost:8001").rstrip("/")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "120"))

# Direct LLM
MODEL_NAME = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

GITHUB_TOKEN = os.getenv("GITHUB_TOKEN")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
