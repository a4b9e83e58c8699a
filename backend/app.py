# backend/app.py
import asyncio
import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from backend import config, llm_client, rag_client
from backend.errors import BackendError, EmptyQueryError
from backend.mapping import (
    build_rag_request,
    normalize_backend_response,
    normalize_projects,
    resolve_query,
)
from backend.mock import MOCK_MARKDOWN, MOCK_SESSION_ID
from backend.models import ChatRequest, ChatResponse, ErrorResponse, utc_timestamp

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# --- FastAPI app ---
app = FastAPI(title="Code Review Assistant Proxy")


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    logger.error("Error processing chat request: %s", exc)
    body = ErrorResponse(error="Failed to process request", details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


# --------- Routes ----------
@app.get("/api/health")
def health():
    return {
        "status": "ok",
        "message": "API is operational",
        "timestamp": utc_timestamp(),
    }


@app.get("/api/projects")
def projects():
    try:
        data = rag_client.fetch_projects()
    except BackendError as e:
        logger.error("Error fetching projects: %s", e)
        return JSONResponse(status_code=500, content={"projects": []})
    return {"projects": normalize_projects(data)}


@app.post("/api/chat", response_model=ChatResponse)
async def chat(req: ChatRequest):
    """
    Forward one chat turn to the configured backend:
      - USE_MOCK_API=true: canned markdown reply
      - CHAT_BACKEND=rag: the RAG service's /chat
      - CHAT_BACKEND=llm: a direct chat completion
    """
    logger.info(
        "API route received query=%r project=%r session=%r participant=%r",
        req.query,
        req.selected_project,
        req.session_id,
        req.participant_id,
    )

    if config.USE_MOCK_API:
        logger.info("Using mock API response")
        await asyncio.sleep(config.MOCK_DELAY_SECONDS)
        return ChatResponse(
            content=MOCK_MARKDOWN,
            session_id=req.session_id or MOCK_SESSION_ID,
            sources=[],
        )

    try:
        query = resolve_query(req)
    except EmptyQueryError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if config.CHAT_BACKEND == "llm":
        data = await llm_client.chat(req, query)
    else:
        data = await run_in_threadpool(
            rag_client.query_rag, build_rag_request(req, query)
        )

    content, session_id, sources = normalize_backend_response(data)
    return ChatResponse(content=content, session_id=session_id, sources=sources)
