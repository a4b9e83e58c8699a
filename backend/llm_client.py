# backend/llm_client.py
import logging
import re
import uuid
from typing import Dict, List, Optional

from langchain_openai import ChatOpenAI
from starlette.concurrency import run_in_threadpool

from backend import config, github_client
from backend.errors import BackendError
from backend.models import ChatRequest, ChatTurn

logger = logging.getLogger(__name__)

CHUNK_MAX_CHARS = 8_000

SYSTEM_CO_REVIEWER = (
    "You are a senior software reviewer acting as a co-reviewer on a pull request. "
    "Be precise, cite concrete lines/snippets, and focus on actionable suggestions "
    "with minimal changes. Answer in markdown and use fenced code blocks for code."
)

SYSTEM_ASSISTANT = (
    "You are an interactive code review assistant. Answer the developer's questions "
    "about their code clearly and concisely. Answer in markdown and use fenced code "
    "blocks with a language tag for code."
)

MAP_PROMPT = """You will analyze part of a pull request diff.
Return concise bullet points with: [Issue] → [Why it matters] → [Actionable fix].

INPUT CHUNK:
{chunk}
"""

REDUCE_PROMPT = """You will merge multiple partial reviews into a single, non-redundant review.

1) Start with a "## Summary" section of up to 5 bullets: intent, main changes, risky areas, perf risks, tests impact.
2) Then a "## Findings" section grouped by category (Security/Performance/Style),
   each finding with a short title, 1–2 sentences and severity (High/Med/Low).
3) Keep it crisp and actionable.

REQUEST:
{query}

PARTIALS:
{partials}
"""


def _split_into_chunks(s: str) -> List[str]:
    if not s:
        return []
    # Prefer diff hunk boundaries @@ ... @@
    parts = re.split(r"(?=^@@.*@@)", s, flags=re.MULTILINE)
    if len(parts) == 1:
        return [s[i : i + CHUNK_MAX_CHARS] for i in range(0, len(s), CHUNK_MAX_CHARS)]
    chunks, current = [], ""
    for p in parts:
        if current and len(current) + len(p) > CHUNK_MAX_CHARS:
            chunks.append(current)
            current = p
        else:
            current += p
    if current:
        chunks.append(current)
    return chunks


def build_llm(api_key: Optional[str]) -> ChatOpenAI:
    key = api_key or config.OPENAI_API_KEY
    if not key:
        raise BackendError(
            "No OpenAI API key configured (set one in Settings or OPENAI_API_KEY)."
        )
    return ChatOpenAI(model=config.MODEL_NAME, temperature=0.2, api_key=key)


def build_messages(mode: str, turns: List[ChatTurn], query: str) -> List[Dict[str, str]]:
    system = SYSTEM_CO_REVIEWER if mode == "A" else SYSTEM_ASSISTANT
    msgs = [{"role": "system", "content": system}]
    msgs += [{"role": t.role, "content": t.content} for t in turns if t.role != "system"]
    last = msgs[-1]
    if not (last["role"] == "user" and last["content"] == query):
        msgs.append({"role": "user", "content": query})
    return msgs


async def co_review_pr(llm: ChatOpenAI, diff: str, query: str) -> str:
    partials: List[str] = []
    # MAP phase
    for ch in _split_into_chunks(diff) or ["(empty diff)"]:
        msg = [
            {"role": "system", "content": SYSTEM_CO_REVIEWER},
            {"role": "user", "content": MAP_PROMPT.format(chunk=ch)},
        ]
        resp = await llm.ainvoke(msg)
        partials.append(resp.content.strip())

    # REDUCE phase
    merged_msg = [
        {"role": "system", "content": SYSTEM_CO_REVIEWER},
        {
            "role": "user",
            "content": REDUCE_PROMPT.format(
                query=query, partials="\n\n---\n\n".join(partials)
            ),
        },
    ]
    final_resp = await llm.ainvoke(merged_msg)
    return final_resp.content.strip()


async def chat(req: ChatRequest, query: str) -> Dict[str, object]:
    """
    Answer through the LLM provider. Returns a chat-completion-like dict so it
    goes through the same normalization as the RAG service.
    """
    llm = build_llm(req.api_key)
    session_id = req.session_id or uuid.uuid4().hex
    pr_ref = github_client.parse_pr_ref(req.selected_project)

    try:
        if req.mode == "A" and pr_ref and not req.messages:
            logger.info("Co-reviewing pull request %s/%s#%s", *pr_ref)
            diff = await run_in_threadpool(github_client.get_pr_diff, *pr_ref)
            content = await co_review_pr(llm, diff, query)
        else:
            resp = await llm.ainvoke(build_messages(req.mode, req.messages, query))
            content = resp.content.strip()
    except BackendError:
        raise
    except Exception as e:
        # Surface real OpenAI/GitHub errors
        raise BackendError(f"LLM call failed: {type(e).__name__}: {e}") from e

    return {"content": content, "session_id": session_id, "sources": []}
