"""Tests for the direct LLM backend."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from backend import config, llm_client
from backend.errors import BackendError
from backend.models import ChatRequest, ChatTurn


def _fake_llm(*replies):
    llm = MagicMock()
    llm.ainvoke = AsyncMock(side_effect=[SimpleNamespace(content=r) for r in replies])
    return llm


class TestSplitIntoChunks:
    def test_empty(self):
        assert llm_client._split_into_chunks("") == []

    def test_plain_text_is_cut_by_size(self):
        text = "x" * (llm_client.CHUNK_MAX_CHARS + 10)
        chunks = llm_client._split_into_chunks(text)
        assert [len(c) for c in chunks] == [llm_client.CHUNK_MAX_CHARS, 10]

    def test_small_hunks_are_merged(self):
        diff = "--- a.py\n@@ -1 +1 @@\n-a\n+b\n@@ -5 +5 @@\n-c\n+d\n"
        assert llm_client._split_into_chunks(diff) == [diff]

    def test_large_hunks_are_kept_apart(self):
        big = "+" + "y" * (llm_client.CHUNK_MAX_CHARS - 100) + "\n"
        diff = f"@@ -1 +1 @@\n{big}@@ -9 +9 @@\n{big}"
        chunks = llm_client._split_into_chunks(diff)
        assert len(chunks) == 2
        assert all(c.startswith("@@") for c in chunks)


class TestBuildMessages:
    def test_system_prompt_per_mode(self):
        a = llm_client.build_messages("A", [], "q")
        b = llm_client.build_messages("B", [], "q")
        assert a[0] == {"role": "system", "content": llm_client.SYSTEM_CO_REVIEWER}
        assert b[0] == {"role": "system", "content": llm_client.SYSTEM_ASSISTANT}

    def test_query_not_duplicated(self):
        turns = [
            ChatTurn(role="user", content="hi"),
            ChatTurn(role="assistant", content="hello"),
            ChatTurn(role="user", content="what now?"),
        ]
        msgs = llm_client.build_messages("B", turns, "what now?")
        assert [m["content"] for m in msgs[1:]] == ["hi", "hello", "what now?"]

    def test_query_appended(self):
        msgs = llm_client.build_messages("B", [ChatTurn(role="user", content="hi")], "next")
        assert msgs[-1] == {"role": "user", "content": "next"}


class TestBuildLlm:
    def test_prefers_request_key(self, monkeypatch):
        monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-env")
        with patch("backend.llm_client.ChatOpenAI") as chat_openai:
            llm_client.build_llm("sk-user")
        assert chat_openai.call_args.kwargs["api_key"] == "sk-user"
        assert chat_openai.call_args.kwargs["model"] == config.MODEL_NAME

    def test_falls_back_to_env_key(self, monkeypatch):
        monkeypatch.setattr(config, "OPENAI_API_KEY", "sk-env")
        with patch("backend.llm_client.ChatOpenAI") as chat_openai:
            llm_client.build_llm(None)
        assert chat_openai.call_args.kwargs["api_key"] == "sk-env"

    def test_no_key(self, monkeypatch):
        monkeypatch.setattr(config, "OPENAI_API_KEY", None)
        with pytest.raises(BackendError):
            llm_client.build_llm("")


class TestChat:
    @pytest.mark.asyncio
    async def test_interactive_answer(self):
        llm = _fake_llm("  Use a context manager.  ")
        req = ChatRequest(
            mode="B",
            messages=[ChatTurn(role="user", content="How do I close files?")],
            session_id="s-1",
        )
        with patch("backend.llm_client.build_llm", return_value=llm):
            result = await llm_client.chat(req, "How do I close files?")

        assert result == {"content": "Use a context manager.", "session_id": "s-1", "sources": []}
        sent = llm.ainvoke.call_args.args[0]
        assert sent[-1] == {"role": "user", "content": "How do I close files?"}

    @pytest.mark.asyncio
    async def test_new_session_id(self):
        llm = _fake_llm("ok")
        with patch("backend.llm_client.build_llm", return_value=llm):
            result = await llm_client.chat(ChatRequest(mode="B"), "q")
        assert len(result["session_id"]) == 32

    @pytest.mark.asyncio
    async def test_co_review_of_pull_request(self):
        llm = _fake_llm("- partial", "## Summary\n- merged")
        req = ChatRequest(mode="A", selected_project="octo/repo#12")
        with patch("backend.llm_client.build_llm", return_value=llm), patch(
            "backend.llm_client.github_client.get_pr_diff",
            return_value="@@ -1 +1 @@\n-a\n+b\n",
        ) as get_diff:
            result = await llm_client.chat(req, "review it")

        get_diff.assert_called_once_with("octo", "repo", 12)
        assert result["content"] == "## Summary\n- merged"
        assert llm.ainvoke.call_count == 2
        reduce_prompt = llm.ainvoke.call_args.args[0][1]["content"]
        assert "- partial" in reduce_prompt
        assert "review it" in reduce_prompt

    @pytest.mark.asyncio
    async def test_provider_error_is_wrapped(self):
        llm = MagicMock()
        llm.ainvoke = AsyncMock(side_effect=RuntimeError("quota"))
        with patch("backend.llm_client.build_llm", return_value=llm):
            with pytest.raises(BackendError, match="LLM call failed: RuntimeError: quota"):
                await llm_client.chat(ChatRequest(mode="B"), "q")
