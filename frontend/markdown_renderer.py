# frontend/markdown_renderer.py
"""
Render assistant replies: fenced code blocks go to ``st.code`` with line
numbers, everything between them goes through ``st.markdown``.
"""
import logging
import re
from dataclasses import dataclass
from typing import List, Optional

import streamlit as st

logger = logging.getLogger(__name__)

# ```lang\n ... ```  (language tag optional, any newline style)
CODE_BLOCK_RE = re.compile(r"```([\w-]*)?(?:\n|\r\n|\r)([\s\S]*?)```")

EMPTY_PLACEHOLDER = "No content to display"


@dataclass
class Segment:
    kind: str  # "markdown" or "code"
    content: str
    language: Optional[str] = None


def split_segments(text: str) -> List[Segment]:
    # re.split with two groups yields [prose, lang, code, prose, lang, code, ..., prose]
    parts = CODE_BLOCK_RE.split(text)
    segments: List[Segment] = []
    for index, part in enumerate(parts):
        if index % 3 == 1:
            continue
        if index % 3 == 2:
            language = (parts[index - 1] or "").strip() or "text"
            segments.append(Segment("code", (part or "").strip(), language))
        elif part and part.strip():
            segments.append(Segment("markdown", part))
    return segments


def render_markdown(text: Optional[str], container=st) -> None:
    if not text:
        container.markdown(EMPTY_PLACEHOLDER)
        return

    try:
        segments = split_segments(text)
    except Exception:
        logger.exception("Error parsing markdown, rendering as a single block")
        container.markdown(text, unsafe_allow_html=True)
        return

    for seg in segments:
        if seg.kind == "code":
            container.caption(seg.language.upper())
            container.code(
                seg.content, language=seg.language, line_numbers=True, wrap_lines=True
            )
        else:
            container.markdown(seg.content, unsafe_allow_html=True)
