"""Markdown SEO write-ups for a prompt, one template per tool type.

The model answers when a provider is configured; otherwise, or when the call
fails, ``mock_seo_content`` fills the tool type's template from the prompt.
"""
from __future__ import annotations

import logging
import os
import re
from datetime import datetime
from typing import Any, Dict, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from seocraft import llm_client, llm_prompts
from seocraft.llm_client import LLMError, LLMUnavailable
from seocraft.models import TOOL_TYPES

log = logging.getLogger(__name__)

SEO_MAX_TOKENS = 1500
STOP_WORDS = {"and", "the", "for", "with", "that", "this", "from", "have", "what"}

_env = Environment(
    loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates", "seo")),
    autoescape=False,
    keep_trailing_newline=True,
    undefined=StrictUndefined,
)


def key_terms(prompt: str, limit: int = 5) -> List[str]:
    words = [w for w in (prompt or "").split() if len(w) > 3 and w.lower() not in STOP_WORDS]
    return words[:limit]


def main_topic(prompt: str) -> str:
    return re.split(r"[.,;?!]", prompt or "", maxsplit=1)[0].strip()


def _context(prompt: str, year: int) -> Dict[str, Any]:
    topic = main_topic(prompt)
    terms = key_terms(prompt)

    def term(i: int, default: Optional[str] = None) -> str:
        return terms[i] if i < len(terms) else (topic if default is None else default)

    return {
        "topic": topic,
        "title_topic": topic[:1].upper() + topic[1:],
        "terms": terms,
        "term": term,
        "slug": re.sub(r"\s+", "-", topic).lower(),
        "file_slug": re.sub(r"\s+", "-", topic),
        "year": year,
    }


def mock_seo_content(prompt: str, tool_type: Optional[str], year: Optional[int] = None) -> str:
    """Fill the tool type's markdown template from the prompt; pure apart from the default year."""
    tool_type = tool_type if tool_type in TOOL_TYPES else "general"
    tpl = _env.get_template(f"{tool_type}.md")
    return tpl.render(**_context(prompt, year or datetime.now().year)).strip()


def generate_seo_content(prompt: str, tool_type: Optional[str] = None) -> Dict[str, Any]:
    """One markdown completion for the prompt, or the template when the model is unavailable.

    Returns {result, source} with source "llm" or "mock". Raises ValueError for
    an empty prompt.
    """
    prompt = (prompt or "").strip()
    if not prompt:
        raise ValueError("Prompt is required")
    tool_type = tool_type or "general"

    system, user = llm_prompts.seo_messages(prompt, tool_type)
    try:
        text = llm_client.chat_text(system, user, max_tokens=SEO_MAX_TOKENS, temperature=0.7)
    except LLMUnavailable:
        log.info("seo: no LLM credential; using %s template", tool_type)
        return {"result": mock_seo_content(prompt, tool_type), "source": "mock"}
    except LLMError as e:
        log.warning("seo: provider error err=%s; using %s template", e, tool_type)
        return {"result": mock_seo_content(prompt, tool_type), "source": "mock"}
    if not text:
        return {"result": mock_seo_content(prompt, tool_type), "source": "mock"}
    return {"result": text, "source": "llm"}
