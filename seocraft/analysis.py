from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from seocraft import llm_client, llm_parsing, llm_prompts
from seocraft.llm_client import LLMError, LLMUnavailable

log = logging.getLogger(__name__)

ANALYSIS_MAX_TOKENS = 3000
PROCESSING_LOGIC_MAX_TOKENS = 2000
INTENT_MAX_TOKENS = 1500


class AnalysisError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None, raw: Optional[str] = None):
        super().__init__(message)
        self.details = details
        self.raw = raw


class AnalysisInputError(AnalysisError):
    status_code = 400


class AnalysisUpstreamError(AnalysisError):
    pass


class AnalysisParseError(AnalysisError):
    pass


def input_content(value: Any) -> str:
    """Flatten the submitted input: a mapping contributes its `content`, else all values."""
    if value is None:
        return ""
    if isinstance(value, dict):
        content = value.get("content")
        if isinstance(content, str) and content.strip():
            return content
        return " ".join(str(v) for v in value.values() if v is not None and str(v).strip())
    return str(value)


def analyze(tool_type: Optional[str], input_value: Any, tool_config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Send the user's input to the model and return {data, debug}.

    Whatever JSON object comes back is the result; there is no schema.
    """
    if input_value is None or input_value == "" or input_value == {}:
        raise AnalysisInputError("Input is required")
    content = input_content(input_value)
    if not content.strip():
        raise AnalysisInputError("Input content cannot be empty")

    log.info("analyze: toolType=%s input_chars=%d", tool_type, len(content))
    system, user = llm_prompts.analysis_messages(tool_type, content, tool_config)
    try:
        raw = llm_client.chat_json(system, user, max_tokens=ANALYSIS_MAX_TOKENS, temperature=0.7)
    except LLMUnavailable as e:
        raise AnalysisUpstreamError(
            "API key not configured. Please set up your OpenAI API key to use this tool."
        ) from e
    except LLMError as e:
        raise AnalysisUpstreamError(
            f"OpenAI API error: {e}. Please try again with different input.", details=str(e)
        ) from e

    try:
        data = llm_parsing.parse_object(raw)
    except ValueError as e:
        log.warning("analyze: unparseable response err=%s", e)
        snippet = llm_parsing.excerpt(raw)
        raise AnalysisParseError(
            "Failed to parse the response. Please try again with more detailed input.",
            details=snippet,
            raw=snippet,
        ) from e

    return {
        "data": data,
        "debug": {
            "inputLength": len(content),
            "responseLength": len(raw),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        },
    }


def _logic_part(messages: Tuple[str, str], max_tokens: int, parse_error: str) -> Dict[str, Any]:
    system, user = messages
    try:
        raw = llm_client.chat_json(system, user, max_tokens=max_tokens, temperature=0.7)
    except LLMError as e:
        log.warning("generate_logic: call failed err=%s", e)
        return {"error": f"Couldn't generate this part due to {e}"}
    try:
        return llm_parsing.parse_object(raw)
    except ValueError:
        return {"error": parse_error}


def generate_logic(tool_config: Dict[str, Any]) -> Dict[str, Any]:
    """Processing logic and intent analysis for a tool; each half fails on its own."""
    return {
        "processingLogic": _logic_part(
            llm_prompts.processing_logic_messages(tool_config),
            PROCESSING_LOGIC_MAX_TOKENS,
            "Failed to generate processing logic",
        ),
        "intentAnalysis": _logic_part(
            llm_prompts.intent_messages(tool_config),
            INTENT_MAX_TOKENS,
            "Failed to analyze intent",
        ),
    }
