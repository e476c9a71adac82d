from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional, Tuple

import requests

log = logging.getLogger(__name__)


class LLMError(Exception):
    """Base class for provider failures."""


class LLMUnavailable(LLMError):
    """No provider credential is configured."""


class LLMRequestError(LLMError):
    """Network failure or non-2xx response from the provider."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


# Azure OpenAI deployment (OpenAI-compatible surface)
AZURE_OPENAI_API_KEY = os.getenv("AZURE_OPENAI_API_KEY", "").strip()
AZURE_OPENAI_BASE = os.getenv("AZURE_OPENAI_API_BASE_PATH_GPT4O_MINI", "").strip().rstrip("/")
AZURE_OPENAI_API_VERSION = os.getenv("AZURE_OPENAI_API_VERSION", "2024-02-15-preview").strip()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_ENDPOINT = os.getenv("OPENAI_ENDPOINT", "https://api.openai.com/v1/chat/completions").strip()

LLM_MODEL = os.getenv("LLM_MODEL", "gpt-4o-mini").strip()

# 0 means no client-side deadline
try:
    LLM_TIMEOUT_SECS = float(os.getenv("LLM_TIMEOUT_SECS", "0"))
except ValueError:
    LLM_TIMEOUT_SECS = 0.0


def _provider() -> Optional[Tuple[str, str, Dict[str, str], Dict[str, str]]]:
    """Return (name, url, headers, query params) for the configured provider."""
    if AZURE_OPENAI_API_KEY and AZURE_OPENAI_BASE:
        return (
            "azure",
            f"{AZURE_OPENAI_BASE}/chat/completions",
            {"api-key": AZURE_OPENAI_API_KEY, "Content-Type": "application/json"},
            {"api-version": AZURE_OPENAI_API_VERSION},
        )
    if OPENAI_API_KEY:
        return (
            "openai",
            OPENAI_ENDPOINT,
            {"Authorization": f"Bearer {OPENAI_API_KEY}", "Content-Type": "application/json"},
            {},
        )
    return None


def status() -> Dict[str, Any]:
    provider = _provider()
    if provider is None:
        return {"provider": None, "model": None, "has_token": False, "using": "none"}
    return {"provider": provider[0], "model": LLM_MODEL, "has_token": True, "using": provider[0]}


def probe() -> Dict[str, Any]:
    provider = _provider()
    if provider is None:
        return {"ok": False, "error": "Model or token not configured", "using": "none"}
    return {"ok": True, "using": provider[0]}


def _preview(text: str, n: int = 100) -> str:
    return text[:n] + ("..." if len(text) > n else "")


def _chat(system: str, user: str, max_tokens: int, temperature: float, json_mode: bool) -> str:
    provider = _provider()
    if provider is None:
        raise LLMUnavailable("API key not configured")
    name, url, headers, params = provider

    body = {
        "model": LLM_MODEL,
        "messages": [
            {"role": "system", "content": system},
            {"role": "user", "content": user},
        ],
        "max_tokens": max_tokens,
        "temperature": temperature,
        "n": 1,
    }
    if json_mode:
        body["response_format"] = {"type": "json_object"}
    log.info("llm.call provider=%s model=%s prompt=%s", name, LLM_MODEL, _preview(user))
    timeout = LLM_TIMEOUT_SECS if LLM_TIMEOUT_SECS > 0 else None
    try:
        resp = requests.post(url, headers=headers, params=params or None, json=body, timeout=timeout)
    except requests.RequestException as e:
        log.warning("%s request error: %r", name, e)
        raise LLMRequestError(str(e)) from e

    if resp.status_code != 200:
        log.warning("%s non-200 status=%s body=%s", name, resp.status_code, resp.text[:400])
        raise LLMRequestError(
            f"{resp.status_code} status code ({resp.text[:200]})", status_code=resp.status_code
        )

    try:
        data = resp.json()
    except ValueError as e:
        raise LLMRequestError("provider returned a non-JSON envelope") from e
    choices = data.get("choices") or [{}]
    text = (choices[0].get("message") or {}).get("content") or ""
    log.debug("llm.response provider=%s chars=%d", name, len(text))
    return text.strip()


def chat_json(system: str, user: str, max_tokens: int, temperature: float = 0.7) -> str:
    """Run one JSON-mode chat completion and return the raw message content.

    Parsing is left to the caller. No retries: every failure is raised once.
    """
    return _chat(system, user, max_tokens, temperature, json_mode=True)


def chat_text(system: str, user: str, max_tokens: int, temperature: float = 0.7) -> str:
    """Same round trip as chat_json, without JSON mode (markdown answers)."""
    return _chat(system, user, max_tokens, temperature, json_mode=False)
