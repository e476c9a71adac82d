from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional


def _balanced_json_slice(s: str) -> Optional[str]:
    in_str = False
    esc = False
    depth = 0
    start_idx = -1
    for i, ch in enumerate(s):
        if not in_str and ch == "{":
            if depth == 0:
                start_idx = i
            depth += 1
        elif not in_str and ch == "}":
            if depth > 0:
                depth -= 1
                if depth == 0 and start_idx != -1:
                    return s[start_idx : i + 1]
        elif ch == '"':
            if not esc:
                in_str = not in_str
            esc = False
            continue
        esc = (ch == "\\") and not esc
    return None


def _repair_json_loose(text: str) -> str:
    """Close a truncated object by terminating open strings, arrays and braces."""
    t = (text or "").strip()
    if not t:
        return t
    in_str = False
    esc = False
    stack = []
    for ch in t:
        if ch == '"' and not esc:
            in_str = not in_str
        if not in_str:
            if ch in "{[":
                stack.append(ch)
            elif ch in "}]" and stack:
                stack.pop()
        esc = (ch == "\\") and not esc
    if in_str:
        t += '"'
    t = re.sub(r",\s*$", "", t)
    for opener in reversed(stack):
        t += "}" if opener == "{" else "]"
    return t


def _json_from_text(text: str) -> Any:
    """Extract a JSON value from model output; raise ValueError on failure.

    Strategy:
    - Plain json.loads on the stripped text.
    - Fenced blocks: ```json ...``` first, then any ``` ... ```.
    - First balanced {...} object (brace-aware in presence of strings).
    - Sanitize: remove trailing commas, normalize smart quotes.
    - Close a truncated object (max_tokens cut-off).
    """
    t = (text or "").strip()
    if not t:
        raise ValueError("empty response")
    try:
        return json.loads(t)
    except ValueError:
        pass

    m = re.search(r"```json\s*([\s\S]*?)```", t, re.IGNORECASE)
    candidate = None
    if m:
        candidate = m.group(1)
    else:
        m2 = re.search(r"```\s*([\s\S]*?)```", t)
        if m2:
            candidate = m2.group(1)
    if not candidate:
        candidate = _balanced_json_slice(t)

    if candidate:
        try:
            return json.loads(candidate)
        except ValueError:
            s = re.sub(r",\s*([}\]])", r"\1", candidate)
            s = s.replace("“", '"').replace("”", '"').replace("’", "'")
            try:
                return json.loads(s)
            except ValueError:
                pass

    brace = t.find("{")
    if brace != -1:
        try:
            return json.loads(_repair_json_loose(t[brace:]))
        except ValueError:
            pass
    raise ValueError("No JSON object found in model output")


def parse_object(text: str) -> Dict[str, Any]:
    """Return the JSON object in `text` or raise ValueError."""
    value = _json_from_text(text)
    if not isinstance(value, dict):
        raise ValueError(f"expected a JSON object, got {type(value).__name__}")
    return value


def excerpt(text: str, limit: int = 500) -> str:
    return (text or "")[:limit] + "..."
