from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

from seocraft import llm_client, llm_parsing, llm_prompts
from seocraft.classifier import classify, preset_config
from seocraft.llm_client import LLMUnavailable
from seocraft.models import TOOL_TYPES, ToolConfig
from seocraft.validators import REQUIRED_COPY, collect_field_errors

log = logging.getLogger(__name__)

SYNTH_MAX_TOKENS = 1500

PLAN_FEATURES: Dict[str, List[str]] = {
    "meta": ["Meta title optimization", "Meta description generation", "SERP preview", "HTML code generation"],
    "blog": ["Content optimization", "Keyword suggestions", "Readability analysis", "Meta description generation"],
    "keyword": ["Keyword discovery", "Search volume estimates", "Competition analysis", "Content recommendations"],
    "local": ["Google Business Profile tips", "Local keyword suggestions", "Citation recommendations", "Review strategy"],
    "ecommerce": ["Product description optimization", "Category page SEO", "Schema markup suggestions", "Technical SEO checks"],
    "general": ["SEO content generation", "Optimization recommendations", "Keyword suggestions", "Content structure guidance"],
}

OPTIONAL_FEATURES = [
    "Google Search Console integration",
    "Export to PDF/CSV",
    "Competitor analysis",
    "Scheduled reports",
    "Multi-language support",
    "Custom branding",
]


class SynthesisError(Exception):
    """The model answered, but not with a usable configuration."""

    def __init__(self, message: str, raw: Optional[str] = None):
        super().__init__(message)
        self.raw = raw


def _offline_allowed() -> bool:
    return os.getenv("ALLOW_OFFLINE_GENERATION", "0").lower() in {"1", "true", "yes", "on"}


def _clean_field(field: Any) -> Any:
    if not isinstance(field, dict):
        return field
    out: Dict[str, Any] = {k: field[k] for k in ("name", "label", "type", "required") if k in field}
    out.setdefault("type", "text")
    if isinstance(field.get("placeholder"), str):
        out["placeholder"] = field["placeholder"]
    opts = field.get("options")
    if isinstance(opts, list):
        # Models often answer with bare strings for select options
        out["options"] = [
            {"label": o, "value": o} if isinstance(o, str)
            else {"label": str(o.get("label")), "value": str(o.get("value"))} if isinstance(o, dict) and "label" in o and "value" in o
            else o
            for o in opts
        ]
    return out


def _coerce_fields(raw_fields: Any) -> Optional[List[Dict[str, Any]]]:
    if not isinstance(raw_fields, list):
        return None
    kept: List[Dict[str, Any]] = []
    for idx, field in enumerate(raw_fields):
        field = _clean_field(field)
        errs = collect_field_errors(field, f"fields[{idx}]")
        if errs:
            log.warning("synthesize: dropping field %d errors=%s", idx, errs)
            continue
        kept.append(field)
    return kept or None


def normalize_config(raw: Dict[str, Any], prompt: str, tag: str) -> ToolConfig:
    """Merge model output over the category preset so every copy field is set."""
    merged: Dict[str, Any] = preset_config(tag, prompt)
    for key in REQUIRED_COPY:
        val = raw.get(key)
        if isinstance(val, str) and val.strip():
            merged[key] = val.strip()
    tool_type = raw.get("toolType")
    merged["toolType"] = tool_type if tool_type in TOOL_TYPES else tag
    fields = _coerce_fields(raw.get("fields"))
    if fields:
        merged["fields"] = fields
    return ToolConfig.model_validate(merged)


def synthesize(prompt: str) -> ToolConfig:
    """Ask the model for a tool configuration, using the classifier tag as a hint.

    Raises ValueError for an empty prompt, SynthesisError when the response is
    not a JSON object, and lets LLMUnavailable/LLMRequestError propagate.
    """
    prompt = (prompt or "").strip()
    if not prompt:
        raise ValueError("Prompt is required")
    tag = classify(prompt)
    log.info("synthesize: tag=%s prompt=%s", tag, prompt[:60])

    system, user = llm_prompts.tool_config_messages(prompt, tag)
    try:
        raw = llm_client.chat_json(system, user, max_tokens=SYNTH_MAX_TOKENS, temperature=0.7)
    except LLMUnavailable:
        if _offline_allowed():
            log.info("synthesize: no LLM credential; serving %s preset", tag)
            return ToolConfig.model_validate(preset_config(tag, prompt))
        raise

    try:
        data = llm_parsing.parse_object(raw)
    except ValueError as e:
        log.warning("synthesize: unparseable response err=%s", e)
        raise SynthesisError("Failed to parse configuration", raw=llm_parsing.excerpt(raw)) from e
    return normalize_config(data, prompt, tag)


def build_plan(config: ToolConfig) -> Dict[str, Any]:
    """Features listed for review before the build starts."""
    return {
        "toolType": config.tool_type,
        "title": config.title,
        "features": list(PLAN_FEATURES.get(config.tool_type, PLAN_FEATURES["general"])),
        "optionalFeatures": list(OPTIONAL_FEATURES),
    }
