"""Classification pass over schema-less analysis results.

Every JSON value is turned into a node ``{"type", "title", "props"}`` whose
``type`` names the partial template that draws it. The shape of a value is
decided by ``SHAPE_RULES``, tried in order; the first predicate that matches
wins. The radar (3-8 numeric keys) and pie (2-6 numeric keys) ranges overlap
and radar is listed first, so a pie is only produced for exactly two keys.
"""
from __future__ import annotations

import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

HEADLINE_KEYS = ("score", "rating", "overallScore")
SUBSCORE_KEYS = ("score", "rating")
BUSINESS_IDEA_KEYS = ("demographics", "psychographics", "mainCompetitors", "primaryStreams")
MAX_DEPTH = 6

PIE_COLOURS = ("#3B82F6", "#10B981", "#F59E0B", "#EC4899", "#8B5CF6", "#14B8A6")


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def humanize(key: Any) -> str:
    """camelCase / snake_case key -> "Title Case" label."""
    text = str(key or "")
    text = re.sub(r"[_\-]+", " ", text)
    text = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", text)
    return " ".join(w[:1].upper() + w[1:] for w in text.split())


def _numeric_map(value: Any) -> bool:
    return isinstance(value, dict) and bool(value) and all(is_number(v) for v in value.values())


def _is_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


def _is_list(value: Any) -> bool:
    return isinstance(value, list)


def _is_radar(value: Any) -> bool:
    return _numeric_map(value) and 3 <= len(value) <= 8


def _is_pie(value: Any) -> bool:
    return _numeric_map(value) and 2 <= len(value) <= 6


def _is_heatmap(value: Any) -> bool:
    return _numeric_map(value) and len(value) > 8


def _is_object(value: Any) -> bool:
    return isinstance(value, dict)


SHAPE_RULES: List[Tuple[str, Callable[[Any], bool]]] = [
    ("checklist", _is_string_list),
    ("cards", _is_list),
    ("radar", _is_radar),
    ("pie", _is_pie),
    ("heatmap", _is_heatmap),
    ("section", _is_object),
]


def shape_of(value: Any) -> str:
    for name, matches in SHAPE_RULES:
        if matches(value):
            return name
    return "scalar"


def _fmt(value: Any) -> str:
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if value is None:
        return "-"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _bars(values: Dict[str, Any]) -> List[Dict[str, Any]]:
    top = max((abs(v) for v in values.values()), default=0) or 1
    return [
        {"key": k, "label": humanize(k), "value": v, "display": _fmt(v), "percent": round(abs(v) / top * 100, 1)}
        for k, v in values.items()
    ]


def scalar_node(key: Any, value: Any) -> Dict[str, Any]:
    gauge = is_number(value) and 0 <= value <= 100
    if isinstance(value, bool):
        kind = "boolean"
    elif is_number(value):
        kind = "number"
    elif value is None:
        kind = "null"
    else:
        kind = "string"
    return {
        "type": "scalar",
        "title": humanize(key) if key is not None else "",
        "props": {"value": value, "display": _fmt(value), "kind": kind, "gauge": gauge},
    }


def _card(element: Any, depth: int) -> Dict[str, Any]:
    if isinstance(element, dict):
        return {"entries": [classify_value(k, v, depth + 1) for k, v in element.items()]}
    return {"entries": [classify_value(None, element, depth + 1)]}


def classify_value(key: Any, value: Any, depth: int = 0) -> Dict[str, Any]:
    """Node for one value, dispatched on its runtime shape."""
    title = humanize(key) if key is not None else ""
    if depth >= MAX_DEPTH and isinstance(value, (dict, list)):
        return scalar_node(key, _fmt(value))

    shape = shape_of(value)
    if shape == "checklist":
        return {"type": "checklist", "title": title, "props": {"items": list(value)}}
    if shape == "cards":
        return {"type": "cards", "title": title, "props": {"cards": [_card(el, depth) for el in value]}}
    if shape == "radar":
        return {"type": "radar", "title": title, "props": {"series": _bars(value)}}
    if shape == "pie":
        total = sum(v for v in value.values() if v > 0) or 1
        slices = []
        start = 0.0
        for i, (k, v) in enumerate(value.items()):
            share = max(v, 0) / total * 100
            slices.append({
                "key": k,
                "label": humanize(k),
                "value": v,
                "display": _fmt(v),
                "share": round(share, 1),
                "start": round(start, 2),
                "end": round(start + share, 2),
                "colour": PIE_COLOURS[i % len(PIE_COLOURS)],
            })
            start += share
        return {"type": "pie", "title": title, "props": {"slices": slices}}
    if shape == "heatmap":
        top = max(abs(v) for v in value.values()) or 1
        cells = [
            {"key": k, "label": humanize(k), "display": _fmt(v), "intensity": round(abs(v) / top, 3)}
            for k, v in value.items()
        ]
        return {"type": "heatmap", "title": title, "props": {"cells": cells}}
    if shape == "section":
        score_key = next((k for k in SUBSCORE_KEYS if is_number(value.get(k))), None)
        score = value[score_key] if score_key else None
        children = [classify_value(k, v, depth + 1) for k, v in value.items() if k != score_key]
        return {
            "type": "section",
            "title": title,
            "props": {
                "score": score,
                "score_label": humanize(score_key) if score_key else None,
                "score_percent": max(0.0, min(float(score), 100.0)) if score is not None else None,
                "children": children,
            },
        }
    return scalar_node(key, value)


def _collect_keys(value: Any, depth: int = 0, max_depth: int = 3) -> set:
    keys: set = set()
    if isinstance(value, dict) and depth <= max_depth:
        for k, v in value.items():
            keys.add(k)
            keys |= _collect_keys(v, depth + 1, max_depth)
    return keys


def is_business_idea(result: Any) -> bool:
    return isinstance(result, dict) and set(BUSINESS_IDEA_KEYS) <= _collect_keys(result)


def _find(value: Any, *keys: str) -> Any:
    """Breadth-first lookup of the first key present anywhere in nested objects."""
    queue = [value]
    while queue:
        current = queue.pop(0)
        if not isinstance(current, dict):
            continue
        for key in keys:
            if key in current:
                return current[key]
        queue.extend(v for v in current.values() if isinstance(v, dict))
    return None


def _as_items(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, dict):
        return [f"{humanize(k)}: {_fmt(v)}" for k, v in value.items()]
    if isinstance(value, list):
        out = []
        for item in value:
            if isinstance(item, dict):
                out.append(" - ".join(_fmt(v) for v in item.values()))
            else:
                out.append(_fmt(item))
        return out
    return [_fmt(value)]


def _as_text_list(value: Any) -> List[str]:
    if isinstance(value, list):
        return [_fmt(v) for v in value]
    if isinstance(value, str) and value.strip():
        return [value]
    return []


def _amount(value: Any) -> Optional[float]:
    if is_number(value):
        return float(value)
    if isinstance(value, str):
        cleaned = re.sub(r"[^0-9.\-]", "", value)
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def _competitors(value: Any) -> List[Dict[str, Any]]:
    out = []
    for item in value if isinstance(value, list) else [value]:
        if isinstance(item, dict):
            name = item.get("name") or item.get("competitor") or item.get("title") or "Competitor"
            out.append({
                "name": _fmt(name),
                "strengths": _as_text_list(item.get("strengths")),
                "weaknesses": _as_text_list(item.get("weaknesses")),
            })
        elif item is not None:
            out.append({"name": _fmt(item), "strengths": [], "weaknesses": []})
    return out


def _projections(value: Any) -> List[Dict[str, Any]]:
    points: List[Tuple[str, float]] = []
    if isinstance(value, dict):
        for year, amount in value.items():
            num = _amount(amount)
            if num is not None:
                points.append((str(year), num))
    elif isinstance(value, list):
        for item in value:
            if not isinstance(item, dict):
                continue
            year = item.get("year") or item.get("period") or item.get("label")
            num = _amount(item.get("amount", item.get("revenue", item.get("value"))))
            if year is not None and num is not None:
                points.append((str(year), num))
    top = max((abs(a) for _, a in points), default=0) or 1
    return [
        {"label": humanize(y), "value": a, "display": f"{a:,.0f}", "percent": round(abs(a) / top * 100, 1)}
        for y, a in points
    ]


def business_idea_node(result: Dict[str, Any]) -> Dict[str, Any]:
    title = _find(result, "businessIdea", "title", "name", "idea")
    summary = _find(result, "summary", "overview", "description", "concept")
    return {
        "type": "business_idea",
        "title": title if isinstance(title, str) else "Business Idea Analysis",
        "props": {
            "summary": summary if isinstance(summary, str) else None,
            "demographics": _as_items(_find(result, "demographics")),
            "psychographics": _as_items(_find(result, "psychographics")),
            "market_size": _as_items(_find(result, "marketSize", "size")),
            "competitors": _competitors(_find(result, "mainCompetitors")),
            "streams": _as_items(_find(result, "primaryStreams")),
            "projections": _projections(_find(result, "projections", "revenueProjections", "yearlyProjections")),
            "next_steps": _as_items(_find(result, "nextSteps", "actionItems", "recommendations")),
        },
    }


def classify_result(result: Any) -> Dict[str, Any]:
    """Top-level view: optional headline metric, or the business-idea layout, plus sections."""
    view: Dict[str, Any] = {"headline": None, "business_idea": None, "sections": []}
    if not isinstance(result, dict):
        view["sections"] = [classify_value(None, result)]
        return view
    if is_business_idea(result):
        view["business_idea"] = business_idea_node(result)
        return view

    headline_key = next((k for k in HEADLINE_KEYS if is_number(result.get(k))), None)
    if headline_key:
        value = result[headline_key]
        view["headline"] = {
            "type": "headline",
            "title": humanize(headline_key),
            "props": {"value": value, "display": _fmt(value), "percent": max(0.0, min(float(value), 100.0))},
        }
    view["sections"] = [classify_value(k, v) for k, v in result.items() if k != headline_key]
    return view
