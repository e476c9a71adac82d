from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional

from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape
from markupsafe import Markup

from seocraft.models import HistoryEntry, ThemeCustomization
from seocraft.shapes import classify_result

RADIUS_CSS = {"none": "0", "sm": "0.125rem", "md": "0.375rem", "lg": "0.5rem", "xl": "0.75rem", "full": "9999px"}

_env = Environment(
    loader=FileSystemLoader(os.path.join(os.path.dirname(__file__), "templates")),
    autoescape=select_autoescape(["html", "xml"]),
    enable_async=False,
)


def render_node(node: Dict[str, Any]) -> Markup:
    """
    Map a node {type,title,props} to a partial template.
    Unknown types fall back to a generic box.
    """
    ntype = (node.get("type") or "").lower()
    try:
        tpl = _env.get_template(f"partials/{ntype}.html")
    except TemplateNotFound:
        tpl = _env.get_template("partials/generic.html")
    return Markup(tpl.render(node=node, props=node.get("props", {})))


_env.globals["render_node"] = render_node


def theme_vars(theme: ThemeCustomization) -> Dict[str, str]:
    b = theme.branding
    return {
        "primary": b.primary_color,
        "secondary": b.secondary_color,
        "accent": b.accent_color,
        "font": b.font_family,
        "radius": RADIUS_CSS.get(b.border_radius, RADIUS_CSS["md"]),
    }


def can_submit(values: Mapping[str, Any]) -> bool:
    return any(str(v).strip() for v in values.values() if v is not None)


def render_result(result: Any) -> str:
    view = classify_result(result)
    return _env.get_template("result.html").render(view=view)


def render_tool_page(session: Any, values: Optional[Mapping[str, Any]] = None, notice: Optional[str] = None) -> str:
    values = dict(values or {})
    config = session.config
    result_html = render_result(session.result) if session.result is not None else None
    return _env.get_template("tool.html").render(
        tool_id=session.tool_id,
        config=config,
        fields=config.fields or [],
        values=values,
        theme=session.theme,
        css=theme_vars(session.theme),
        state=session.state,
        error=session.error,
        notice=notice,
        submit_enabled=can_submit(values) if values else False,
        result_html=Markup(result_html) if result_html else None,
    )


def render_index(history: List[HistoryEntry]) -> str:
    return _env.get_template("index.html").render(history=history)


def render_message(title: str, message: str) -> str:
    return _env.get_template("message.html").render(title=title, message=message)
