from __future__ import annotations

from typing import Any, Dict, List

from seocraft.models import TOOL_TYPES

REQUIRED_COPY = ("title", "description", "inputLabel", "inputPlaceholder", "buttonText", "resultTitle")


def collect_field_errors(field: Any, path_prefix: str) -> List[Dict[str, str]]:
    errors: List[Dict[str, str]] = []
    if not isinstance(field, dict):
        return [{"path": path_prefix, "message": "field must be an object"}]
    for key in ("name", "label"):
        val = field.get(key)
        if key not in field:
            errors.append({"path": f"{path_prefix}.{key}", "message": f"required property '{key}' is missing"})
        elif not isinstance(val, str) or not val.strip():
            errors.append({"path": f"{path_prefix}.{key}", "message": f"required property '{key}' must be a non-empty string"})
    ftype = field.get("type", "text")
    if not isinstance(ftype, str) or not ftype.strip():
        errors.append({"path": f"{path_prefix}.type", "message": "'type' must be a non-empty string"})
    if "required" in field and not isinstance(field["required"], bool):
        errors.append({"path": f"{path_prefix}.required", "message": "'required' must be a boolean"})
    if ftype == "select":
        opts = field.get("options")
        if not isinstance(opts, list) or not opts:
            errors.append({"path": f"{path_prefix}.options", "message": "required property 'options' must be a non-empty array for select fields"})
        else:
            for j, opt in enumerate(opts):
                if not isinstance(opt, dict) or "label" not in opt or "value" not in opt:
                    errors.append({"path": f"{path_prefix}.options[{j}]", "message": "option requires 'label' and 'value'"})
    return errors


def collect_errors(config: Dict[str, Any]) -> List[Dict[str, str]]:
    """
    Return a list of {"path": "...", "message": "..."} error dicts for a raw
    tool configuration. Messages mention 'required' for missing properties.
    """
    errors: List[Dict[str, str]] = []
    if not isinstance(config, dict):
        return [{"path": "(root)", "message": "tool configuration must be an object"}]

    for key in REQUIRED_COPY:
        if key not in config:
            errors.append({"path": key, "message": f"required property '{key}' is missing"})
        elif not isinstance(config[key], str):
            errors.append({"path": key, "message": f"property '{key}' must be a string"})

    tool_type = config.get("toolType")
    if tool_type is None:
        errors.append({"path": "toolType", "message": "required property 'toolType' is missing"})
    elif tool_type not in TOOL_TYPES:
        errors.append({"path": "toolType", "message": f"'toolType' must be one of {', '.join(TOOL_TYPES)}"})

    fields = config.get("fields")
    if fields is not None:
        if not isinstance(fields, list):
            errors.append({"path": "fields", "message": "'fields' must be an array"})
        else:
            for idx, field in enumerate(fields):
                errors.extend(collect_field_errors(field, f"fields[{idx}]"))
    return errors


def validate_config(config: Dict[str, Any]) -> None:
    """
    Raise ValueError if there are any errors; otherwise return None.
    The HTTP layer turns this into 422 with the list from collect_errors().
    """
    errs = collect_errors(config)
    if errs:
        raise ValueError("tool configuration failed validation")
