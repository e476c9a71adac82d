from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

from seocraft import llm_client, llm_parsing, llm_prompts
from seocraft.llm_client import LLMError
from seocraft.models import BORDER_RADII, UI_TEMPLATES, ThemeCustomization

log = logging.getLogger(__name__)

DEFAULT_BRAND = "SEOCraft"
UI_MAX_TOKENS = 1500

TEMPLATE_NAMES = {
    "modern": "Modern Professional",
    "playful": "Playful Vibrant",
    "custom": "Custom AI-Generated",
}

MODERN_BRANDING = {
    "primaryColor": "#3B82F6",
    "secondaryColor": "#60A5FA",
    "accentColor": "#DBEAFE",
    "fontFamily": "Inter, sans-serif",
    "borderRadius": "md",
}

# (primary, secondary, accent) per tool type for the modern preset
MODERN_TOOL_PALETTES: Dict[str, Tuple[str, str, str]] = {
    "blog": ("#10B981", "#34D399", "#ECFDF5"),
    "keyword": ("#3B82F6", "#60A5FA", "#DBEAFE"),
    "meta": ("#8B5CF6", "#A78BFA", "#EDE9FE"),
    "local": ("#F59E0B", "#FBBF24", "#FEF3C7"),
    "ecommerce": ("#EC4899", "#F472B6", "#FCE7F3"),
}

PLAYFUL_BRANDING = {
    "primaryColor": "#EC4899",
    "secondaryColor": "#F472B6",
    "accentColor": "#FCE7F3",
    "fontFamily": "Poppins, sans-serif",
    "borderRadius": "xl",
}

CUSTOM_BRANDING = {
    "primaryColor": "#8B5CF6",
    "secondaryColor": "#A78BFA",
    "accentColor": "#EDE9FE",
    "fontFamily": "Space Grotesk, monospace",
    "borderRadius": "lg",
}

# First matching colour word wins
_MOCK_COLOURS: List[Tuple[Tuple[str, ...], Tuple[str, str, str], str]] = [
    (("dark", "black"), ("#1F2937", "#4B5563", "#E5E7EB"), "dark theme"),
    (("blue",), ("#2563EB", "#60A5FA", "#DBEAFE"), "blue color scheme"),
    (("green",), ("#10B981", "#34D399", "#ECFDF5"), "green color scheme"),
    (("red", "pink"), ("#EC4899", "#F472B6", "#FCE7F3"), "pink color scheme"),
    (("orange", "amber"), ("#F59E0B", "#FBBF24", "#FEF3C7"), "orange color scheme"),
]
_MOCK_DEFAULT_COLOUR = (("#8B5CF6", "#A78BFA", "#EDE9FE"), "purple color scheme")

# style -> (trigger words, font, radius, image phrase, layout, card, button)
_MOCK_STYLES: List[Tuple[str, Tuple[str, ...], str, str, str, str, str, str]] = [
    ("playful", ("playful", "fun"), "Poppins, sans-serif", "xl", "playful style with rounded elements",
     "Playful layout with dynamic elements", "Rounded cards with playful shadows", "Rounded buttons with hover effects"),
    ("minimalist", ("minimalist", "minimal"), "Space Grotesk, monospace", "sm", "minimalist clean design",
     "Minimalist layout with clean lines", "Simple cards with subtle borders", "Simple buttons with minimal styling"),
    ("futuristic", ("futuristic", "cyberpunk"), "Space Grotesk, monospace", "none", "futuristic cyberpunk style",
     "Futuristic layout with edgy elements", "Sharp-edged cards with neon accents", "Angular buttons with glow effects"),
    ("retro", ("retro", "vintage"), "DM Serif Display, serif", "md", "retro vintage style",
     "Retro layout with vintage elements", "Textured cards with classic styling", "Buttons with vintage styling"),
    ("modern", ("modern", "sleek"), "Roboto, sans-serif", "lg", "modern professional style",
     "Modern layout with balanced spacing", "Clean cards with moderate shadows", "Standard buttons with clear call to action"),
]
_MOCK_DEFAULT_STYLE = ("modern", (), "Inter, sans-serif", "md", "balanced design",
                       "Modern layout with balanced spacing", "Clean cards with moderate shadows",
                       "Standard buttons with clear call to action")

_COLOR_RE = re.compile(r"^(#[0-9a-fA-F]{3,8}|(?:rgb|rgba|hsl|hsla)\([0-9.,%\s]+\)|[a-zA-Z]{3,20})$")
_UNSAFE_CSS = re.compile(r"[;{}<>\\]")


class ThemeResolution(NamedTuple):
    customizations: ThemeCustomization
    warning: Optional[str] = None


def normalize_radius(value: Any) -> Optional[str]:
    """Accept enum values and Tailwind classes ("rounded-lg"); None if unknown."""
    if not isinstance(value, str):
        return None
    v = value.strip().lower()
    if v.startswith("rounded"):
        # bare "rounded" is Tailwind's small radius
        v = v[len("rounded"):].lstrip("-") or "sm"
    v = {"2xl": "xl", "3xl": "xl", "default": "md", "base": "md"}.get(v, v)
    return v if v in BORDER_RADII else None


def _is_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_COLOR_RE.match(value.strip()))


def _clean_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip() and not _UNSAFE_CSS.search(value):
        return value.strip()
    return None


def normalize_theme(raw: Any, defaults: Optional[ThemeCustomization] = None) -> ThemeCustomization:
    """Overlay whatever is usable in `raw` onto `defaults`; never raises.

    Each branding sub-field is taken independently, so one bad value only
    costs that value.
    """
    base = (defaults or ThemeCustomization()).dump()
    if not isinstance(raw, dict):
        return ThemeCustomization.model_validate(base)

    branding = raw.get("branding")
    if isinstance(branding, dict):
        for key in ("primaryColor", "secondaryColor", "accentColor"):
            if _is_color(branding.get(key)):
                base["branding"][key] = branding[key].strip()
        font = _clean_text(branding.get("fontFamily"))
        if font:
            base["branding"]["fontFamily"] = font
        radius = normalize_radius(branding.get("borderRadius"))
        if radius:
            base["branding"]["borderRadius"] = radius
        brand = branding.get("brandName")
        if isinstance(brand, str) and brand.strip():
            base["branding"]["brandName"] = brand.strip()

    content = raw.get("content")
    if isinstance(content, dict):
        tone = content.get("toneOfVoice")
        if isinstance(tone, str) and tone.strip():
            base["content"]["toneOfVoice"] = tone.strip()

    if raw.get("uiTemplate") in UI_TEMPLATES:
        base["uiTemplate"] = raw["uiTemplate"]
    if isinstance(raw.get("customPrompt"), str):
        base["customPrompt"] = raw["customPrompt"]
    return ThemeCustomization.model_validate(base)


def preset_theme(template: str, tool_type: Optional[str] = None, brand_name: Optional[str] = None) -> ThemeCustomization:
    """Hard-coded palette for a template; pure."""
    if template == "playful":
        branding = dict(PLAYFUL_BRANDING)
    elif template == "custom":
        branding = dict(CUSTOM_BRANDING)
    else:
        template = "modern"
        branding = dict(MODERN_BRANDING)
        palette = MODERN_TOOL_PALETTES.get(tool_type or "")
        if palette:
            branding["primaryColor"], branding["secondaryColor"], branding["accentColor"] = palette
    branding["brandName"] = brand_name or DEFAULT_BRAND
    return ThemeCustomization.model_validate(
        {"branding": branding, "content": {"toneOfVoice": "formal"}, "uiTemplate": template}
    )


def _title_word(word: str) -> str:
    return word[:1].upper() + word[1:]


def mock_customization(prompt: str, tool_type: str) -> Dict[str, Any]:
    """Deterministic customization from colour and style words in the prompt."""
    text = (prompt or "").lower()
    tool_type = tool_type or "general"

    (primary, secondary, accent), colour_phrase = _MOCK_DEFAULT_COLOUR
    for words, palette, phrase in _MOCK_COLOURS:
        if any(w in text for w in words):
            (primary, secondary, accent), colour_phrase = palette, phrase
            break

    style = _MOCK_DEFAULT_STYLE
    for candidate in _MOCK_STYLES:
        if any(w in text for w in candidate[1]):
            style = candidate
            break
    style_name, _, font, radius, style_phrase, layout, card, button = style

    words = [w for w in (prompt or "").split() if len(w) > 3]
    theme_name = f"{_title_word(words[0] if words else 'Custom')} {_title_word(tool_type)}"
    image_prompt = f"UI design for {tool_type} tool with {colour_phrase}, {style_phrase}"

    return {
        "branding": {
            "primaryColor": primary,
            "secondaryColor": secondary,
            "accentColor": accent,
            "fontFamily": font,
            "borderRadius": radius,
            "brandName": f"{theme_name} SEO",
        },
        "layout": {"style": layout, "cardStyle": card, "buttonStyle": button},
        "theme": {
            "name": theme_name,
            "description": f"A {style_name} theme for {tool_type} SEO tools",
            "imagePrompt": image_prompt,
        },
    }


def _request_customization(prompt: str, tool_type: str) -> Dict[str, Any]:
    """One LLM round trip; raises LLMError or ValueError."""
    system, user = llm_prompts.ui_messages(prompt, tool_type)
    raw = llm_client.chat_json(system, user, max_tokens=UI_MAX_TOKENS, temperature=0.7)
    return llm_parsing.parse_object(raw)


def _debug(prompt: str, tool_type: str, source: str) -> Dict[str, Any]:
    return {
        "prompt": prompt,
        "toolType": tool_type,
        "source": source,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def generate_ui(prompt: str, tool_type: Optional[str]) -> Dict[str, Any]:
    """Customization payload for the generate-ui endpoint.

    Without a credential, or when the call or parse fails, the deterministic
    mock is returned instead (with `error` set on failures).
    """
    tool_type = tool_type or "general"
    mock = mock_customization(prompt, tool_type)
    fallback = {
        "customizations": mock,
        "imagePrompt": mock["theme"]["imagePrompt"],
    }
    try:
        data = _request_customization(prompt, tool_type)
    except llm_client.LLMUnavailable:
        log.warning("generate_ui: no LLM credential; using mock customization")
        return {**fallback, "debug": _debug(prompt, tool_type, "mock")}
    except LLMError as e:
        log.warning("generate_ui: provider error err=%s", e)
        return {**fallback, "error": f"OpenAI API error: {e}", "debug": _debug(prompt, tool_type, "mock")}
    except ValueError as e:
        log.warning("generate_ui: unparseable response err=%s", e)
        return {
            **fallback,
            "error": "Failed to parse the response. Using fallback customizations.",
            "debug": _debug(prompt, tool_type, "mock"),
        }

    defaults = preset_theme("custom", tool_type, brand_name=f"{_title_word(tool_type)} Tool")
    data["branding"] = normalize_theme({"branding": data.get("branding")}, defaults).dump()["branding"]
    theme = data.get("theme") if isinstance(data.get("theme"), dict) else {}
    image_prompt = theme.get("imagePrompt") if isinstance(theme.get("imagePrompt"), str) else None
    return {
        "customizations": data,
        "imagePrompt": image_prompt or f"UI design for {tool_type} tool based on user description",
        "debug": _debug(prompt, tool_type, "llm"),
    }


def resolve(
    template: str,
    prompt: Optional[str] = None,
    tool_type: Optional[str] = None,
    brand_name: Optional[str] = None,
) -> ThemeResolution:
    """Resolve the theme for a build.

    modern/playful are local lookups. custom makes one LLM call and merges the
    answer over the custom defaults; any failure falls back to those defaults
    with a warning instead of aborting the build.
    """
    if template != "custom":
        return ThemeResolution(preset_theme(template, tool_type, brand_name))

    defaults = preset_theme("custom", tool_type, brand_name)
    if prompt:
        defaults = defaults.model_copy(update={"custom_prompt": prompt})
    if not prompt or not prompt.strip():
        return ThemeResolution(defaults, "No design prompt given; using the default custom theme")

    try:
        data = _request_customization(prompt, tool_type or "general")
    except LLMError as e:
        log.warning("resolve: custom theme call failed err=%s", e)
        return ThemeResolution(defaults, f"Couldn't generate a custom theme ({e}); using the default custom theme")
    except ValueError as e:
        log.warning("resolve: custom theme unparseable err=%s", e)
        return ThemeResolution(defaults, "Couldn't read the generated theme; using the default custom theme")

    theme = normalize_theme({"branding": data.get("branding")}, defaults)
    return ThemeResolution(theme)
