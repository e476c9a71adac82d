from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TOOL_TYPES = ("meta", "blog", "keyword", "local", "ecommerce", "general")
UI_TEMPLATES = ("modern", "playful", "custom")
BORDER_RADII = ("none", "sm", "md", "lg", "xl", "full")

ToolType = Literal["meta", "blog", "keyword", "local", "ecommerce", "general"]
UiTemplate = Literal["modern", "playful", "custom"]
BorderRadius = Literal["none", "sm", "md", "lg", "xl", "full"]


class WireModel(BaseModel):
    """Base for everything that crosses the wire or the store (camelCase keys)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FieldOption(WireModel):
    label: str
    value: str


class FieldSpec(WireModel):
    name: str
    label: str
    type: str = "text"
    placeholder: Optional[str] = None
    required: bool = False
    options: Optional[List[FieldOption]] = None


class ToolConfig(WireModel):
    model_config = ConfigDict(frozen=True)

    tool_type: ToolType = "general"
    title: str
    description: str = ""
    input_label: str = ""
    input_placeholder: str = ""
    button_text: str = "Generate"
    result_title: str = "Results"
    fields: Optional[List[FieldSpec]] = None
    original_prompt: Optional[str] = None


class Branding(WireModel):
    primary_color: str = "#3B82F6"
    secondary_color: str = "#60A5FA"
    accent_color: str = "#DBEAFE"
    font_family: str = "Inter, sans-serif"
    border_radius: BorderRadius = "md"
    brand_name: str = "SEOCraft"


class ContentSettings(WireModel):
    tone_of_voice: str = "formal"


class ThemeCustomization(WireModel):
    branding: Branding = Field(default_factory=Branding)
    content: ContentSettings = Field(default_factory=ContentSettings)
    ui_template: UiTemplate = "modern"
    custom_prompt: Optional[str] = None


class HistoryEntry(WireModel):
    id: str
    prompt: str
    date: str
    tool_config: ToolConfig
    customizations: ThemeCustomization
