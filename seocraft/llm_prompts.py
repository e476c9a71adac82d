from __future__ import annotations

import json
from typing import Any, Dict, Optional, Tuple

TOOL_CONFIG_SYSTEM = """You design single-purpose SEO and content web tools.
Given a user's description, return the configuration of ONE tool as a JSON object.
Output valid JSON only. No backticks. No explanations.

Shape:
{
  "toolType": "meta" | "blog" | "keyword" | "local" | "ecommerce" | "general",
  "title": string (short product-style tool name),
  "description": string (one or two sentences on what the tool does),
  "inputLabel": string (label for the main input),
  "inputPlaceholder": string (an example input starting with "E.g.,"),
  "buttonText": string (action verb phrase, at most 4 words),
  "resultTitle": string (heading shown above results),
  "fields": [
    {
      "name": string (camelCase identifier),
      "label": string,
      "type": "text" | "textarea" | "select" | "url" | "number",
      "placeholder": string (optional),
      "required": boolean,
      "options": [{"label": string, "value": string}] (only for select)
    }
  ]
}

Rules:
- Use 1 to 5 fields that the tool genuinely needs; omit "fields" for a single free-text input.
- Keep the toolType hint unless the description clearly belongs to another category.
"""

ANALYSIS_SYSTEM = """You are an extremely powerful and versatile AI tool generator with advanced capabilities. Your purpose is to create exactly the tool or analysis the user requests with exceptional quality and depth.

CORE CAPABILITIES:
1. You can generate ANY type of tool or analysis based solely on the user's request
2. You adapt completely to what's being asked, with no predefined limitations
3. You provide comprehensive, detailed, and actionable results
4. You think step-by-step to ensure thorough analysis and accurate outputs

RESPONSE GUIDELINES:
1. Analyze the user's request deeply to understand exactly what they need
2. Structure your JSON response in the most logical format for the specific tool requested
3. Include multiple sections, categories, and data points to provide comprehensive value
4. Always include quantitative metrics (scores, percentages, rankings) where appropriate
5. Provide specific, actionable recommendations - not generic advice
6. When analyzing content, extract key insights that might not be immediately obvious
7. Adapt your tone and detail level to match what would be expected for the specific tool
8. Include visualizable data whenever possible (data points that could be shown in charts/graphs)
9. Think beyond basic analysis to provide unexpected value and insights

ADVANCED FEATURES:
- For content analysis: Include readability metrics, sentiment analysis, and structural feedback
- For SEO tools: Provide keyword analysis, competitive insights, and specific optimization steps
- For generators: Create multiple high-quality variations with explanations for each
- For converters/calculators: Show your work and provide context for the results
- For any tool: Include "next steps" or "how to use these results" guidance

Your response must be a well-structured JSON object that could be directly used by a frontend application to display results. Be comprehensive but ensure all data is organized logically."""

UI_SYSTEM = """You are an expert UI designer. Create a UI customization specification that matches the user's request and the tool's function.

Format your response as a JSON object with the following structure:
{
  "branding": {
    "primaryColor": string (hex color code),
    "secondaryColor": string (hex color code),
    "accentColor": string (hex color code),
    "fontFamily": string (font family name),
    "borderRadius": "none" | "sm" | "md" | "lg" | "xl" | "full",
    "brandName": string (suggested brand name based on tool type)
  },
  "layout": {
    "style": string,
    "cardStyle": string,
    "buttonStyle": string,
    "specialElements": [string]
  },
  "theme": {
    "name": string,
    "description": string,
    "imagePrompt": string (detailed prompt for generating a preview image)
  },
  "toolSpecific": {
    "primaryFunction": string,
    "keyFeatures": [string],
    "recommendedComponents": [string]
  }
}"""

PROCESSING_LOGIC_SYSTEM = """You are an expert AI engineer. Your job is to create the processing logic for a tool.

You've been provided with a tool configuration. Create detailed instructions for how the backend should process inputs for this tool: how to interpret inputs, which operations to perform, how to structure the output, and which edge cases need special handling.

Your response must be a valid JSON object with the following structure:
{
  "processingSteps": [{"step": string, "description": string, "logic": string}],
  "inputValidation": [{"field": string, "validations": [string]}],
  "outputStructure": object
}"""

INTENT_SYSTEM = """You are an expert in understanding user intent. Analyze a tool configuration and infer what problem the user is really trying to solve.

Your response must be a valid JSON object with the following structure:
{
  "coreProblem": string,
  "domain": string,
  "keyFeatures": [string],
  "implicitNeeds": [string],
  "suggestedEnhancements": [string]
}"""


def tool_config_messages(prompt: str, tag: str) -> Tuple[str, str]:
    user = (
        f"Tool description: {prompt}\n"
        f"toolType hint (keyword classifier): {tag}\n"
        "Return the tool configuration JSON."
    )
    return TOOL_CONFIG_SYSTEM, user


def analysis_messages(tool_type: Optional[str], content: str, tool_config: Optional[Dict[str, Any]]) -> Tuple[str, str]:
    config_line = f"TOOL CONFIGURATION: {json.dumps(tool_config, ensure_ascii=False)}" if tool_config else ""
    user = f"""Generate a complete, production-quality tool response for: {tool_type or "the requested analysis"}

DETAILED INPUT: {content}

{config_line}

IMPORTANT: Treat this as a real-world tool request from an actual user who needs professional-quality results. Your response will be displayed directly to the user, so make it comprehensive, accurate, and structured appropriately for this specific type of tool."""
    return ANALYSIS_SYSTEM, user


def ui_messages(prompt: str, tool_type: str) -> Tuple[str, str]:
    user = f"""Generate a highly customized UI design for a {tool_type} tool based on this description: {prompt}

The UI should suit this specific tool type and match the aesthetic preferences described."""
    return UI_SYSTEM, user


def processing_logic_messages(tool_config: Dict[str, Any]) -> Tuple[str, str]:
    user = (
        f"Based on this tool configuration: {json.dumps(tool_config, ensure_ascii=False)}\n\n"
        "Create detailed processing logic instructions for the backend API that will handle this tool's functionality."
    )
    return PROCESSING_LOGIC_SYSTEM, user


def intent_messages(tool_config: Dict[str, Any]) -> Tuple[str, str]:
    user = (
        f"Analyze this tool configuration: {json.dumps(tool_config, ensure_ascii=False)}\n\n"
        "Describe the user's underlying intent and what would make this tool most useful."
    )
    return INTENT_SYSTEM, user


_SEO_FOCUS = {
    "blog": (
        "an expert blog SEO assistant",
        "detailed recommendations for optimizing blog content about \"{prompt}\", including keyword "
        "suggestions, content structure, and meta descriptions",
        "clear headings, bullet points, and numbered lists",
    ),
    "keyword": (
        "an expert keyword research assistant",
        "relevant keywords, search volume estimates, and content recommendations specifically for \"{prompt}\"",
        "tables, headings, and bullet points",
    ),
    "meta": (
        "an expert meta tag generator",
        "optimized title tags and meta descriptions specifically for \"{prompt}\" that improve "
        "click-through rates while following SEO best practices",
        "clear sections, code examples, and explanations",
    ),
    "local": (
        "an expert local SEO assistant",
        "recommendations for improving local search presence for \"{prompt}\", including Google Business "
        "Profile optimization, local content ideas, and citation strategies",
        "clear headings and actionable steps",
    ),
    "ecommerce": (
        "an expert e-commerce SEO assistant",
        "recommendations for optimizing product pages, category structure, and conversion elements "
        "specifically for \"{prompt}\" to improve search visibility and sales",
        "clear sections and practical examples",
    ),
}


def seo_messages(prompt: str, tool_type: str) -> Tuple[str, str]:
    focus = _SEO_FOCUS.get(tool_type)
    if focus:
        role, task, layout = focus
        system = f"You are {role}.\nProvide {task.format(prompt=prompt)}.\nFormat your response in Markdown with {layout}.\n"
    else:
        system = (
            f"You are an expert SEO assistant specializing in {tool_type} SEO.\n"
            f"Provide helpful, detailed SEO advice specifically about \"{prompt}\".\n"
            "Format your response in Markdown with clear headings, bullet points, and numbered lists.\n"
        )
    system += (
        f"Make sure every recommendation is directly relevant to \"{prompt}\".\n"
        "Focus ONLY on the specific details mentioned in the prompt. Do not provide generic advice."
    )
    return system, f"I need SEO help with: {prompt}"
