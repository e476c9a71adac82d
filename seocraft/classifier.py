from __future__ import annotations

from typing import Dict, List, Tuple

# Order matters: the first category with any matching keyword wins.
# Meta-tag vocabulary overlaps the others, so it is checked first.
KEYWORD_PRIORITY: List[Tuple[str, Tuple[str, ...]]] = [
    ("meta", ("meta", "description", "title tag", "snippet", "serp")),
    ("blog", ("blog", "article", "post", "content", "writing")),
    ("keyword", ("keyword", "research", "search term", "search volume", "seo term")),
    ("local", ("local", "business", "google business", "map", "location", "near me", "city", "store")),
    ("ecommerce", ("ecommerce", "product", "shop", "store", "catalog", "shopping")),
]

DEFAULT_TAG = "general"


def classify(prompt: str) -> str:
    """Map a free-text prompt to a tool-type tag; never fails."""
    text = (prompt or "").lower()
    for tag, keywords in KEYWORD_PRIORITY:
        if any(k in text for k in keywords):
            return tag
    return DEFAULT_TAG


_PRESETS: Dict[str, Dict[str, str]] = {
    "blog": {
        "title": "Blog Post SEO Optimizer",
        "description": (
            "Optimize your blog content with SEO recommendations, keywords, and meta descriptions. "
            "Improve your content's search visibility and engagement."
        ),
        "inputLabel": "Enter your blog topic or existing content",
        "inputPlaceholder": "E.g., How to grow organic vegetables, or paste your existing blog content for optimization",
        "buttonText": "Optimize Blog Content",
        "resultTitle": 'Blog SEO Recommendations for: "{prompt}"',
    },
    "keyword": {
        "title": "Keyword Research Tool",
        "description": (
            "Discover relevant keywords and search terms for your content. "
            "Get insights on search volume, competition, and content recommendations."
        ),
        "inputLabel": "Enter your topic or niche",
        "inputPlaceholder": "E.g., Sustainable fashion, electric vehicles, home automation",
        "buttonText": "Find Keywords",
        "resultTitle": 'Keyword Suggestions for: "{prompt}"',
    },
    "meta": {
        "title": "Meta Tag Generator",
        "description": (
            "Create optimized meta titles and descriptions for better click-through rates. "
            "Improve your search engine listings and attract more visitors."
        ),
        "inputLabel": "Describe your page content",
        "inputPlaceholder": "E.g., Homepage for a digital marketing agency specializing in small businesses",
        "buttonText": "Generate Meta Tags",
        "resultTitle": 'Optimized Meta Tags for: "{prompt}"',
    },
    "local": {
        "title": "Local SEO Assistant",
        "description": (
            "Improve your local search presence with optimized content and strategies. "
            "Get recommendations for Google Business Profile, local keywords, and citations."
        ),
        "inputLabel": "Enter your business type and location",
        "inputPlaceholder": "E.g., Coffee shop in Portland, Oregon",
        "buttonText": "Generate Local SEO Tips",
        "resultTitle": 'Local SEO Recommendations for: "{prompt}"',
    },
    "ecommerce": {
        "title": "E-commerce SEO Tool",
        "description": (
            "Optimize your product pages and e-commerce content for better visibility. "
            "Improve product descriptions, category pages, and technical SEO elements."
        ),
        "inputLabel": "Enter your product or store details",
        "inputPlaceholder": "E.g., Online store selling handmade jewelry, or specific product details",
        "buttonText": "Optimize Product Content",
        "resultTitle": 'E-commerce SEO Recommendations for: "{prompt}"',
    },
    "general": {
        "title": "SEO Content Generator",
        "description": (
            "Generate optimized SEO content based on your requirements. "
            "Get recommendations for keywords, content structure, and meta descriptions."
        ),
        "inputLabel": "What SEO content do you need?",
        "inputPlaceholder": (
            "E.g., Write meta description for a solar panel company, "
            "or optimize content about sustainable fashion"
        ),
        "buttonText": "Generate SEO Content",
        "resultTitle": "Generated SEO Content:",
    },
}


def preset_config(tag: str, prompt: str) -> Dict[str, str]:
    """Hard-coded copy for a category, in wire (camelCase) form."""
    base = _PRESETS.get(tag) or _PRESETS[DEFAULT_TAG]
    out = {k: v.replace("{prompt}", prompt or "") for k, v in base.items()}
    out["toolType"] = tag if tag in _PRESETS else DEFAULT_TAG
    out["originalPrompt"] = prompt or ""
    return out
