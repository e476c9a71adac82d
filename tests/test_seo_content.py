import pytest

from seocraft import llm_client, seo_content
from seocraft.llm_client import LLMRequestError
from seocraft.seo_content import generate_seo_content, key_terms, main_topic, mock_seo_content


def test_key_terms_skip_short_and_stop_words():
    assert key_terms("tips for with that organic vegetable gardening in small yards") == [
        "tips", "organic", "vegetable", "gardening", "small",
    ]


def test_main_topic_stops_at_punctuation():
    assert main_topic("  handmade jewelry store. Also rings!") == "handmade jewelry store"
    assert main_topic("") == ""


@pytest.mark.parametrize(
    "tool_type,heading",
    [
        ("blog", '# Blog SEO Optimization for "organic gardening"'),
        ("keyword", '# Keyword Research Results for "organic gardening"'),
        ("meta", '# Optimized Meta Tags for "organic gardening"'),
        ("local", '# Local SEO Strategy for "organic gardening"'),
        ("ecommerce", '# E-commerce SEO Optimization for "organic gardening"'),
        ("general", '# SEO Recommendations for "organic gardening"'),
    ],
)
def test_mock_uses_tool_type_template(tool_type, heading):
    text = mock_seo_content("organic gardening", tool_type, year=2024)
    assert text.splitlines()[0] == heading


def test_unknown_tool_type_uses_general_template():
    assert mock_seo_content("pizza", "podcast", year=2024).startswith('# SEO Recommendations for "pizza"')


def test_mock_is_deterministic_for_a_fixed_year():
    a = mock_seo_content("Coffee Roasting Guide, for beginners", "meta", year=2024)
    b = mock_seo_content("Coffee Roasting Guide, for beginners", "meta", year=2024)
    assert a == b
    assert '<link rel="canonical" href="https://yourdomain.com/coffee-roasting-guide/">' in a
    assert "[2024]" in a


def test_keyword_table_falls_back_to_topic():
    text = mock_seo_content("seo", "keyword", year=2024)
    assert "| seo guide | Low | Low | 32/100 |" in text
    assert "| seo examples |" in text


def test_blog_lists_primary_terms():
    text = mock_seo_content("Sourdough baking schedule", "blog", year=2024)
    assert "- **Primary Keywords**: Sourdough, baking, schedule" in text
    assert "- **Secondary Keywords**: Sourdoughs, bakings" in text


def test_ecommerce_example_uses_terms():
    text = mock_seo_content("leather wallets", "ecommerce", year=2024)
    assert '"leather - Premium wallets - YourBrand"' in text
    assert "yourdomain.com/category/leather-wallets" in text


def test_generate_without_credential_uses_template():
    out = generate_seo_content("organic gardening", "blog")
    assert out["source"] == "mock"
    assert out["result"].startswith('# Blog SEO Optimization for "organic gardening"')


def test_generate_provider_error_uses_template(monkeypatch):
    def _fail(*args, **kwargs):
        raise LLMRequestError("500 status code (boom)", status_code=500)

    monkeypatch.setattr(llm_client, "chat_text", _fail)
    out = generate_seo_content("organic gardening", "local")
    assert out["source"] == "mock"
    assert "Local SEO Strategy" in out["result"]


def test_generate_returns_model_markdown(monkeypatch):
    seen = {}

    def _chat_text(system, user, max_tokens, temperature=0.7):
        seen.update(system=system, user=user, max_tokens=max_tokens)
        return "## Tailored advice"

    monkeypatch.setattr(llm_client, "chat_text", _chat_text)
    out = generate_seo_content("vegan bakery in Leeds", "local")
    assert out == {"result": "## Tailored advice", "source": "llm"}
    assert seen["user"] == "I need SEO help with: vegan bakery in Leeds"
    assert "local SEO" in seen["system"]
    assert seen["max_tokens"] == seo_content.SEO_MAX_TOKENS


def test_generate_requires_prompt():
    with pytest.raises(ValueError):
        generate_seo_content("  ")
