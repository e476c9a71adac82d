from seocraft.models import ToolConfig
from seocraft.render import can_submit, render_index, render_message, render_node, render_result, render_tool_page
from seocraft.session import ToolSession
from seocraft.themes import preset_theme


def _session(store, fields=None, template="modern"):
    raw = {"toolType": "keyword", "title": "Keyword Finder", "inputLabel": "Your niche",
           "inputPlaceholder": "E.g., vegan recipes", "buttonText": "Find Keywords", "resultTitle": "Keywords"}
    if fields is not None:
        raw["fields"] = fields
    entry = store.add_entry("keyword research", ToolConfig.model_validate(raw), preset_theme(template, "keyword"))
    return ToolSession.load(store, entry.id)


def test_string_list_renders_one_row_per_item():
    html = render_result({"tips": ["a", "b", "c"]})
    assert html.count('class="checklist-item"') == 3
    assert 'data-shape="checklist"' in html


def test_four_numeric_keys_render_as_radar():
    html = render_result({"scores": {"a": 1, "b": 2, "c": 3, "d": 4}})
    assert 'data-shape="radar"' in html
    assert 'data-shape="heatmap"' not in html
    assert 'data-shape="pie"' not in html


def test_two_and_nine_numeric_keys():
    assert 'data-shape="pie"' in render_result({"split": {"organic": 3, "paid": 1}})
    html = render_result({"grid": {f"k{i}": i for i in range(9)}})
    assert 'data-shape="heatmap"' in html
    assert html.count('class="heat-cell"') == 9


def test_headline_and_section():
    html = render_result({"overallScore": 91, "readability": {"score": 60, "grade": "B"}})
    assert 'data-shape="headline"' in html
    assert 'data-shape="section"' in html
    assert "Overall Score" in html


def test_business_idea_layout():
    result = {
        "title": "Tea Subscription",
        "market": {"demographics": ["urban professionals"], "psychographics": ["health focused"]},
        "competition": {"mainCompetitors": ["Teabox"]},
        "revenue": {"primaryStreams": ["monthly box"], "projections": [{"year": 2025, "amount": 10000}]},
    }
    html = render_result(result)
    assert 'data-shape="business_idea"' in html
    for section in ("target-market", "competitive-analysis", "revenue-model", "chart-projections"):
        assert section in html
    assert 'data-shape="section"' not in html


def test_values_are_escaped():
    html = render_result({"note": "<script>alert(1)</script>"})
    assert "<script>alert(1)</script>" not in html
    assert "&lt;script&gt;" in html


def test_unknown_node_type_uses_generic_partial():
    html = render_node({"type": "sparkline", "title": "Trend", "props": {"x": 1}})
    assert "Trend" in html


def test_can_submit():
    assert not can_submit({})
    assert not can_submit({"content": "   ", "other": None})
    assert can_submit({"content": "", "url": "https://example.com"})


def test_tool_page_uses_theme_and_fallback_textarea(store):
    session = _session(store, template="playful")
    html = render_tool_page(session)
    assert "--primary: #EC4899" in html
    assert 'name="content"' in html
    assert "Your niche" in html
    assert "disabled" in html.split("Find Keywords")[0].rsplit("<button", 1)[1]


def test_tool_page_renders_declared_fields(store):
    session = _session(store, fields=[
        {"name": "niche", "label": "Niche", "type": "text", "required": True},
        {"name": "region", "label": "Region", "type": "select",
         "options": [{"label": "US", "value": "us"}, {"label": "UK", "value": "uk"}]},
    ])
    html = render_tool_page(session, {"niche": "tea", "region": "uk"})
    assert 'name="niche"' in html
    assert 'name="content"' not in html
    assert '<option value="uk" selected>UK</option>' in html
    button = html.split("Find Keywords")[0].rsplit("<button", 1)[1]
    assert "disabled" not in button


def test_index_lists_history(store):
    assert "No tools found" in render_index([])
    session = _session(store)
    html = render_index(store.history())
    assert f'href="/c/{session.tool_id}"' in html
    assert "Keyword Finder" in html


def test_message_page():
    html = render_message("Tool not available", "Tool not found")
    assert "Tool not found" in html
