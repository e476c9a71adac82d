import pytest

from seocraft.shapes import classify_result, classify_value, humanize, is_business_idea, shape_of


@pytest.mark.parametrize(
    "value,shape",
    [
        (["a", "b", "c"], "checklist"),
        ([], "checklist"),
        ([{"k": 1}, "x"], "cards"),
        ([1, 2, 3], "cards"),
        ({"a": 1, "b": 2}, "pie"),
        ({"a": 1, "b": 2, "c": 3}, "radar"),
        ({k: 1 for k in "abcdefgh"}, "radar"),
        ({k: 1 for k in "abcdefghi"}, "heatmap"),
        ({"only": 5}, "section"),
        ({"a": 1, "b": "two"}, "section"),
        ({"a": True, "b": False, "c": True}, "section"),
        (42, "scalar"),
        ("text", "scalar"),
        (None, "scalar"),
    ],
)
def test_shape_rules(value, shape):
    assert shape_of(value) == shape


def test_four_numeric_keys_are_radar_not_pie():
    node = classify_value("scores", {"a": 1, "b": 2, "c": 3, "d": 4})
    assert node["type"] == "radar"
    assert [s["label"] for s in node["props"]["series"]] == ["A", "B", "C", "D"]
    assert node["props"]["series"][-1]["percent"] == 100.0


def test_pie_slices_cover_the_circle():
    node = classify_value("split", {"organic": 30, "paid": 10})
    slices = node["props"]["slices"]
    assert [s["share"] for s in slices] == [75.0, 25.0]
    assert slices[0]["start"] == 0
    assert slices[-1]["end"] == 100


def test_heatmap_intensity():
    value = {f"k{i}": i for i in range(1, 10)}
    node = classify_value("grid", value)
    assert node["type"] == "heatmap"
    assert node["props"]["cells"][-1]["intensity"] == 1.0
    assert len(node["props"]["cells"]) == 9


def test_section_lifts_nested_score():
    node = classify_value("readability", {"score": 72, "notes": ["short sentences"]})
    assert node["type"] == "section"
    assert node["props"]["score"] == 72
    assert node["props"]["score_label"] == "Score"
    assert [c["type"] for c in node["props"]["children"]] == ["checklist"]


def test_scalar_gauge_and_booleans():
    gauge = classify_value("density", 42)
    assert gauge["props"]["gauge"] is True
    assert classify_value("volume", 12000)["props"]["gauge"] is False
    flag = classify_value("indexed", True)
    assert flag["props"]["kind"] == "boolean"
    assert flag["props"]["gauge"] is False
    assert flag["props"]["display"] == "Yes"


def test_cards_wrap_each_element():
    node = classify_value("keywords", [{"keyword": "seo", "volume": 100}, "plain"])
    assert node["type"] == "cards"
    first, second = node["props"]["cards"]
    assert [e["title"] for e in first["entries"]] == ["Keyword", "Volume"]
    assert second["entries"][0]["props"]["value"] == "plain"


def test_deep_nesting_is_flattened():
    value = {"a": {"b": {"c": {"d": {"e": {"f": {"g": 1}}}}}}}
    node = classify_value("root", value)
    for _ in range(6):
        node = node["props"]["children"][0]
    assert node["type"] == "scalar"
    assert node["props"]["kind"] == "string"


def test_headline_is_pulled_out():
    view = classify_result({"score": 85, "tips": ["a", "b", "c"], "title": "Report"})
    assert view["headline"]["props"]["value"] == 85
    assert view["headline"]["title"] == "Score"
    assert [s["title"] for s in view["sections"]] == ["Tips", "Title"]


def test_boolean_score_is_not_a_headline():
    view = classify_result({"score": True})
    assert view["headline"] is None


def test_non_object_result():
    view = classify_result(["x", "y"])
    assert view["sections"][0]["type"] == "checklist"


BUSINESS = {
    "businessIdea": "Mobile dog grooming",
    "targetMarket": {
        "demographics": {"age": "25-45", "income": "middle"},
        "psychographics": ["pet lovers"],
    },
    "competitiveAnalysis": {
        "mainCompetitors": [{"name": "PetSmart", "strengths": ["brand"], "weaknesses": ["price"]}],
    },
    "revenueModel": {
        "primaryStreams": ["grooming packages"],
        "projections": {"year1": "$50,000", "year2": 120000},
    },
    "nextSteps": ["Buy a van"],
}


def test_business_idea_layout():
    assert is_business_idea(BUSINESS)
    view = classify_result(BUSINESS)
    node = view["business_idea"]
    assert view["sections"] == []
    assert node["title"] == "Mobile dog grooming"
    assert node["props"]["demographics"] == ["Age: 25-45", "Income: middle"]
    assert node["props"]["competitors"][0]["name"] == "PetSmart"
    assert [p["value"] for p in node["props"]["projections"]] == [50000.0, 120000.0]
    assert node["props"]["next_steps"] == ["Buy a van"]


def test_business_idea_needs_all_keys():
    partial = {k: v for k, v in BUSINESS.items() if k != "revenueModel"}
    assert not is_business_idea(partial)
    assert classify_result(partial)["business_idea"] is None


def test_humanize():
    assert humanize("overallScore") == "Overall Score"
    assert humanize("meta_description") == "Meta Description"
