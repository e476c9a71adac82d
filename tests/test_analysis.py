import json

import pytest

from seocraft import analysis
from seocraft.analysis import (
    AnalysisInputError,
    AnalysisParseError,
    AnalysisUpstreamError,
    analyze,
    generate_logic,
    input_content,
)
from seocraft.llm_client import LLMRequestError, LLMUnavailable


@pytest.mark.parametrize("value", [None, "", {}])
def test_missing_input(value):
    with pytest.raises(AnalysisInputError) as exc:
        analyze("meta", value)
    assert str(exc.value) == "Input is required"
    assert exc.value.status_code == 400


def test_blank_input():
    with pytest.raises(AnalysisInputError) as exc:
        analyze("meta", {"content": "  ", "other": ""})
    assert str(exc.value) == "Input content cannot be empty"


def test_input_content():
    assert input_content({"content": "hello", "x": "y"}) == "hello"
    assert input_content({"business": "Cafe", "city": "Oslo"}) == "Cafe Oslo"
    assert input_content("plain") == "plain"


def test_result_is_any_object(fake_llm):
    calls, replies = fake_llm
    replies.append(json.dumps({"anything": {"goes": [1, 2]}}))
    out = analyze("keyword", "vegan recipes", {"title": "Keyword Tool"})
    assert out["data"] == {"anything": {"goes": [1, 2]}}
    assert out["debug"]["inputLength"] == len("vegan recipes")
    assert calls[0][2] == analysis.ANALYSIS_MAX_TOKENS


def test_missing_key_message(fake_llm):
    _, replies = fake_llm
    replies.append(LLMUnavailable("API key not configured"))
    with pytest.raises(AnalysisUpstreamError) as exc:
        analyze("meta", "page")
    assert str(exc.value) == "API key not configured. Please set up your OpenAI API key to use this tool."


def test_provider_error_message(fake_llm):
    _, replies = fake_llm
    replies.append(LLMRequestError("502 status code (bad gateway)", status_code=502))
    with pytest.raises(AnalysisUpstreamError) as exc:
        analyze("meta", "page")
    assert str(exc.value).startswith("OpenAI API error: 502 status code")
    assert exc.value.status_code == 500


def test_parse_error_carries_excerpt(fake_llm):
    _, replies = fake_llm
    replies.append("no json at all")
    with pytest.raises(AnalysisParseError) as exc:
        analyze("meta", "page")
    assert exc.value.raw == "no json at all..."


def test_generate_logic_parts_fail_independently(fake_llm):
    calls, replies = fake_llm
    replies.extend([json.dumps({"steps": ["fetch", "score"]}), LLMRequestError("timeout")])
    out = generate_logic({"toolType": "blog", "title": "Blog Tool"})
    assert out["processingLogic"] == {"steps": ["fetch", "score"]}
    assert out["intentAnalysis"]["error"].startswith("Couldn't generate this part")
    assert [c[2] for c in calls] == [analysis.PROCESSING_LOGIC_MAX_TOKENS, analysis.INTENT_MAX_TOKENS]


def test_generate_logic_parse_failure(fake_llm):
    _, replies = fake_llm
    replies.extend(["???", json.dumps({"intent": "informational"})])
    out = generate_logic({"toolType": "blog", "title": "Blog Tool"})
    assert out["processingLogic"] == {"error": "Failed to generate processing logic"}
    assert out["intentAnalysis"] == {"intent": "informational"}
