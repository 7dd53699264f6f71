"""Unit tests for AI response normalization."""

import json

import pytest

from dreamlens.agents.dream_analyze import normalize_analysis
from dreamlens.shared.errors import IncompleteAIResponse, MalformedAIResponse

FLIGHT = {
    "title": "Flight",
    "interpretation": "...",
    "mood": "Peaceful",
    "keywords": ["flying", "ocean"],
}


class TestNormalizeAnalysis:
    """Test schema enforcement on completion output."""

    def test_well_formed_response_is_returned_unmodified(self):
        result = normalize_analysis(json.dumps(FLIGHT))
        assert result.to_body() == FLIGHT

    def test_empty_keywords_allowed(self):
        result = normalize_analysis(json.dumps({**FLIGHT, "keywords": []}))
        assert result.keywords == []

    def test_keyword_order_preserved(self):
        keywords = ["ocean", "flying", "wings", "sky"]
        result = normalize_analysis(json.dumps({**FLIGHT, "keywords": keywords}))
        assert result.keywords == keywords

    def test_extra_keys_pass_through(self):
        result = normalize_analysis(json.dumps({**FLIGHT, "symbols": {"ocean": "the unconscious"}}))
        assert result.to_body() == {**FLIGHT, "symbols": {"ocean": "the unconscious"}}

    @pytest.mark.parametrize("raw", [
        "",
        "Here is your analysis: the dream means freedom.",
        "```json\n" + json.dumps(FLIGHT) + "\n```",
        json.dumps(FLIGHT)[:-10],
        None,
    ])
    def test_unparseable_text_is_malformed(self, raw):
        with pytest.raises(MalformedAIResponse) as exc:
            normalize_analysis(raw)
        assert exc.value.to_body() == {"error": "Invalid JSON response from AI"}
        assert exc.value.status_code == 500

    def test_deeply_nested_text_is_malformed(self):
        with pytest.raises(MalformedAIResponse):
            normalize_analysis('{"title": ' + "[" * 16000 + "]" * 16000 + "}")

    @pytest.mark.parametrize("raw", ["[]", '"Flight"', "42", "null"])
    def test_non_object_json_is_malformed(self, raw):
        with pytest.raises(MalformedAIResponse):
            normalize_analysis(raw)

    @pytest.mark.parametrize("field", ["title", "interpretation", "mood", "keywords"])
    def test_missing_field_is_incomplete(self, field):
        data = {k: v for k, v in FLIGHT.items() if k != field}
        with pytest.raises(IncompleteAIResponse) as exc:
            normalize_analysis(json.dumps(data))
        assert exc.value.message == f"AI response missing required fields: {field}"
        assert exc.value.status_code == 500

    def test_all_offending_fields_are_named(self):
        with pytest.raises(IncompleteAIResponse) as exc:
            normalize_analysis(json.dumps({"title": "", "keywords": "x"}))
        assert exc.value.message == (
            "AI response missing required fields: interpretation, keywords, mood, title"
        )

    @pytest.mark.parametrize("field", ["title", "interpretation", "mood"])
    def test_empty_text_field_is_incomplete(self, field):
        with pytest.raises(IncompleteAIResponse):
            normalize_analysis(json.dumps({**FLIGHT, field: ""}))

    @pytest.mark.parametrize("keywords", ["flying, ocean", {"a": "b"}, None, 3, ["flying", 7]])
    def test_non_list_keywords_is_incomplete(self, keywords):
        with pytest.raises(IncompleteAIResponse):
            normalize_analysis(json.dumps({**FLIGHT, "keywords": keywords}))

    def test_non_string_title_is_incomplete(self):
        with pytest.raises(IncompleteAIResponse):
            normalize_analysis(json.dumps({**FLIGHT, "title": 12}))
