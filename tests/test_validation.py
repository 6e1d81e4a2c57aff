import pytest

from content_insights.errors import MalformedResponseError
from content_insights.llm_parser import extract_records, normalize_response
from content_insights.validation import (
    emit_warnings,
    missing_fields,
    project_insights,
    project_summaries,
    validate_insights,
    validate_records,
    validate_summaries,
)

from conftest import as_response, insight_record, summary_record


class TestSummaries:
    def test_well_formed_round_trip_has_no_warnings(self):
        raw = as_response("summaries", [summary_record(i) for i in (1, 2, 3)])
        records = extract_records(normalize_response(raw), "summaries")
        result = validate_summaries(records)
        assert result.warnings == []
        assert len(result.records) == 3

    def test_missing_target_audience_kept_and_warned(self):
        rec = summary_record(2)
        del rec["targetAudience"]
        records = [summary_record(1), rec]

        result = validate_summaries(records)

        assert result.records == records
        assert len(result.warnings) == 1
        w = result.warnings[0]
        assert w.kind == "summary"
        assert w.position == 2
        assert w.missing_fields == ["targetAudience"]

    def test_blank_values_count_as_missing(self):
        rec = summary_record(1, scenario="  ", painPoint=None)
        assert missing_fields(rec, ("targetAudience", "scenario", "painPoint")) == ["scenario", "painPoint"]

    def test_records_not_mutated(self):
        rec = summary_record(1, targetAudience="")
        before = dict(rec)
        validate_summaries([rec])
        assert rec == before


class TestInsights:
    def test_complete_insight_has_no_warnings(self):
        assert validate_insights([insight_record("A", 85)]).warnings == []

    def test_missing_sub_fields_reported(self):
        rec = insight_record("A", 85, audienceScene={"audience": "parents"})
        rec["demandPainPoint"].pop("expectation")
        result = validate_insights([rec])
        assert len(result.warnings) == 1
        assert result.warnings[0].missing_fields == ["audienceScene.scene", "demandPainPoint.expectation"]

    def test_out_of_range_confidence_is_advisory(self):
        result = validate_insights([insight_record("A", 120)])
        assert result.records[0]["confidence"] == 120
        assert any("outside 70-95" in w.message for w in result.warnings)

    def test_unknown_stage_reported(self):
        rec = insight_record("A", 80, decisionStage={"stage": "daydreaming", "reason": "?"})
        assert any("unknown decision stage" in w.message for w in validate_insights([rec]).warnings)

    def test_numeric_string_confidence_not_flagged(self):
        assert validate_insights([insight_record("A", "88")]).warnings == []

    def test_numeric_string_confidence_range_checked(self):
        result = validate_insights([insight_record("A", "120%")])
        assert any("confidence 120 is outside" in w.message for w in result.warnings)

    def test_unreadable_scores_reported(self):
        rec = insight_record("A", "very high", contentSaturation="crowded")
        messages = [w.message for w in validate_insights([rec]).warnings]
        assert any("confidence is not a number" in m for m in messages)
        assert any("content saturation is not a number" in m for m in messages)

    def test_flattened_sub_object_reported(self):
        rec = insight_record("A", 80, decisionStage="research")
        messages = [w.message for w in validate_insights([rec]).warnings]
        assert any("decisionStage is not an object" in m for m in messages)


def test_dotted_path_through_non_object():
    rec = {"decisionStage": "research"}
    result = validate_records([rec], ("decisionStage.stage",), kind="insight")
    assert result.warnings[0].missing_fields == ["decisionStage.stage"]


def test_emit_warnings_calls_sink():
    seen = []
    result = validate_summaries([summary_record(1, painPoint="")])
    emit_warnings(result.warnings, seen.append)
    assert seen == result.warnings


class TestProjection:
    def test_missing_fields_default(self):
        summary = project_summaries([{"index": 1}])[0]
        assert summary.target_audience == ""
        assert summary.keywords == []

    def test_numeric_strings_coerced(self):
        insight = project_insights([insight_record("A", "88")])[0]
        assert insight.confidence == 88

    def test_wrong_type_is_malformed(self):
        with pytest.raises(MalformedResponseError):
            project_insights([insight_record("A", 80, title={"text": "A"})], raw_text="raw")

    def test_unreadable_scores_fall_back_to_defaults(self):
        rec = insight_record("A", "very high", contentSaturation="crowded")
        insight = project_insights([rec])[0]
        assert insight.confidence == 0
        assert insight.content_saturation is None

    def test_flattened_stage_becomes_sub_object(self):
        insight = project_insights([insight_record("A", 80, decisionStage="research")])[0]
        assert insight.decision_stage.stage == "research"
        assert insight.decision_stage.reason == ""

    def test_non_object_sub_objects_default_to_empty(self):
        rec = insight_record("A", 80, audienceScene=["parents"], demandPainPoint="time")
        insight = project_insights([rec])[0]
        assert insight.audience_scene.audience == ""
        assert insight.demand_pain_point.expectation == ""

    def test_unreadable_summary_index_is_none(self):
        assert project_summaries([{"index": "first"}])[0].index is None

    def test_camel_case_mapping(self):
        insight = project_insights([insight_record("A", 90)])[0]
        assert insight.decision_stage.stage == "research"
        assert insight.demand_pain_point.emotional_pain == "fear of falling behind"
        assert insight.to_wire()["demandPainPoint"]["realisticPain"] == "not enough time"
