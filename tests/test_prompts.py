import json

import jsonschema

from brightfuture.prompts import (
    ANALYSIS_SCHEMA, SCHEMA_VERSION, example_from_schema, make_analysis_prompt, render_profile,
)
from brightfuture.questions import QUESTIONS
from brightfuture.survey import to_form_data


class TestRenderProfile:
    def test_every_answered_field_present(self, complete_answers):
        profile = render_profile(to_form_data(complete_answers))
        lines = profile.splitlines()

        assert len(lines) == len(QUESTIONS)
        assert lines[0] == "- 성별: 여성"
        assert lines[1] == "- 나이/학년: 14세, 중학생"
        assert lines[2] == "- 희망 직업: 기타 (웹툰 작가)"
        assert lines[3] == "- 취미: 게임, 음악, 기타 (댄스)"
        assert lines[4] == "- 스마트폰 사용 시간: 3~5시간"
        assert lines[5] == "- 자주 느끼는 감정: 불안, 행복"
        assert lines[9] == "- 미래에 대한 희망: 나는 웹툰 작가가 되어 사람들에게 즐거움을 주고 싶다."
        assert "N/A" not in profile

    def test_missing_fields_fall_back(self):
        lines = render_profile({}).splitlines()
        assert len(lines) == len(QUESTIONS)
        assert all(line.endswith(": N/A") for line in lines)

    def test_partial_age_grade(self):
        profile = render_profile({"2": {"age": None, "grade": "고등학생"}})
        assert "- 나이/학년: N/A, 고등학생" in profile.splitlines()

    def test_deterministic(self, complete_answers):
        data = to_form_data(complete_answers)
        assert make_analysis_prompt(data) == make_analysis_prompt(dict(data))


class TestSchema:
    def test_example_has_requested_shape(self):
        example = example_from_schema(ANALYSIS_SCHEMA)
        assert example["risk_assessment"]["level"] == "낮음/중간/높음"
        assert example["risk_assessment"]["reasons"] == ["이유1", "이유2", "이유3"]
        assert set(example["future_scenarios"]) == {"positive_future", "negative_future"}
        assert "key_milestones" in example["future_scenarios"]["positive_future"]
        assert "key_warnings" in example["future_scenarios"]["negative_future"]
        assert set(example["prevention_advice"]) == {
            "immediate_actions", "long_term_strategies", "support_resources",
        }

    def test_sample_analysis_matches_schema(self, sample_analysis):
        jsonschema.validate(instance=sample_analysis, schema=ANALYSIS_SCHEMA)

    def test_schema_is_versioned(self):
        assert ANALYSIS_SCHEMA["$id"].endswith(f"v{SCHEMA_VERSION}")

    def test_prompt_embeds_example_and_profile(self, complete_answers):
        data = to_form_data(complete_answers)
        prompt = make_analysis_prompt(data)
        example = json.dumps(example_from_schema(ANALYSIS_SCHEMA), ensure_ascii=False, indent=4)

        assert example in prompt
        assert render_profile(data) in prompt
        assert "한국어" in prompt
