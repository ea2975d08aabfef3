from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import brightfuture.analysis as analysis_module
from brightfuture.analysis import GENERIC_FAILURE
from brightfuture.errors import EmptyCompletionError
from brightfuture.survey import MSG_REQUIRED

APP_PATH = str(Path(__file__).resolve().parent.parent / "brightfuture" / "app.py")


def _button(at, label):
    return next(b for b in at.button if b.label == label)


def _answer_all(at):
    _button(at, "시작하기 ✨").click().run()

    at.radio[0].set_value("female")
    _button(at, "다음").click().run()

    at.number_input[0].set_value(14)
    at.radio[0].set_value("중학생")
    _button(at, "다음").click().run()

    for kind, value in [
        ("radio", "doctor"),
        ("multiselect", ["game", "music"]),
        ("radio", "3to5"),
        ("multiselect", ["anxious"]),
        ("radio", "talk"),
        ("radio", "very_bad"),
        ("radio", "refuse"),
    ]:
        getattr(at, kind)[0].set_value(value)
        _button(at, "다음").click().run()

    at.text_area[0].input("나는 요리사가 되어 가족과 행복하게 살고 싶다.")
    _button(at, "제출하기").click().run()


@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    at.run()
    return at


class TestSurveyFlow:
    def test_landing_page(self, app):
        assert app.title[0].value == "마약 없는 나의 밝은 미래 플래너"
        assert not app.session_state["started"]

    def test_empty_answer_blocks_next(self, app):
        _button(app, "시작하기 ✨").click().run()
        _button(app, "다음").click().run()

        assert app.error[0].value == MSG_REQUIRED
        assert app.session_state["survey"].step == 0

    def test_submit_renders_every_field(self, app, monkeypatch, sample_analysis):
        calls = []

        def fake_request_analysis(form_data, settings, client=None):
            calls.append(form_data)
            return sample_analysis

        monkeypatch.setattr(analysis_module, "request_analysis", fake_request_analysis)
        _answer_all(app)

        assert len(calls) == 1
        assert calls[0]["2"] == {"age": 14, "grade": "중학생"}
        assert app.session_state["survey"].submitted

        assert app.warning[0].value == "⚠️ 중간 위험도"
        assert app.subheader[0].value.endswith("님의 미래 분석")

        markdown = [m.value for m in app.markdown]
        risk = sample_analysis["risk_assessment"]
        scenarios = sample_analysis["future_scenarios"]
        advice = sample_analysis["prevention_advice"]
        items = (
            risk["reasons"] + risk["warning_signs"]
            + scenarios["positive_future"]["key_milestones"]
            + scenarios["negative_future"]["key_warnings"]
            + advice["immediate_actions"] + advice["long_term_strategies"] + advice["support_resources"]
        )
        for x in items:
            assert f"- {x}" in markdown
        # list order survives rendering
        positions = [markdown.index(f"- {x}") for x in risk["reasons"]]
        assert positions == sorted(positions)


class TestAnalysisFailure:
    def test_failure_then_resubmit_recovers(self, app, monkeypatch, sample_analysis):
        outcomes = [EmptyCompletionError("No content received from OpenAI API"), sample_analysis]

        def flaky_request_analysis(form_data, settings, client=None):
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        monkeypatch.setattr(analysis_module, "request_analysis", flaky_request_analysis)
        _answer_all(app)

        assert app.error[0].value == GENERIC_FAILURE
        assert app.session_state["report"] is None
        answers_before = app.session_state["survey"].answers

        _button(app, "다시 제출하기").click().run()

        assert outcomes == []
        assert app.session_state["report"]["analysis"] == sample_analysis
        assert app.session_state["survey"].answers == answers_before
        assert app.warning[0].value == "⚠️ 중간 위험도"

    def test_unexpected_error_shows_failure_page(self, app, monkeypatch):
        def broken_request_analysis(form_data, settings, client=None):
            raise KeyError("choices")

        monkeypatch.setattr(analysis_module, "request_analysis", broken_request_analysis)
        _answer_all(app)

        assert app.error[0].value == GENERIC_FAILURE
        assert app.session_state["analysis_failed"]
        assert len(app.exception) == 0

    def test_start_over_resets_survey(self, app, monkeypatch):
        def failing_request_analysis(form_data, settings, client=None):
            raise EmptyCompletionError("empty")

        monkeypatch.setattr(analysis_module, "request_analysis", failing_request_analysis)
        _answer_all(app)
        _button(app, "처음부터 다시하기").click().run()

        assert not app.session_state["survey"].submitted
        assert app.session_state["survey"].answers == {}
