import copy
from types import SimpleNamespace

import pytest

from brightfuture.config import Settings
from brightfuture.questions import QUESTIONS
from brightfuture.survey import (
    AgeGradeAnswer, ChoiceAnswer, MultiChoiceAnswer, Next, SetAnswer, SurveyState, TextAnswer, reduce,
)

COMPLETE_ANSWERS = {
    "1": ChoiceAnswer("female"),
    "2": AgeGradeAnswer(age=14, grade="중학생"),
    "3": ChoiceAnswer("other", other="웹툰 작가"),
    "4": MultiChoiceAnswer(("game", "music", "other"), other="댄스"),
    "5": ChoiceAnswer("3to5"),
    "6": MultiChoiceAnswer(("anxious", "happy")),
    "7": ChoiceAnswer("talk"),
    "8": ChoiceAnswer("very_bad"),
    "9": ChoiceAnswer("refuse"),
    "10": TextAnswer("나는 웹툰 작가가 되어 사람들에게 즐거움을 주고 싶다."),
}

SAMPLE_ANALYSIS = {
    "risk_assessment": {
        "level": "중간",
        "reasons": ["스마트폰 사용 시간이 길다", "불안을 자주 느낀다", "스트레스 해소 방법이 제한적이다"],
        "warning_signs": ["수면 부족", "친구 관계의 변화"],
    },
    "future_scenarios": {
        "positive_future": {
            "short_term": "웹툰 동아리에서 첫 작품을 완성한다.",
            "mid_term": "관련 학과에 진학해 실력을 쌓는다.",
            "long_term": "연재 작가로 독자들과 소통한다.",
            "key_milestones": ["첫 단편 완성", "공모전 입상", "정식 연재"],
        },
        "negative_future": {
            "short_term": "학업 성적이 급격히 떨어진다.",
            "mid_term": "가족과의 갈등이 깊어진다.",
            "long_term": "꿈을 포기하고 회복에 긴 시간을 쓴다.",
            "key_warnings": ["건강 악화", "관계 단절", "법적 처벌"],
        },
    },
    "prevention_advice": {
        "immediate_actions": ["권유를 받으면 단호히 거절한다", "믿을 수 있는 어른에게 알린다"],
        "long_term_strategies": ["건강한 취미를 꾸준히 한다", "스트레스 관리 방법을 익힌다"],
        "support_resources": ["한국마약퇴치운동본부 1899-0893"],
    },
}


@pytest.fixture
def settings():
    return Settings(
        openai_api_key="sk-test",
        model="gpt-test",
        temperature=0.7,
        max_tokens=2000,
        timeout_seconds=5.0,
        log_level="INFO",
        log_json=False,
        counseling_contact="용산경찰서 마약팀: 02-XXX-XXXX",
    )


class FakeCompletions:
    def __init__(self, content=None, error=None, choices=True):
        self.content = content
        self.error = error
        self.choices = choices
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if not self.choices:
            return SimpleNamespace(choices=[])
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    def __init__(self, content=None, error=None, choices=True):
        self.completions = FakeCompletions(content=content, error=error, choices=choices)
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def complete_answers():
    return dict(COMPLETE_ANSWERS)


@pytest.fixture
def sample_analysis():
    return copy.deepcopy(SAMPLE_ANALYSIS)


@pytest.fixture
def submitted_state():
    state = SurveyState()
    for q in QUESTIONS:
        state = reduce(state, SetAnswer(q.id, COMPLETE_ANSWERS[q.key]))
        state = reduce(state, Next())
    return state
