from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from brightfuture.questions import (
    MULTIPLE, NUMBER, OTHER, QUESTIONS, SINGLE, TEXT, Question,
)

NO_ANSWER = "답변 없음"
OTHER_LABEL = "기타"

RISK_LEVELS = ("낮음", "중간", "높음")
RISK_ICONS = {"낮음": "✅", "중간": "⚠️", "높음": "❗"}

SCENARIO_FIELDS = [
    ("short_term", "단기 (1-2년)"),
    ("mid_term", "중기 (3-5년)"),
    ("long_term", "장기 (10년)"),
]

SCENARIO_LISTS = [
    ("key_milestones", "주요 성취"),
    ("key_warnings", "주요 경고"),
]

ADVICE_LISTS = [
    ("immediate_actions", "즉시 취할 수 있는 행동"),
    ("long_term_strategies", "장기적인 예방 전략"),
    ("support_resources", "도움을 받을 수 있는 자원"),
]


# -------------------- ANSWERS --------------------
def _describe_choice(question: Question, value: str) -> Optional[str]:
    if value.startswith(f"{OTHER}:"):
        extra = value.split(":", 1)[1].strip()
        return f"{OTHER_LABEL} ({extra})" if extra else OTHER_LABEL
    return question.option_text(value)


def describe_answer(question: Question, value: Any, missing: str = NO_ANSWER) -> str:
    """Human-readable text for one answer-record value."""
    if value is None:
        return missing

    if question.type == SINGLE:
        if isinstance(value, dict):
            text = question.option_text(value.get("value") or "")
            if text is None:
                return missing
            other = str(value.get("other") or "").strip()
            return f"{text} ({other})" if other else text
        if isinstance(value, str):
            return question.option_text(value) or missing
        return missing

    if question.type == MULTIPLE:
        if not isinstance(value, list):
            return missing
        parts = [_describe_choice(question, str(v)) for v in value if v]
        parts = [p for p in parts if p]
        return ", ".join(parts) if parts else missing

    if question.type == NUMBER:
        if not isinstance(value, dict):
            return missing
        age, grade = value.get("age"), value.get("grade")
        if age is None and not grade:
            return missing
        age_text = f"{age}세" if age is not None else missing
        return f"{age_text}, {grade or missing}"

    if question.type == TEXT:
        return value.strip() if isinstance(value, str) and value.strip() else missing

    return missing


def answer_rows(
    form_data: Mapping[str, Any],
    questions: Sequence[Question] = QUESTIONS,
    missing: str = NO_ANSWER,
) -> List[Tuple[str, str, str]]:
    """(question key, label, answer text) in question order."""
    return [(q.key, q.label, describe_answer(q, form_data.get(q.key), missing)) for q in questions]


# -------------------- ANALYSIS --------------------
@dataclass(frozen=True)
class ReportEntry:
    label: str
    text: Optional[str] = None
    items: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ReportSection:
    key: str
    title: str
    entries: Tuple[ReportEntry, ...]


def _scenario_entries(scenario: Dict[str, Any]) -> Tuple[ReportEntry, ...]:
    entries = [ReportEntry(label, text=str(scenario.get(key) or "")) for key, label in SCENARIO_FIELDS]
    for key, label in SCENARIO_LISTS:
        items = scenario.get(key)
        if items:
            entries.append(ReportEntry(label, items=tuple(str(x) for x in items)))
    return tuple(entries)


def report_sections(analysis: Dict[str, Any]) -> List[ReportSection]:
    """Flatten an analysis object into ordered sections.

    Both the Streamlit page and the PDF export render from this, so the two
    can't drift apart. Field order and list order are preserved as received.
    """
    risk = analysis.get("risk_assessment") or {}
    scenarios = analysis.get("future_scenarios") or {}
    advice = analysis.get("prevention_advice") or {}

    advice_entries = []
    for key, label in ADVICE_LISTS:
        items = advice.get(key)
        if items or key != "support_resources":
            advice_entries.append(ReportEntry(label, items=tuple(str(x) for x in (items or []))))

    return [
        ReportSection(
            "risk_assessment",
            "위험도 평가",
            (
                ReportEntry("위험도", text=str(risk.get("level") or "")),
                ReportEntry("평가 근거", items=tuple(str(x) for x in risk.get("reasons") or [])),
                ReportEntry("주의해야 할 징후", items=tuple(str(x) for x in risk.get("warning_signs") or [])),
            ),
        ),
        ReportSection("positive_future", "긍정적인 미래", _scenario_entries(scenarios.get("positive_future") or {})),
        ReportSection("negative_future", "부정적인 미래", _scenario_entries(scenarios.get("negative_future") or {})),
        ReportSection("prevention_advice", "예방 조언", tuple(advice_entries)),
    ]


def risk_badge(level: str) -> str:
    icon = RISK_ICONS.get(level, "")
    return f"{icon} {level} 위험도".strip()
