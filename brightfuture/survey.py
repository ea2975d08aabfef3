"""Survey state machine.

The whole survey lives in one immutable ``SurveyState``; the UI feeds actions
through ``reduce`` and renders whatever comes back. Answers are keyed by
question id and carry their own shape (``ChoiceAnswer``, ``MultiChoiceAnswer``,
``AgeGradeAnswer``, ``TextAnswer``).
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from brightfuture.questions import (
    GRADES, MULTIPLE, NUMBER, OTHER, QUESTIONS, SINGLE, TEXT, Question,
)
from brightfuture.reporting import answer_rows

REQUIRED = "required"
INVALID = "invalid"
LENGTH = "length"
RANGE = "range"

MSG_REQUIRED = "이 문항은 필수로 답변해주세요."
MSG_OTHER_REQUIRED = "기타 항목을 선택하셨다면 내용을 입력해주세요."
MSG_NOT_A_NUMBER = "올바른 숫자를 입력해주세요."
MSG_AGE_REQUIRED = "나이를 입력해주세요."
MSG_GRADE_REQUIRED = "현재 소속(학년)을 선택해주세요."
MSG_INVALID_OPTION = "선택할 수 없는 항목입니다."


# -------------------- ANSWERS --------------------
@dataclass(frozen=True)
class ChoiceAnswer:
    value: Optional[str] = None
    other: str = ""

    def is_empty(self) -> bool:
        return not self.value

    def to_form_value(self, question: Question) -> Any:
        if not question.has_other:
            return self.value
        out: Dict[str, Any] = {"value": self.value}
        if self.value == OTHER and self.other.strip():
            out["other"] = self.other.strip()
        return out


@dataclass(frozen=True)
class MultiChoiceAnswer:
    values: Tuple[str, ...] = ()
    other: str = ""

    def is_empty(self) -> bool:
        return len(self.values) == 0

    def to_form_value(self, question: Question) -> List[str]:
        out = []
        for v in self.values:
            if v == OTHER and self.other.strip():
                out.append(f"{OTHER}:{self.other.strip()}")
            else:
                out.append(v)
        return out


@dataclass(frozen=True)
class AgeGradeAnswer:
    age: Any = None  # raw widget value; parsed on validation
    grade: Optional[str] = None

    def is_empty(self) -> bool:
        return _blank(self.age) and not self.grade

    def to_form_value(self, question: Question) -> Dict[str, Any]:
        return {"age": parse_age(self.age), "grade": self.grade}


@dataclass(frozen=True)
class TextAnswer:
    text: str = ""

    def is_empty(self) -> bool:
        return not self.text.strip()

    def to_form_value(self, question: Question) -> str:
        return self.text.strip()


Answer = Union[ChoiceAnswer, MultiChoiceAnswer, AgeGradeAnswer, TextAnswer]

ANSWER_TYPES = {
    SINGLE: ChoiceAnswer,
    MULTIPLE: MultiChoiceAnswer,
    NUMBER: AgeGradeAnswer,
    TEXT: TextAnswer,
}


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def parse_age(raw: Any) -> Optional[int]:
    """Whole-number age from a widget value, or None when it is not one."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    s = str(raw).strip()
    try:
        return int(s)
    except ValueError:
        pass
    try:
        f = float(s)
    except ValueError:
        return None
    return int(f) if f.is_integer() else None


def toggle_option(answer: Optional[MultiChoiceAnswer], value: str) -> MultiChoiceAnswer:
    current = answer or MultiChoiceAnswer()
    if value in current.values:
        values = tuple(v for v in current.values if v != value)
    else:
        values = current.values + (value,)
    return replace(current, values=values)


# -------------------- VALIDATION --------------------
@dataclass(frozen=True)
class ValidationError:
    message: str
    kind: str  # required | invalid | length | range


def validate_answer(question: Question, answer: Optional[Answer]) -> Optional[ValidationError]:
    if answer is None or answer.is_empty():
        if question.required:
            return ValidationError(MSG_REQUIRED, REQUIRED)
        return None

    if not isinstance(answer, ANSWER_TYPES[question.type]):
        return ValidationError(MSG_INVALID_OPTION, INVALID)

    if question.type == NUMBER:
        return _validate_age_grade(question, answer)
    if question.type == TEXT:
        return _validate_text(question, answer)
    if question.type == MULTIPLE:
        return _validate_multiple(question, answer)
    return _validate_single(question, answer)


def _validate_age_grade(question: Question, answer: AgeGradeAnswer) -> Optional[ValidationError]:
    if _blank(answer.age):
        return ValidationError(MSG_AGE_REQUIRED, REQUIRED)
    age = parse_age(answer.age)
    if age is None:
        return ValidationError(MSG_NOT_A_NUMBER, INVALID)
    lo, hi = question.min_value, question.max_value
    if (lo is not None and age < lo) or (hi is not None and age > hi):
        return ValidationError(f"{lo}세에서 {hi}세 사이의 나이를 입력해주세요.", RANGE)
    if not answer.grade:
        return ValidationError(MSG_GRADE_REQUIRED, REQUIRED)
    if answer.grade not in GRADES:
        return ValidationError(MSG_INVALID_OPTION, INVALID)
    return None


def _validate_text(question: Question, answer: TextAnswer) -> Optional[ValidationError]:
    n = len(answer.text.strip())
    if question.min_length is not None and n < question.min_length:
        return ValidationError(f"{question.min_length}자 이상 입력해주세요.", LENGTH)
    if question.max_length is not None and n > question.max_length:
        return ValidationError(f"{question.max_length}자 이내로 입력해주세요.", LENGTH)
    return None


def _validate_multiple(question: Question, answer: MultiChoiceAnswer) -> Optional[ValidationError]:
    if question.max_selections is not None and len(answer.values) > question.max_selections:
        return ValidationError(f"최대 {question.max_selections}개까지만 선택 가능합니다.", RANGE)
    for v in answer.values:
        if question.option_text(v) is None:
            return ValidationError(MSG_INVALID_OPTION, INVALID)
    if OTHER in answer.values and not answer.other.strip():
        return ValidationError(MSG_OTHER_REQUIRED, REQUIRED)
    return None


def _validate_single(question: Question, answer: ChoiceAnswer) -> Optional[ValidationError]:
    if question.option_text(answer.value) is None:
        return ValidationError(MSG_INVALID_OPTION, INVALID)
    if answer.value == OTHER and not answer.other.strip():
        return ValidationError(MSG_OTHER_REQUIRED, REQUIRED)
    return None


# -------------------- STATE MACHINE --------------------
@dataclass(frozen=True)
class SurveyState:
    step: int = 0
    answers: Mapping[str, Answer] = field(default_factory=dict)
    error: Optional[ValidationError] = None
    submitted: bool = False


@dataclass(frozen=True)
class SetAnswer:
    question_id: int
    answer: Answer


@dataclass(frozen=True)
class Next:
    pass


@dataclass(frozen=True)
class Previous:
    pass


@dataclass(frozen=True)
class Reset:
    pass


Action = Union[SetAnswer, Next, Previous, Reset]


def current_question(state: SurveyState, questions: Sequence[Question] = QUESTIONS) -> Question:
    return questions[state.step]


def reduce(state: SurveyState, action: Action, questions: Sequence[Question] = QUESTIONS) -> SurveyState:
    """Return the state after ``action``. Never mutates ``state``."""
    if isinstance(action, Reset):
        return SurveyState()

    # submitted is terminal until Reset
    if state.submitted:
        return state

    if isinstance(action, SetAnswer):
        key = str(action.question_id)
        answers = {**state.answers, key: action.answer}
        error = state.error
        if key == questions[state.step].key:
            error = None
        return replace(state, answers=answers, error=error)

    if isinstance(action, Next):
        question = questions[state.step]
        error = validate_answer(question, state.answers.get(question.key))
        if error is not None:
            return replace(state, error=error)
        if state.step < len(questions) - 1:
            return replace(state, step=state.step + 1, error=None)
        return replace(state, error=None, submitted=True)

    if isinstance(action, Previous):
        if state.step == 0:
            return state
        return replace(state, step=state.step - 1, error=None)

    raise TypeError(f"Unknown survey action: {action!r}")


# -------------------- SUBMISSION --------------------
def to_form_data(answers: Mapping[str, Answer], questions: Sequence[Question] = QUESTIONS) -> Dict[str, Any]:
    """Answer record as sent to the analysis endpoint (question id -> value)."""
    out: Dict[str, Any] = {}
    for q in questions:
        a = answers.get(q.key)
        if a is None or a.is_empty():
            continue
        out[q.key] = a.to_form_value(q)
    return out


def completed_count(answers: Mapping[str, Answer], questions: Sequence[Question] = QUESTIONS) -> int:
    return sum(
        1 for q in questions
        if answers.get(q.key) is not None and validate_answer(q, answers.get(q.key)) is None
    )


def build_submission(
    state: SurveyState,
    now: Optional[datetime] = None,
    questions: Sequence[Question] = QUESTIONS,
) -> Dict[str, Any]:
    if not state.submitted:
        raise ValueError("Survey has not been completed yet.")
    now = now or datetime.now(timezone.utc)
    form_data = to_form_data(state.answers, questions)
    return {
        "formData": form_data,
        "answers": [
            {"questionId": key, "question": label, "answer": text}
            for key, label, text in answer_rows(form_data, questions)
        ],
        "metadata": {
            "submittedAt": now.isoformat(),
            "totalQuestions": len(questions),
            "completedQuestions": completed_count(state.answers, questions),
        },
    }
