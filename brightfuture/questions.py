# Canonical question bank for the Bright Future survey.
# Keep IDs and option values stable: the prompt and the report both key on them.
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

SINGLE = "single"
MULTIPLE = "multiple"
TEXT = "text"
NUMBER = "number"

QUESTION_TYPES = (SINGLE, MULTIPLE, TEXT, NUMBER)

OTHER = "other"
GRADES = ("초등학생", "중학생", "고등학생")


@dataclass(frozen=True)
class Option:
    value: str
    text: str
    is_other: bool = False


@dataclass(frozen=True)
class Question:
    id: int
    type: str
    text: str
    label: str  # short name used in the prompt and on the report
    options: Tuple[Option, ...] = ()
    placeholder: Optional[str] = None
    required: bool = True

    # number
    min_value: Optional[int] = None
    max_value: Optional[int] = None
    # text
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    # multiple
    max_selections: Optional[int] = None

    @property
    def key(self) -> str:
        # Answer records are keyed by the id as a string, matching the JSON payload.
        return str(self.id)

    @property
    def has_other(self) -> bool:
        return any(o.is_other for o in self.options)

    def option_text(self, value: str) -> Optional[str]:
        for o in self.options:
            if o.value == value:
                return o.text
        return None


def opt(value: str, text: str) -> Option:
    return Option(value=value, text=text, is_other=(value == OTHER))


QUESTIONS: Tuple[Question, ...] = (
    Question(
        id=1,
        type=SINGLE,
        text="성별을 선택해주세요",
        label="성별",
        options=(
            opt("male", "남성"),
            opt("female", "여성"),
            opt("none", "선택 안함"),
        ),
    ),
    Question(
        id=2,
        type=NUMBER,
        text="나이와 현재 소속을 알려주세요",
        label="나이/학년",
        placeholder="나이를 입력해주세요 (예: 14)",
        min_value=10,
        max_value=20,
    ),
    Question(
        id=3,
        type=SINGLE,
        text="관심 있는 직업 또는 장래희망은 무엇인가요?",
        label="희망 직업",
        options=(
            opt("athlete", "운동선수"),
            opt("doctor", "의사"),
            opt("teacher", "교사"),
            opt("celebrity", "연예인"),
            opt("developer", "개발자"),
            opt("police", "경찰"),
            opt("chef", "요리사"),
            opt(OTHER, "기타"),
        ),
    ),
    Question(
        id=4,
        type=MULTIPLE,
        text="평소 자주 하는 취미나 활동은 무엇인가요? (복수 선택 가능)",
        label="취미",
        options=(
            opt("game", "게임"),
            opt("sports", "운동"),
            opt("drawing", "그림"),
            opt("music", "음악"),
            opt("reading", "책 읽기"),
            opt("sns", "SNS"),
            opt("youtube", "유튜브 시청"),
            opt("friends", "친구와 놀기"),
            opt(OTHER, "기타"),
        ),
        max_selections=5,
    ),
    Question(
        id=5,
        type=SINGLE,
        text="하루에 스마트폰을 사용하는 시간은 몇 시간 정도인가요?",
        label="스마트폰 사용 시간",
        options=(
            opt("less1", "1시간 미만"),
            opt("1to3", "1~3시간"),
            opt("3to5", "3~5시간"),
            opt("more5", "5시간 이상"),
        ),
    ),
    Question(
        id=6,
        type=MULTIPLE,
        text="평소 어떤 감정을 자주 느끼나요? (복수 선택 가능)",
        label="자주 느끼는 감정",
        options=(
            opt("lonely", "외로움"),
            opt("anxious", "불안"),
            opt("happy", "행복"),
            opt("angry", "분노"),
            opt("helpless", "무기력"),
            opt("excited", "설렘"),
            opt("confident", "자신감"),
            opt(OTHER, "기타"),
        ),
        max_selections=5,
    ),
    Question(
        id=7,
        type=SINGLE,
        text="스트레스를 받을 때 주로 어떻게 해소하나요?",
        label="스트레스 해소 방법",
        options=(
            opt("talk", "친구와 이야기한다"),
            opt("game", "게임을 한다"),
            opt("alone", "혼자 있는다"),
            opt("exercise", "운동한다"),
            opt("sns", "SNS를 본다"),
            opt("cry", "울거나 폭발한다"),
            opt("none", "해소 방법이 없다"),
        ),
    ),
    Question(
        id=8,
        type=SINGLE,
        text="평소 마약, 흡입제, 위험한 약물 등에 대해 어떻게 생각하나요?",
        label="마약에 대한 생각",
        options=(
            opt("very_bad", "매우 나쁘고 위험하다고 생각한다"),
            opt("curious", "궁금하긴 하지만 하지 않을 것이다"),
            opt("okay", "해도 큰 문제는 없을 것 같다"),
            opt("dont_know", "잘 모르겠다"),
        ),
    ),
    Question(
        id=9,
        type=SINGLE,
        text="마약을 권유받는다면 어떻게 할 것 같나요?",
        label="마약 권유 시 대응",
        options=(
            opt("refuse", "단호히 거절한다"),
            opt("consider", "고민할 것 같다"),
            opt("try", "한 번쯤 해볼지도 모르겠다"),
            opt("dont_know", "모르겠다"),
        ),
    ),
    Question(
        id=10,
        type=TEXT,
        text="미래의 나에 대해 어떤 기대를 가지고 있나요?",
        label="미래에 대한 희망",
        placeholder="예시: 나는 선생님이 되고 싶고, 아이들을 가르치며 행복하게 살고 싶다.",
        min_length=10,
        max_length=500,
    ),
)

QUESTION_BY_KEY: Dict[str, Question] = {q.key: q for q in QUESTIONS}


def _validate_bank(questions: Tuple[Question, ...]) -> None:
    seen = set()
    for q in questions:
        if q.type not in QUESTION_TYPES:
            raise ValueError(f"Unknown question type {q.type!r} for question {q.id}")
        if q.id in seen:
            raise ValueError(f"Duplicate question id: {q.id}")
        if q.type in (SINGLE, MULTIPLE) and not q.options:
            raise ValueError(f"Choice question {q.id} has no options")
        seen.add(q.id)


_validate_bank(QUESTIONS)
