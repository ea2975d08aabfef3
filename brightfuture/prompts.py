from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Sequence

from brightfuture.questions import QUESTIONS, Question
from brightfuture.reporting import RISK_LEVELS, describe_answer

MISSING = "N/A"

SYSTEM = (
    "당신은 청소년 마약 예방 전문가이자 상담사입니다. "
    "사용자의 응답을 분석하여 마약 중독의 위험성과 예방 방법을 효과적으로 전달합니다. "
    "응답은 반드시 요청된 JSON 형식을 따라야 합니다."
)

# Bump when the shape changes; the prompt example and the response check both
# come from ANALYSIS_SCHEMA so they move together.
SCHEMA_VERSION = 1


def _text(description: str) -> Dict[str, Any]:
    return {"type": "string", "description": description}


def _list(item: str, example_count: int) -> Dict[str, Any]:
    # x-example-count only shapes the prompt example; any length validates.
    return {
        "type": "array",
        "items": {"type": "string", "description": item},
        "x-example-count": example_count,
    }


def _scenario(short: str, mid: str, long: str, list_key: str, list_item: str) -> Dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "short_term": _text(short),
            "mid_term": _text(mid),
            "long_term": _text(long),
            list_key: _list(list_item, 3),
        },
        "required": ["short_term", "mid_term", "long_term"],
    }


ANALYSIS_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "$id": f"brightfuture/analysis/v{SCHEMA_VERSION}",
    "title": "Bright Future analysis",
    "type": "object",
    "properties": {
        "risk_assessment": {
            "type": "object",
            "properties": {
                "level": {"type": "string", "enum": list(RISK_LEVELS)},
                "reasons": _list("이유", 3),
                "warning_signs": _list("주의해야 할 징후", 2),
            },
            "required": ["level", "reasons", "warning_signs"],
        },
        "future_scenarios": {
            "type": "object",
            "properties": {
                "positive_future": _scenario(
                    "1-2년 후의 긍정적인 미래 모습 (구체적인 일상, 성취, 관계 등)",
                    "3-5년 후의 긍정적인 미래 모습 (진로, 성장, 목표 달성 등)",
                    "10년 후의 긍정적인 미래 모습 (꿈을 이룬 모습, 가족, 사회적 성취 등)",
                    "key_milestones",
                    "주요 성취",
                ),
                "negative_future": _scenario(
                    "마약 중독 시 1-2년 후의 모습 (신체적, 정신적, 사회적 영향)",
                    "마약 중독 시 3-5년 후의 모습 (건강, 관계, 경제적 문제 등)",
                    "마약 중독 시 10년 후의 모습 (회복이 어려운 상태, 가족 관계 파탄 등)",
                    "key_warnings",
                    "주요 경고",
                ),
            },
            "required": ["positive_future", "negative_future"],
        },
        "prevention_advice": {
            "type": "object",
            "properties": {
                "immediate_actions": _list("즉시 취할 수 있는 예방 행동", 2),
                "long_term_strategies": _list("장기적인 예방 전략", 2),
                "support_resources": _list("도움을 받을 수 있는 기관이나 자원", 1),
            },
            "required": ["immediate_actions", "long_term_strategies"],
        },
    },
    "required": ["risk_assessment", "future_scenarios", "prevention_advice"],
}

GUIDELINES = """
다음 지침을 따라주세요:
1. 각 시나리오는 구체적이고 현실적으로 묘사해주세요.
2. 긍정적인 미래는 사용자의 현재 희망과 목표를 반영하여 밝고 희망적인 톤으로 작성해주세요.
3. 부정적인 미래는 충격적이되, 과장되지 않게 현실적으로 묘사해주세요.
4. 모든 내용은 공감적이고 전문적인 톤으로 작성해주세요.
5. 응답은 반드시 위의 JSON 형식을 정확히 따르되, 각 필드의 내용은 한국어로 작성해주세요.
"""


def example_from_schema(schema: Dict[str, Any]) -> Any:
    """Placeholder document showing the model the shape we will validate."""
    kind = schema.get("type")
    if kind == "object":
        return {k: example_from_schema(v) for k, v in schema.get("properties", {}).items()}
    if kind == "array":
        item = schema.get("items", {})
        n = max(1, schema.get("x-example-count", 1))
        if item.get("type") == "string":
            return [f"{item.get('description', '')}{i}" for i in range(1, n + 1)]
        return [example_from_schema(item) for _ in range(n)]
    if "enum" in schema:
        return "/".join(schema["enum"])
    return schema.get("description", "")


def render_profile(form_data: Mapping[str, Any], questions: Sequence[Question] = QUESTIONS) -> str:
    return "\n".join(
        f"- {q.label}: {describe_answer(q, form_data.get(q.key), missing=MISSING)}"
        for q in questions
    )


def make_analysis_prompt(form_data: Mapping[str, Any], questions: Sequence[Question] = QUESTIONS) -> str:
    example = json.dumps(example_from_schema(ANALYSIS_SCHEMA), ensure_ascii=False, indent=4)
    return f"""
다음은 한 청소년의 설문 응답입니다. 이 데이터를 바탕으로 마약 중독 위험도와 미래 시나리오를 분석해주세요.

사용자 정보:
{render_profile(form_data, questions)}

다음 형식의 JSON으로 응답해주세요:
{example}
{GUIDELINES}"""
