from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Mapping, Optional, Tuple

import jsonschema
from openai import OpenAI, OpenAIError

from brightfuture.config import Settings
from brightfuture.errors import (
    AppError, CompletionProviderError, EmptyCompletionError, MalformedCompletionError,
)
from brightfuture.log_config import clear_submission_id, get_logger, set_submission_id
from brightfuture.prompts import ANALYSIS_SCHEMA, SCHEMA_VERSION, SYSTEM, make_analysis_prompt

logger = get_logger(__name__)

GENERIC_FAILURE = "분석 중 오류가 발생했습니다. 잠시 후 다시 시도해주세요."


def _get_client(settings: Settings) -> OpenAI:
    return OpenAI(api_key=settings.require_api_key(), timeout=settings.timeout_seconds)


def _strip_code_fences(s: str) -> str:
    if not s:
        return s
    t = s.strip()
    if t.startswith("```"):
        # handles ```json ... ``` or ``` ... ```
        t = t.split("\n", 1)[1] if "\n" in t else ""
        if t.endswith("```"):
            t = t.rsplit("```", 1)[0]
    return t.strip()


def _extract_json(raw: str) -> Dict[str, Any]:
    """
    Parse the completion as a JSON object:
    1) strip code fences
    2) try whole string
    3) fall back to first {...} block
    """
    raw = _strip_code_fences(raw)

    try:
        data = json.loads(raw)
    except ValueError:
        s = raw.find("{")
        e = raw.rfind("}")
        if s == -1 or e == -1 or e <= s:
            raise MalformedCompletionError("Failed to parse OpenAI response as JSON")
        try:
            data = json.loads(raw[s : e + 1])
        except ValueError as exc:
            raise MalformedCompletionError("Failed to parse OpenAI response as JSON") from exc

    if not isinstance(data, dict):
        raise MalformedCompletionError("OpenAI response is not a JSON object")
    return data


def validate_analysis(data: Dict[str, Any]) -> None:
    try:
        jsonschema.validate(instance=data, schema=ANALYSIS_SCHEMA)
    except jsonschema.ValidationError as e:
        raise MalformedCompletionError(f"Analysis does not match schema v{SCHEMA_VERSION}: {e.message}") from e


def _chat(client: Any, settings: Settings, system: str, user: str) -> str:
    try:
        resp = client.chat.completions.create(
            model=settings.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        raise CompletionProviderError(f"OpenAI request failed: {e}") from e

    if not resp.choices:
        return ""
    message = resp.choices[0].message
    return (message.content if message is not None else None) or ""


def request_analysis(
    form_data: Mapping[str, Any],
    settings: Settings,
    client: Optional[Any] = None,
) -> Dict[str, Any]:
    """Ask the completion API for an analysis of one answer record.

    Raises an AnalysisError subclass on provider failure, empty content, or a
    response that is not a schema-valid JSON object. No retry is attempted.
    """
    prompt = make_analysis_prompt(form_data)
    client = client or _get_client(settings)

    logger.info("analysis requested", extra={"model": settings.model, "answered": len(form_data)})
    raw = _chat(client, settings, system=SYSTEM, user=prompt)
    if not raw.strip():
        raise EmptyCompletionError("No content received from OpenAI API")

    data = _extract_json(raw)
    validate_analysis(data)
    logger.info("analysis received", extra={"risk_level": data["risk_assessment"]["level"]})
    return data


def handle_analysis_request(
    body: Any,
    settings: Settings,
    client: Optional[Any] = None,
) -> Tuple[int, Dict[str, Any]]:
    """Endpoint contract for POST /api/calculate-result. Never raises."""
    if not isinstance(body, dict):
        return 400, {"status": "error", "message": "Request body must be a JSON object."}
    form_data = body.get("formData") or {}
    if not isinstance(form_data, dict):
        return 400, {"status": "error", "message": "formData must be an object."}

    set_submission_id(uuid.uuid4().hex)
    try:
        analysis = request_analysis(form_data, settings, client=client)
    except AppError:
        logger.error("analysis failed", exc_info=True)
        return 500, {"status": "error", "message": GENERIC_FAILURE}
    except Exception:
        logger.exception("unexpected error while analysing submission")
        return 500, {"status": "error", "message": GENERIC_FAILURE}
    finally:
        clear_submission_id()

    return 200, {"status": "success", "data": analysis}
