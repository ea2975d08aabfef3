# Streamlit entry point: `streamlit run brightfuture/app.py`
import os
import sys
import uuid
from pathlib import Path
from typing import Optional

# -------------------------------------------------------------------
# Make the package importable when Streamlit runs this file as a script
# -------------------------------------------------------------------
ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

import streamlit as st

from brightfuture.analysis import GENERIC_FAILURE, request_analysis
from brightfuture.config import Settings
from brightfuture.errors import AppError
from brightfuture.log_config import clear_submission_id, get_logger, set_submission_id, setup_logging
from brightfuture.nickname import generate_nickname
from brightfuture.pdf_export import report_to_pdf_bytes
from brightfuture.questions import GRADES, MULTIPLE, NUMBER, OTHER, QUESTIONS, SINGLE, TEXT, Question
from brightfuture.render_report import render_report
from brightfuture.survey import (
    AgeGradeAnswer, Answer, ChoiceAnswer, MultiChoiceAnswer, Next, Previous, Reset,
    SetAnswer, SurveyState, TextAnswer, build_submission, current_question, reduce,
)


# -------------------- CONFIG --------------------
st.set_page_config(page_title="마약 없는 나의 밝은 미래 플래너", page_icon="🌟", layout="centered")


def _get_setting(key: str) -> Optional[str]:
    try:
        return str(st.secrets[key])
    except Exception:
        return os.getenv(key)


SETTINGS = Settings.from_env(get=_get_setting)
setup_logging(SETTINGS.log_level, SETTINGS.log_json)
logger = get_logger("brightfuture.app")


# -------------------- STATE --------------------
if "survey" not in st.session_state:
    st.session_state["survey"] = SurveyState()
st.session_state.setdefault("started", False)
st.session_state.setdefault("report", None)
st.session_state.setdefault("analysis_failed", False)


def dispatch(action) -> None:
    st.session_state["survey"] = reduce(st.session_state["survey"], action)


def restart() -> None:
    dispatch(Reset())
    st.session_state["report"] = None
    st.session_state["analysis_failed"] = False


# -------------------- WIDGETS --------------------
def _answer_widget(question: Question, existing: Optional[Answer]) -> Answer:
    k = f"q{question.id}"

    if question.type == SINGLE:
        values = [o.value for o in question.options]
        prev = existing if isinstance(existing, ChoiceAnswer) else ChoiceAnswer()
        value = st.radio(
            question.text, values,
            index=values.index(prev.value) if prev.value in values else None,
            format_func=question.option_text,
            key=f"{k}_choice", label_visibility="collapsed",
        )
        other = ""
        if value == OTHER:
            other = st.text_input("직접 입력해주세요", value=prev.other, key=f"{k}_other")
        return ChoiceAnswer(value=value, other=other)

    if question.type == MULTIPLE:
        values = [o.value for o in question.options]
        prev = existing if isinstance(existing, MultiChoiceAnswer) else MultiChoiceAnswer()
        chosen = st.multiselect(
            question.text, values,
            default=[v for v in prev.values if v in values],
            format_func=question.option_text,
            key=f"{k}_choices", label_visibility="collapsed",
        )
        if question.max_selections:
            st.caption(f"최대 {question.max_selections}개까지 선택할 수 있어요.")
        other = ""
        if OTHER in chosen:
            other = st.text_input("직접 입력해주세요", value=prev.other, key=f"{k}_other")
        return MultiChoiceAnswer(values=tuple(chosen), other=other)

    if question.type == NUMBER:
        prev = existing if isinstance(existing, AgeGradeAnswer) else AgeGradeAnswer()
        age = st.number_input(
            "나이", value=prev.age, step=1, placeholder=question.placeholder, key=f"{k}_age",
        )
        grade = st.radio(
            "소속", list(GRADES),
            index=GRADES.index(prev.grade) if prev.grade in GRADES else None,
            horizontal=True, key=f"{k}_grade",
        )
        return AgeGradeAnswer(age=age, grade=grade)

    if question.type == TEXT:
        prev = existing if isinstance(existing, TextAnswer) else TextAnswer()
        text = st.text_area(
            question.text, value=prev.text, placeholder=question.placeholder,
            height=140, key=f"{k}_text", label_visibility="collapsed",
        )
        if question.max_length:
            st.caption(f"{len(text)}/{question.max_length}자")
        return TextAnswer(text=text)

    raise ValueError(f"Unsupported question type: {question.type}")


# -------------------- PAGES --------------------
def render_landing():
    st.title("마약 없는 나의 밝은 미래 플래너")
    st.markdown("용산 경찰서와 함께하는 프로젝트")
    st.write(
        "10개의 질문에 답하면 나의 현재 모습을 바탕으로 "
        "밝은 미래와 마약에 빠졌을 때의 미래를 함께 그려봐요."
    )
    st.info(
        "안전한 서비스 이용을 위해 개인정보 보호 원칙을 준수합니다. "
        "입력하신 정보는 마약 중독 예방 및 상담 목적으로만 사용되며, 저장되지 않습니다."
    )
    if st.button("시작하기 ✨", type="primary", use_container_width=True):
        st.session_state["started"] = True
        st.rerun()


def render_question(state: SurveyState):
    question = current_question(state)
    total = len(QUESTIONS)

    st.progress((state.step + 1) / total, text=f"{state.step + 1} / {total}")
    st.markdown(f"#### {question.text}" + (" *" if question.required else ""))

    if state.error:
        st.error(state.error.message)

    answer = _answer_widget(question, state.answers.get(question.key))

    c1, c2 = st.columns(2)
    prev_clicked = c1.button("이전", disabled=state.step == 0, use_container_width=True)
    is_last = state.step == total - 1
    next_clicked = c2.button("제출하기" if is_last else "다음", type="primary", use_container_width=True)

    if prev_clicked:
        dispatch(SetAnswer(question.id, answer))
        dispatch(Previous())
        st.rerun()
    if next_clicked:
        dispatch(SetAnswer(question.id, answer))
        dispatch(Next())
        st.rerun()


def run_analysis(state: SurveyState):
    submission = build_submission(state)
    nickname = generate_nickname()
    set_submission_id(uuid.uuid4().hex)
    try:
        with st.spinner("미래를 그려보는 중이에요..."):
            analysis = request_analysis(submission["formData"], SETTINGS)
    except AppError:
        logger.error("analysis failed", exc_info=True)
        st.session_state["analysis_failed"] = True
        return
    except Exception:
        logger.exception("unexpected error while analysing submission")
        st.session_state["analysis_failed"] = True
        return
    finally:
        clear_submission_id()

    st.session_state["analysis_failed"] = False
    st.session_state["report"] = {
        "nickname": nickname,
        "metadata": submission["metadata"],
        "formData": submission["formData"],
        "analysis": analysis,
    }


def render_failure():
    st.error(GENERIC_FAILURE)
    c1, c2 = st.columns(2)
    if c1.button("다시 제출하기", type="primary", use_container_width=True):
        st.session_state["analysis_failed"] = False
        st.rerun()
    if c2.button("처음부터 다시하기", use_container_width=True):
        restart()
        st.rerun()


def render_result(report):
    render_report(report, counseling_contact=SETTINGS.counseling_contact)
    st.download_button(
        "PDF로 저장하기",
        data=report_to_pdf_bytes(report, counseling_contact=SETTINGS.counseling_contact),
        file_name="bright_future_report.pdf",
        mime="application/pdf",
        use_container_width=True,
    )
    if st.button("다시 검사하기 ✨", type="primary", use_container_width=True):
        restart()
        st.rerun()


# -------------------- ROUTING --------------------
state: SurveyState = st.session_state["survey"]

if not st.session_state["started"]:
    render_landing()
    st.stop()

if not state.submitted:
    render_question(state)
    st.stop()

if st.session_state["report"] is None and not st.session_state["analysis_failed"]:
    run_analysis(state)

if st.session_state["report"] is not None:
    render_result(st.session_state["report"])
else:
    render_failure()
