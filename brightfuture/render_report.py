from __future__ import annotations
from typing import Dict, Any, Optional
import streamlit as st

from brightfuture.reporting import answer_rows, report_sections, risk_badge


def render_report(report: Dict[str, Any], counseling_contact: Optional[str] = None):
    nickname = report.get("nickname") or ""
    st.subheader(f"{nickname}님의 미래 분석" if nickname else "미래 분석")
    submitted_at = (report.get("metadata") or {}).get("submittedAt")
    if submitted_at:
        st.caption(f"설문 완료 시간: {submitted_at}")

    for section in report_sections(report.get("analysis") or {}):
        st.markdown(f"### {section.title}")
        for entry in section.entries:
            if section.key == "risk_assessment" and entry.text is not None:
                level = entry.text
                if level == "높음":
                    st.error(risk_badge(level))
                elif level == "중간":
                    st.warning(risk_badge(level))
                else:
                    st.success(risk_badge(level))
                continue
            st.markdown(f"**{entry.label}**")
            if entry.text is not None:
                st.write(entry.text)
            for x in entry.items:
                st.markdown(f"- {x}")
            if entry.text is None and not entry.items:
                st.write("없음")
        st.divider()

    with st.expander("나의 응답"):
        for _, label, text in answer_rows(report.get("formData") or {}):
            st.markdown(f"**{label}:** {text}")

    if counseling_contact:
        st.markdown("### 상담 안내")
        st.write("마약 중독에 대한 상담이 필요하시다면 아래로 연락주세요. 전문 상담원이 도움을 드리겠습니다.")
        st.info(counseling_contact)
