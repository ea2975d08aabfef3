from __future__ import annotations
from io import BytesIO
from typing import Dict, Any, List, Optional
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, ListFlowable, ListItem
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont

from brightfuture.reporting import answer_rows, report_sections

# Built-in Adobe CID font with Hangul coverage; no TTF needs to ship.
KOREAN_FONT = "HYSMyeongJo-Medium"

RISK_COLORS = {"낮음": "#166534", "중간": "#854d0e", "높음": "#991b1b"}


def _register_font() -> None:
    if KOREAN_FONT not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(UnicodeCIDFont(KOREAN_FONT))


def _safe(s: Any) -> str:
    if s is None:
        return ""
    return escape(str(s))


def report_to_pdf_bytes(report: Dict[str, Any], counseling_contact: Optional[str] = None) -> bytes:
    """Render a finished report (nickname, metadata, formData, analysis) as PDF."""
    _register_font()
    nickname = report.get("nickname") or ""
    title = f"{nickname}님의 미래 분석" if nickname else "미래 분석"

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=0.8*inch,
        rightMargin=0.8*inch,
        topMargin=0.8*inch,
        bottomMargin=0.8*inch,
        title=title,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "BFTitle",
        parent=styles["Title"],
        fontName=KOREAN_FONT,
        textColor=colors.HexColor("#111111"),
        spaceAfter=12,
    )
    h_style = ParagraphStyle(
        "BFH2",
        parent=styles["Heading2"],
        fontName=KOREAN_FONT,
        textColor=colors.HexColor("#111111"),
        spaceBefore=10,
        spaceAfter=6,
    )
    b_style = ParagraphStyle(
        "BFBody",
        parent=styles["BodyText"],
        fontName=KOREAN_FONT,
        leading=15,
        spaceAfter=6,
    )
    small_style = ParagraphStyle(
        "BFSmall",
        parent=styles["BodyText"],
        fontName=KOREAN_FONT,
        fontSize=9,
        leading=11,
        textColor=colors.HexColor("#444444"),
        spaceAfter=6,
    )

    flow = []
    flow.append(Paragraph(_safe(title), title_style))

    submitted_at = (report.get("metadata") or {}).get("submittedAt")
    if submitted_at:
        flow.append(Paragraph(f"설문 완료 시간: {_safe(submitted_at)}", small_style))
        flow.append(Spacer(1, 6))

    def add_list(items: List[str]):
        lf = ListFlowable(
            [ListItem(Paragraph(_safe(x), b_style), leftIndent=14) for x in items],
            bulletType="bullet",
            leftIndent=14,
        )
        flow.append(lf)

    for section in report_sections(report.get("analysis") or {}):
        flow.append(Paragraph(_safe(section.title), h_style))
        for entry in section.entries:
            if section.key == "risk_assessment" and entry.text is not None:
                color = RISK_COLORS.get(entry.text, "#111111")
                flow.append(Paragraph(
                    f"<b>{_safe(entry.label)}:</b> <font color='{color}'>{_safe(entry.text)}</font>", b_style
                ))
                continue
            flow.append(Paragraph(f"<b>{_safe(entry.label)}</b>", b_style))
            if entry.text is not None:
                flow.append(Paragraph(_safe(entry.text), b_style))
            if entry.items:
                add_list(list(entry.items))
            elif entry.text is None:
                flow.append(Paragraph("없음", b_style))
        flow.append(Spacer(1, 6))

    flow.append(Paragraph("나의 응답", h_style))
    for _, label, text in answer_rows(report.get("formData") or {}):
        flow.append(Paragraph(f"<b>{_safe(label)}:</b> {_safe(text)}", b_style))

    if counseling_contact:
        flow.append(Paragraph("상담 안내", h_style))
        flow.append(Paragraph(
            "마약 중독에 대한 상담이 필요하시다면 아래로 연락주세요. 전문 상담원이 도움을 드리겠습니다.", b_style
        ))
        flow.append(Paragraph(_safe(counseling_contact), b_style))

    doc.build(flow)
    return buf.getvalue()
