"""
MJML Email Templates
Right-to-left Hebrew templates for emails sent to clients on behalf of a therapist
"""

from datetime import datetime
from html import escape
from typing import Optional

THEME = {
    "primary": "#4f46e5",
    "background": "#f8fafc",
    "card_bg": "#f5f5f5",
    "text_primary": "#333333",
    "text_secondary": "#444444",
    "text_muted": "#666666",
    "border": "#e2e8f0",
}

HEBREW_WEEKDAYS = ["שני", "שלישי", "רביעי", "חמישי", "שישי", "שבת", "ראשון"]
HEBREW_MONTHS = [
    "ינואר",
    "פברואר",
    "מרץ",
    "אפריל",
    "מאי",
    "יוני",
    "יולי",
    "אוגוסט",
    "ספטמבר",
    "אוקטובר",
    "נובמבר",
    "דצמבר",
]

SESSION_TYPE_LABELS = {
    "ONLINE": "אונליין",
    "PHONE": "טלפונית",
    "IN_PERSON": "פרונטלית",
}

DEFAULT_THERAPIST_NAME = "המטפל/ת שלך"


def format_long_date(value: datetime) -> str:
    """e.g. יום שלישי, 21 באוקטובר 2026"""
    weekday = HEBREW_WEEKDAYS[value.weekday()]
    month = HEBREW_MONTHS[value.month - 1]
    return f"יום {weekday}, {value.day} ב{month} {value.year}"


def session_type_label(session_type: str) -> str:
    return SESSION_TYPE_LABELS.get(session_type, SESSION_TYPE_LABELS["IN_PERSON"])


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    signature: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    signature_section = ""
    if signature:
        signature_section = f"""
            <mj-text color="{THEME['text_muted']}" font-size="14px" padding="30px 0 0 0">
              <div dir="rtl">בברכה,<br/>{escape(signature)}</div>
            </mj-text>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{escape(title)}</mj-title>
        <mj-preview>{escape(preview_text)}</mj-preview>
        <mj-attributes>
          <mj-all font-family="Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" align="right" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}" width="600px">
        <mj-section background-color="#ffffff" padding="20px">
          <mj-column>
            <mj-text font-size="22px" font-weight="600" color="{THEME['text_primary']}" padding="0 0 16px 0">
              <div dir="rtl">{escape(title)}</div>
            </mj-text>

            {content_sections}

            {signature_section}
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def session_reminder_template(
    client_name: str, therapist_name: str, session_start: datetime, session_type: str
) -> tuple[str, str]:
    """Session reminder sent to a client two days ahead. Returns (subject, mjml)."""
    formatted_date = format_long_date(session_start)
    formatted_time = session_start.strftime("%H:%M")
    type_label = session_type_label(session_type)

    content = f"""
    <mj-text>
      <div dir="rtl">זוהי תזכורת לפגישה שלך:</div>
    </mj-text>

    <mj-text container-background-color="{THEME['card_bg']}" padding="20px">
      <div dir="rtl">
        <p><strong>תאריך:</strong> {formatted_date}</p>
        <p><strong>שעה:</strong> {formatted_time}</p>
        <p><strong>סוג פגישה:</strong> {type_label}</p>
        <p><strong>מטפל/ת:</strong> {escape(therapist_name)}</p>
      </div>
    </mj-text>

    <mj-text>
      <div dir="rtl">במידה ויש שינוי, נא לעדכן בהקדם.</div>
    </mj-text>
    """

    subject = f"תזכורת: פגישה עם {therapist_name} ב-{formatted_date}"
    mjml = get_base_template(
        title=f"שלום {client_name},",
        preview_text=f"תזכורת לפגישה ב-{formatted_date} בשעה {formatted_time}",
        content_sections=content,
        signature=therapist_name,
    )
    return subject, mjml


def generic_email_template(recipient_name: str, subject: str, content: str, sender_name: str) -> str:
    """Free-text email from a therapist to a client"""
    body = f"""
    <mj-text>
      <div dir="rtl" style="white-space: pre-wrap; line-height: 1.6;">{escape(content)}</div>
    </mj-text>
    """
    return get_base_template(
        title=f"שלום {recipient_name},",
        preview_text=subject,
        content_sections=body,
        signature=sender_name,
    )
