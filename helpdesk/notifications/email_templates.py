from html import escape

from helpdesk.core.config import settings
from helpdesk.notifications.email_service import EmailMessage

_ACCENT = "#2563EB"
_BG = "#F8FAFC"
_CARD_BG = "#FFFFFF"
_TEXT = "#0F172A"
_TEXT_MUTED = "#475569"
_BORDER = "#E2E8F0"


def _wrap_html(inner: str) -> str:
    """Wrap email content in the shared helpdesk layout."""
    return f"""\
<html>
<body style="margin: 0; padding: 0; background-color: {_BG}; font-family: 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;">
  <table width="100%" cellpadding="0" cellspacing="0" style="background-color: {_BG}; padding: 32px 0;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" style="max-width: 600px; width: 100%;">
          <tr>
            <td style="background-color: {_CARD_BG}; border: 1px solid {_BORDER}; border-radius: 12px; padding: 40px 36px;">
              {inner}
            </td>
          </tr>
          <tr>
            <td align="center" style="padding: 24px 0 0 0;">
              <p style="margin: 0; font-size: 12px; color: {_TEXT_MUTED}; line-height: 1.5;">
                {escape(settings.SMTP_FROM_NAME)}
              </p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>"""


def build_ticket_responded_email(
    to: str,
    name: str,
    title: str,
    ticket_number: str,
    content: str,
    url: str,
) -> EmailMessage:
    inner = f"""\
<h2 style="margin: 0 0 24px 0; font-size: 22px; font-weight: 700; color: {_TEXT};">
  New response on ticket #{escape(ticket_number)}
</h2>
<p style="margin: 0 0 16px 0; font-size: 15px; color: {_TEXT_MUTED}; line-height: 1.6;">
  Hello {escape(name)},
</p>
<p style="margin: 0 0 20px 0; font-size: 15px; color: {_TEXT_MUTED}; line-height: 1.6;">
  Your ticket <strong style="color: {_TEXT};">"{escape(title)}"</strong> has a new response.
</p>
<div style="background-color: {_BG}; border: 1px solid {_BORDER};
     border-radius: 8px; padding: 16px 20px; margin: 0 0 24px 0;">
  <p style="margin: 0; font-size: 14px; color: {_TEXT_MUTED}; line-height: 1.6; white-space: pre-wrap;">{escape(content)}</p>
</div>
<table cellpadding="0" cellspacing="0" style="margin: 0 0 24px 0;">
  <tr>
    <td style="border-radius: 8px; background-color: {_ACCENT};">
      <a href="{escape(url, quote=True)}"
         style="display: inline-block; padding: 12px 28px; font-size: 14px; font-weight: 600;
                color: #ffffff; text-decoration: none; border-radius: 8px;">
        View ticket
      </a>
    </td>
  </tr>
</table>"""

    text_body = f"""\
New response on ticket #{ticket_number}

Hello {name},

Your ticket "{title}" has a new response:

{content}

View ticket: {url}"""

    return EmailMessage(
        to=to,
        subject=f"Ticket #{ticket_number} responded: {title}",
        body_html=_wrap_html(inner),
        body_text=text_body,
    )
