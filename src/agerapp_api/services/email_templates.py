"""
HTML email templates
Every outgoing message is wrapped in the AgerApp branded layout
"""
import html
from typing import Optional

LOGO_URL = "https://agerapp.com.ng/assets/agerApp-logo-G3s7oUoB.png"
BRAND_GREEN = "#2E6130"

FOOTER_LINKS = [
    ("Instagram", "https://www.instagram.com/agerapp/"),
    ("TikTok", "https://www.tiktok.com/@agerapp"),
    ("LinkedIn", "https://www.linkedin.com/company/agerapp/"),
    ("Twitter", "https://x.com/agerapps"),
    ("Email", "mailto:info@agerapp.com.ng"),
]


class EmailTemplate:
    """Base class for email templates"""

    @staticmethod
    def render_plain_text(**kwargs) -> str:
        raise NotImplementedError

    @staticmethod
    def render_html(**kwargs) -> str:
        raise NotImplementedError


class BrandedTemplate(EmailTemplate):
    """Green header with logo, subject heading, body, social footer"""

    @staticmethod
    def render_plain_text(text: Optional[str] = None, **kwargs) -> str:
        return (text or "").strip()

    @staticmethod
    def render_html(subject: str, text: Optional[str] = None, body_html: Optional[str] = None) -> str:
        """
        Render the branded HTML body

        Args:
            subject: Shown as the heading
            text: Plain text, escaped and converted to a paragraph
            body_html: Pre-rendered HTML used instead of text when given
        """
        if body_html:
            inner = body_html
        elif text:
            escaped = html.escape(text.strip()).replace("\n", "<br/>")
            inner = f'<p style="margin:0 0 16px 0;line-height:1.6;color:#1E1E1E;">{escaped}</p>'
        else:
            inner = ""

        links = "".join(
            f'<a href="{href}" style="color:{BRAND_GREEN};text-decoration:none;margin:0 6px;">{label}</a>'
            for label, href in FOOTER_LINKS
        )

        return f"""
    <div style="background:#F8F8F8;padding:32px 16px;">
      <div style="max-width:600px;margin:0 auto;background:#FFFFFF;border-radius:16px;overflow:hidden;border:1px solid #E5EEE6;">
        <div style="background:{BRAND_GREEN};padding:20px;text-align:center;">
          <img src="{LOGO_URL}" alt="AgerApp" style="height:48px;width:auto;display:inline-block;" />
        </div>
        <div style="padding:28px 24px;">
          <h1 style="margin:0 0 12px 0;font-size:22px;color:{BRAND_GREEN};">{html.escape(subject)}</h1>
          {inner}
        </div>
        <div style="padding:16px 24px;background:#F1F6F2;color:{BRAND_GREEN};font-size:12px;text-align:center;">
          <div style="margin-bottom:8px;">{links}</div>
          AgerApp &bull; Grow smarter, farm better
        </div>
      </div>
    </div>
    """


class ContactMessageTemplate(EmailTemplate):
    """Message submitted through the public contact form"""

    @staticmethod
    def render_plain_text(name: str, email: str, message: str) -> str:
        return f"Name: {name}\nEmail: {email}\n\n{message}"

    @staticmethod
    def render_html(name: str, email: str, message: str) -> str:
        return (
            f"<p><strong>Name:</strong> {html.escape(name)}</p>"
            f"<p><strong>Email:</strong> {html.escape(email)}</p>"
            f"<p><strong>Message:</strong></p>"
            f"<p>{html.escape(message).replace(chr(10), '<br/>')}</p>"
        )
