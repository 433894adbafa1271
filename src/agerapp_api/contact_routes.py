"""
Public website contact form
"""
import logging

from fastapi import APIRouter, status

from .config import config
from .exceptions import api_error, send_response
from .schemas import ContactRequest, is_valid_email
from .services.email_provider import EmailDeliveryError, send_email
from .services.email_templates import ContactMessageTemplate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/contact", tags=["contact"])

CONTACT_SUBJECT = "New contact form submission"


@router.post("")
async def submit_contact_form(body: ContactRequest):
    """Forward a website message to the support inbox"""
    name = (body.name or "").strip()
    email = (body.email or "").strip()
    message = (body.message or "").strip()

    if not name or not email or not message:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Name, email, and message are required.")
    if not is_valid_email(email):
        raise api_error(status.HTTP_400_BAD_REQUEST, "Please provide a valid email address.")

    try:
        send_email(
            config.CONTACT_RECIPIENT,
            CONTACT_SUBJECT,
            text=ContactMessageTemplate.render_plain_text(name=name, email=email, message=message),
            html=ContactMessageTemplate.render_html(name=name, email=email, message=message),
            reply_to=email,
        )
    except EmailDeliveryError:
        logger.error("Contact form email could not be delivered")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send contact message.")

    return send_response(status.HTTP_200_OK, "Message sent successfully.")
