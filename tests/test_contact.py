"""
Tests for the contact form
"""
from agerapp_api.config import config
from agerapp_api.services.email_provider import DevEmailProvider, EmailMessage, set_email_provider

MESSAGE = {"name": "  Bola  ", "email": "bola@example.com", "message": "Do you support invoices in USD?"}


class FailingEmailProvider(DevEmailProvider):
    def send(self, message):
        return False


class TestContactForm:
    """POST /v1/contact"""

    def test_forwards_to_support_inbox(self, client, db_session, outbox):
        response = client.post("/v1/contact", json=MESSAGE)

        assert response.status_code == 200
        assert response.json() == {
            "status": "success",
            "message": "Message sent successfully.",
            "error": False,
            "data": None,
        }
        assert len(outbox) == 1
        sent = outbox[0]
        assert sent.to == config.CONTACT_RECIPIENT
        assert sent.reply_to == "bola@example.com"
        assert "Bola" in sent.text_body
        assert "Do you support invoices in USD?" in sent.text_body

    def test_required_fields(self, client, db_session, outbox):
        response = client.post("/v1/contact", json={**MESSAGE, "message": "   "})

        assert response.status_code == 400
        assert response.json()["message"] == "Name, email, and message are required."
        assert len(outbox) == 0

    def test_invalid_email(self, client, db_session):
        response = client.post("/v1/contact", json={**MESSAGE, "email": "bola@"})

        assert response.status_code == 400
        assert response.json()["message"] == "Please provide a valid email address."

    def test_delivery_failure(self, client, db_session):
        set_email_provider(FailingEmailProvider())

        response = client.post("/v1/contact", json=MESSAGE)

        assert response.status_code == 500
        assert response.json()["message"] == "Failed to send contact message."


class TestDevEmailProvider:
    """Outbox kept by the dev provider"""

    def test_outbox_keeps_latest_messages(self):
        provider = DevEmailProvider(limit=3)

        for n in range(5):
            provider.send(EmailMessage(to=f"user{n}@example.com", subject="Hi", html_body="<p>Hi</p>"))

        assert len(provider.outbox) == 3
        assert [message.to for message in provider.outbox] == [
            "user2@example.com",
            "user3@example.com",
            "user4@example.com",
        ]
