import pytest

from edumate.api.v1.endpoints import contact as contact_endpoint
from edumate.services import email as email_service


MESSAGE = {
    "name": "Akosua Boateng",
    "email": "akosua@edumategh.com",
    "subject": "Bulk coins for my school",
    "message": "Do you offer discounts for 200 students?",
    "type": "partnership",
}


def test_contact_success_sends_notification_and_confirmation(client, monkeypatch):
    sent = []

    def _capture(**kwargs):
        sent.append(kwargs)

    monkeypatch.setattr(email_service, "send_email", _capture)
    res = client.post("/api/v1/contact", json=MESSAGE)
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Message sent successfully"}

    assert len(sent) == 2
    assert sent[0]["to_emails"] == ["support@edumategh.com"]
    assert sent[0]["reply_to"] == "akosua@edumategh.com"
    assert "Bulk coins for my school" in sent[0]["subject"]
    assert "Partnership" in sent[0]["html"]
    assert sent[1]["to_emails"] == ["akosua@edumategh.com"]


def test_contact_escapes_html(client, monkeypatch):
    sent = []
    monkeypatch.setattr(email_service, "send_email", lambda **kwargs: sent.append(kwargs))
    client.post("/api/v1/contact", json={**MESSAGE, "message": "<script>alert(1)</script>"})
    assert "<script>" not in sent[0]["html"]
    assert "&lt;script&gt;" in sent[0]["html"]


def test_contact_missing_fields(client):
    res = client.post("/api/v1/contact", json={**MESSAGE, "subject": ""})
    assert res.status_code == 400
    assert res.json() == {"error": "Missing required fields"}


@pytest.mark.parametrize("email", ["not-an-email", "a@b", "akosua@edumategh..com", "two@@edumategh.com"])
def test_contact_invalid_email(client, email):
    res = client.post("/api/v1/contact", json={**MESSAGE, "email": email})
    assert res.status_code == 400
    assert res.json() == {"error": "Invalid email format"}


def test_contact_notification_failure_is_500(client, monkeypatch):
    def _fail(contact):
        raise RuntimeError("Resend error: 500")

    monkeypatch.setattr(contact_endpoint, "send_contact_notification", _fail)
    res = client.post("/api/v1/contact", json=MESSAGE)
    assert res.status_code == 500
    assert res.json() == {"error": "Failed to send email"}


def test_contact_confirmation_failure_still_succeeds(client, monkeypatch):
    def _fail(contact):
        raise RuntimeError("mailbox unavailable")

    monkeypatch.setattr(contact_endpoint, "send_contact_notification", lambda contact: None)
    monkeypatch.setattr(contact_endpoint, "send_contact_confirmation", _fail)
    res = client.post("/api/v1/contact", json=MESSAGE)
    assert res.status_code == 200
    assert res.json()["success"] is True
