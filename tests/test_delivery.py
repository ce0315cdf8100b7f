# tests/test_delivery.py
import smtplib

import pytest
import requests

from movment.core.config import settings
from movment.services import delivery


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port = host, port
        self.tls = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        pass

    def send_message(self, msg):
        FakeSMTP.sent.append((self.tls, msg["To"], msg["Subject"]))


class FakeResponse:
    def raise_for_status(self):
        pass

    def json(self):
        return {"sid": "SM123"}


@pytest.fixture
def email_on(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_ENABLED", True)
    monkeypatch.setattr(settings, "SMTP_STARTTLS", True)
    FakeSMTP.sent = []


@pytest.fixture
def sms_on(monkeypatch):
    monkeypatch.setattr(settings, "SMS_ENABLED", True)
    monkeypatch.setattr(settings, "TWILIO_ACCOUNT_SID", "AC1")
    monkeypatch.setattr(settings, "TWILIO_AUTH_TOKEN", "tok")
    monkeypatch.setattr(settings, "TWILIO_FROM", "+10000000000")


def test_disabled_channels_are_stubbed():
    assert delivery.send_email("a@b.c", "hi", "body") == {"ok": True, "stub": True}
    assert delivery.send_sms("+919876543210", "hi") == {"ok": True, "stub": True}


def test_email_over_smtp(email_on, monkeypatch):
    monkeypatch.setattr(delivery.smtplib, "SMTP", FakeSMTP)
    assert delivery.send_email("a@b.c", "Booking confirmed", "body") == {"ok": True}
    assert FakeSMTP.sent == [(True, "a@b.c", "Booking confirmed")]


def test_email_failure_is_reported(email_on, monkeypatch):
    def boom(*a, **kw):
        raise smtplib.SMTPConnectError(421, "busy")

    monkeypatch.setattr(delivery.smtplib, "SMTP", boom)
    result = delivery.send_email("a@b.c", "x", "y")
    assert result["ok"] is False
    assert "busy" in result["error"]


def test_sms_via_twilio(sms_on, monkeypatch):
    calls = []

    def fake_post(url, data=None, auth=None, timeout=None):
        calls.append((url, data, auth))
        return FakeResponse()

    monkeypatch.setattr(delivery.requests, "post", fake_post)
    assert delivery.send_sms("+91 98765 43210", "Reminder") == {"ok": True, "sid": "SM123"}
    url, data, auth = calls[0]
    assert url == delivery.TWILIO_MESSAGES_URL.format(sid="AC1")
    assert data["Body"] == "Reminder"
    assert auth == ("AC1", "tok")


def test_sms_rejects_short_numbers_and_network_errors(sms_on, monkeypatch):
    assert delivery.send_sms("12345", "x") == {"ok": False, "error": "Invalid phone number"}

    def down(*a, **kw):
        raise requests.ConnectionError("no route")

    monkeypatch.setattr(delivery.requests, "post", down)
    result = delivery.send_sms("+919876543210", "x")
    assert result["ok"] is False


def test_sms_not_configured(monkeypatch):
    monkeypatch.setattr(settings, "SMS_ENABLED", True)
    monkeypatch.setattr(settings, "TWILIO_ACCOUNT_SID", "")
    assert delivery.send_sms("+919876543210", "x") == {"ok": False, "error": "SMS not configured"}
