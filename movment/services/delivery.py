# movment/services/delivery.py
"""
Outbound email / SMS.

Both channels are off unless EMAIL_ENABLED / SMS_ENABLED are set; while off the
would-be message is logged and a stub result returned. Failures are logged and
reported in the result dict, they are never raised to the caller.

Email is wired in through notifications (sent after commit). send_sms is an
integration point with no caller yet; nothing in the booking flow texts users.
"""
from __future__ import annotations

import logging
import re
import smtplib
from email.mime.text import MIMEText
from typing import Any, Dict

import requests

from movment.core.config import settings

logger = logging.getLogger(__name__)

TWILIO_MESSAGES_URL = "https://api.twilio.com/2010-04-01/Accounts/{sid}/Messages.json"


def send_email(to: str, subject: str, body: str) -> Dict[str, Any]:
    if not settings.EMAIL_ENABLED:
        logger.info("[email stub] to=%s subject=%r body=%r", to, subject, (body or "")[:80])
        return {"ok": True, "stub": True}

    msg = MIMEText(body or "", "plain", "utf-8")
    msg["Subject"] = subject
    msg["From"] = settings.SMTP_FROM
    msg["To"] = to
    try:
        with smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.DELIVERY_TIMEOUT_SECONDS) as server:
            if settings.SMTP_STARTTLS:
                server.starttls()
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD)
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Send email to %s failed: %s", to, e)
        return {"ok": False, "error": str(e)}
    logger.info("Email sent to %s", to)
    return {"ok": True}


def send_sms(to: str, message: str) -> Dict[str, Any]:
    if not settings.SMS_ENABLED:
        logger.info("[sms stub] to=...%s message=%r", (to or "")[-4:], (message or "")[:40])
        return {"ok": True, "stub": True}

    if not settings.TWILIO_ACCOUNT_SID or not settings.TWILIO_AUTH_TOKEN:
        logger.warning("SMS enabled but Twilio is not configured")
        return {"ok": False, "error": "SMS not configured"}
    if len(re.sub(r"\D", "", to or "")) < 10:
        return {"ok": False, "error": "Invalid phone number"}

    url = TWILIO_MESSAGES_URL.format(sid=settings.TWILIO_ACCOUNT_SID)
    try:
        resp = requests.post(
            url,
            data={"To": to, "From": settings.TWILIO_FROM, "Body": message},
            auth=(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN),
            timeout=settings.DELIVERY_TIMEOUT_SECONDS,
        )
        resp.raise_for_status()
    except requests.RequestException as e:
        logger.error("Send SMS failed: %s", e)
        return {"ok": False, "error": str(e)}
    return {"ok": True, "sid": resp.json().get("sid")}
