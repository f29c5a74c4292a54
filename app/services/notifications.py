"""Notification sink: one-time codes by email (Mailgun, SendGrid, or console in development)."""
import logging

import httpx

from app.config import Settings, get_settings

log = logging.getLogger("uvicorn.error")

MAILGUN_US_BASE = "https://api.mailgun.net"
MAILGUN_EU_BASE = "https://api.eu.mailgun.net"


class EmailNotifier:
    """Sends plain-text email. send() returns True when the provider accepted the message."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def send(self, to_email: str, subject: str, body: str) -> bool:
        s = self.settings
        if s.mailgun_api_key and s.mailgun_domain:
            log.info("[Email] Calling Mailgun API: to=%s subject=%s domain=%s", to_email, subject, s.mailgun_domain)
            return self._send_mailgun(to_email, subject, body)
        if s.sendgrid_api_key:
            return self._send_sendgrid(to_email, subject, body)
        if s.email_console_fallback:
            log.warning("[Email] No provider configured; not sent: to=%s subject=%s\n%s", to_email, subject, body)
            return True
        log.error(
            "[Email] NOT SENT: to=%s subject=%s. Set MAILGUN_API_KEY and MAILGUN_DOMAIN (or SENDGRID_API_KEY) in .env and restart.",
            to_email,
            subject,
        )
        return False

    def _send_mailgun(self, to_email: str, subject: str, body: str) -> bool:
        s = self.settings
        base = (s.mailgun_base_url or MAILGUN_US_BASE).strip().rstrip("/")
        domain = (s.mailgun_domain or "").strip().lower()
        from_addr = (s.mailgun_from_email or "").strip()
        from_domain = from_addr.split("@")[-1].lower() if "@" in from_addr else ""
        if domain and from_domain != domain:
            from_addr = f"noreply@{domain}"
            log.info("[Mailgun] Using from=%s (must match domain %s for delivery)", from_addr, domain)
        data = {
            "from": f"{s.mailgun_from_name} <{from_addr}>",
            "to": to_email,
            "subject": subject,
            "text": body,
        }
        try:
            with httpx.Client(timeout=10.0) as client:
                r = client.post(f"{base}/v3/{domain}/messages", auth=("api", s.mailgun_api_key), data=data)
                if 200 <= r.status_code < 300:
                    log.info("[Mailgun] API success: to=%s status=%s", to_email, r.status_code)
                    return True
                if r.status_code == 401 and base == MAILGUN_US_BASE:
                    log.info("[Mailgun] 401 with US endpoint. Retrying with EU endpoint...")
                    r2 = client.post(f"{MAILGUN_EU_BASE}/v3/{domain}/messages", auth=("api", s.mailgun_api_key), data=data)
                    if 200 <= r2.status_code < 300:
                        log.info("[Mailgun] API success (EU): to=%s", to_email)
                        return True
                    log.error("[Mailgun] EU request failed: status=%s body=%s", r2.status_code, r2.text[:500])
                    return False
                log.error("[Mailgun] API failed: status=%s to=%s body=%s", r.status_code, to_email, r.text[:500])
                return False
        except httpx.HTTPError as e:
            log.error("[Mailgun] Exception: to=%s error=%s: %s", to_email, type(e).__name__, e)
            return False

    def _send_sendgrid(self, to_email: str, subject: str, body: str) -> bool:
        from sendgrid import SendGridAPIClient
        from sendgrid.helpers.mail import Mail

        s = self.settings
        message = Mail(
            from_email=(s.sendgrid_from_email, s.sendgrid_from_name),
            to_emails=to_email,
            subject=subject,
            plain_text_content=body,
        )
        try:
            SendGridAPIClient(s.sendgrid_api_key).send(message)
            return True
        except Exception:
            log.exception("[SendGrid] Send failed: to=%s", to_email)
            return False


def send_verification_code_email(notifier, to_email: str, code: str) -> bool:
    subject = "Email Verification Request"
    return notifier.send(to_email, subject, f"Your verification code is {code}")


def send_password_reset_email(notifier, to_email: str, code: str) -> bool:
    subject = "Forget Password Request"
    return notifier.send(to_email, subject, f"Your request for reset key: {code}")
