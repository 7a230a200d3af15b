"""Outbound transactional mail: Jinja2 HTML templates sent over SMTP."""
from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from decimal import Decimal
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from pathlib import Path

from starlette.templating import Jinja2Templates

from backoffice.core.config import settings
from backoffice.schemas.email import PaymentLinkEmail

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"
SMTP_TIMEOUT_SECONDS = 20


class MailError(Exception):
    pass


class MailNotConfigured(MailError):
    pass


def _money(value) -> str:
    if value is None:
        return "0"
    d = Decimal(str(value))
    if d == d.to_integral_value():
        return f"{int(d):,}"
    return f"{d:,.2f}"


templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.filters["money"] = _money


def render_payment_link_email(data: PaymentLinkEmail, now: datetime) -> str:
    tpl = templates.get_template("payment_link.html")
    return tpl.render(
        member=data.member,
        itinerary=data.itinerary,
        payment=data.payment,
        company_name=settings.mail_from_name,
        support_email=settings.support_email,
        website_url=settings.website_url,
        expiry_days=settings.payment_expiry_days,
        year=now.year,
    )


def payment_link_subject(data: PaymentLinkEmail) -> str:
    destination = data.itinerary.destination or data.member.destination or "Your Trip"
    return f"Your Travel Package - Payment Required | {destination}"


def send_html_email(to: str, subject: str, html: str) -> str:
    """Send one HTML message and return its Message-ID.

    Raises MailNotConfigured when SMTP credentials are missing and MailError
    when the transport rejects the message.
    """
    if not settings.mail_configured:
        raise MailNotConfigured("Email service not configured")
    msg = EmailMessage()
    msg["Subject"] = subject
    msg["From"] = formataddr((settings.mail_from_name, settings.smtp_user))
    msg["To"] = to
    message_id = make_msgid(domain=settings.smtp_user.split("@")[-1])
    msg["Message-ID"] = message_id
    msg.set_content("This message requires an HTML capable mail client.")
    msg.add_alternative(html, subtype="html")
    try:
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=SMTP_TIMEOUT_SECONDS) as smtp:
            if settings.smtp_use_tls:
                smtp.starttls()
            smtp.login(settings.smtp_user, settings.smtp_password)
            smtp.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.exception("Sending mail to %s failed", to)
        raise MailError(str(e)) from e
    logger.info("Mail sent to %s (%s)", to, message_id)
    return message_id


def send_payment_link_email(data: PaymentLinkEmail, now: datetime) -> str:
    html = render_payment_link_email(data, now)
    return send_html_email(str(data.member.email), payment_link_subject(data), html)
