# notifications.py
# Outgoing e-mail over SMTP (Zoho, Gmail, SendGrid SMTP, ...).

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Iterable, List, Optional

from flask import current_app
from markupsafe import escape

logger = logging.getLogger(__name__)


def _split_recipients(value: str) -> List[str]:
    parts = []
    for chunk in (value or "").replace(";", ",").split(","):
        c = chunk.strip()
        if c:
            parts.append(c)
    return parts


def _build_message(
    to_addresses: Iterable[str],
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> EmailMessage:
    cfg = current_app.config
    sender = cfg.get("MAIL_DEFAULT_SENDER") or ""
    from_name = cfg.get("MAIL_FROM_NAME")

    msg = EmailMessage()
    msg["From"] = f"{from_name} <{sender}>" if from_name and sender else sender
    msg["To"] = ", ".join(to_addresses)
    msg["Subject"] = subject
    msg.set_content(body_text or "")
    if body_html:
        msg.add_alternative(body_html, subtype="html")
    return msg


def _send_via_smtp(msg: EmailMessage) -> bool:
    cfg = current_app.config
    if cfg.get("MAIL_SUPPRESS_SEND"):
        logger.info("Email suppressed (MAIL_SUPPRESS_SEND) -> %s : %s", msg.get("To"), msg.get("Subject"))
        return True

    host = cfg.get("MAIL_SERVER")
    port = cfg.get("MAIL_PORT")
    username = cfg.get("MAIL_USERNAME")
    password = cfg.get("MAIL_PASSWORD")
    if not host:
        logger.error("MAIL_SERVER is not configured")
        return False
    if not username or not password:
        logger.error("SMTP credentials are missing (MAIL_USERNAME/MAIL_PASSWORD)")
        return False

    try:
        if cfg.get("MAIL_USE_SSL"):
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(host, port, context=context, timeout=20) as s:
                s.login(username, password)
                s.send_message(msg)
        else:
            with smtplib.SMTP(host, port, timeout=20) as s:
                s.ehlo()
                if cfg.get("MAIL_USE_TLS"):
                    s.starttls(context=ssl.create_default_context())
                    s.ehlo()
                s.login(username, password)
                s.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Email delivery failed -> %s : %s", msg.get("To"), e)
        return False

    logger.info("Email sent -> %s : %s", msg.get("To"), msg.get("Subject"))
    return True


def send_email(email: str, subject: str, body: str, html: Optional[str] = None) -> bool:
    recipients = _split_recipients(email)
    if not recipients:
        logger.error("Email has no recipient: %s", subject)
        return False
    msg = _build_message(recipients, subject, body_text=body, body_html=html)
    return _send_via_smtp(msg)


def send_password_reset_email(email: str, token: str, first_name: Optional[str]) -> bool:
    reset_url = f"{current_app.config['FRONTEND_URL'].rstrip('/')}/reset-password?token={token}"
    subject = "Réinitialisation de votre mot de passe CESIZen"
    body = (
        f"Bonjour {first_name or ''},\n\n"
        "Vous avez demandé la réinitialisation de votre mot de passe CESIZen.\n"
        f"Ouvrez le lien suivant pour définir un nouveau mot de passe :\n{reset_url}\n\n"
        "Ce lien expirera dans 1 heure.\n"
        "Si vous n'avez pas demandé cette réinitialisation, veuillez ignorer cet email.\n\n"
        "Cordialement,\nL'équipe CESIZen"
    )
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Réinitialisation de votre mot de passe</h2>
    <p>Bonjour {escape(first_name or '')},</p>
    <p>Vous avez demandé la réinitialisation de votre mot de passe CESIZen.</p>
    <p>Cliquez sur le lien ci-dessous pour définir un nouveau mot de passe :</p>
    <p><a href="{reset_url}">Réinitialiser mon mot de passe</a></p>
    <p>Ce lien expirera dans 1 heure.</p>
    <p>Si vous n'avez pas demandé cette réinitialisation, veuillez ignorer cet email.</p>
    <p>Cordialement,<br>L'équipe CESIZen</p>
</div>
"""
    return send_email(email, subject, body, html=html)
