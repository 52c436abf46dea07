"""Outbound email for account confirmation.

Delivery is best effort: :func:`dispatch_confirmation_email` runs as a
background task after the response is sent and only logs failures.
"""

import html
import logging
import smtplib
from email.message import EmailMessage

from tutorhub.core import config

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = 'Confirm your TutorHub account'


def build_confirmation_message(recipient: str, full_name: str, link: str) -> EmailMessage:
    message = EmailMessage()
    message['Subject'] = CONFIRMATION_SUBJECT
    message['From'] = config.EMAIL_FROM or config.EMAIL_USER
    message['To'] = recipient
    message.set_content(
        f'Hello {full_name},\n\n'
        'Thank you for signing up. Please confirm your email address by opening the link below:\n\n'
        f'{link}\n\n'
        'If you did not create this account you can ignore this email.\n'
    )
    safe_name = html.escape(full_name)
    safe_link = html.escape(link, quote=True)
    message.add_alternative(
        f"<p>Hello {safe_name},</p>"
        '<p>Thank you for signing up. Please confirm your email address by clicking the link below:</p>'
        f'<p><a href="{safe_link}">Confirm my account</a></p>'
        '<p>If you did not create this account you can ignore this email.</p>',
        subtype='html',
    )
    return message


def send_email(message: EmailMessage) -> None:
    with smtplib.SMTP(config.EMAIL_HOST, config.EMAIL_PORT, timeout=30) as smtp:
        if config.EMAIL_USE_TLS:
            smtp.starttls()
        if config.EMAIL_USER:
            smtp.login(config.EMAIL_USER, config.EMAIL_PASS)
        smtp.send_message(message)


def dispatch_confirmation_email(recipient: str, full_name: str, link: str) -> bool:
    if not config.EMAIL_USER:
        logger.warning('EMAIL_USER is not set; confirmation email to %s was not sent', recipient)
        return False
    try:
        send_email(build_confirmation_message(recipient, full_name, link))
    except (smtplib.SMTPException, OSError):
        logger.exception('Failed to send confirmation email to %s', recipient)
        return False
    logger.info('Confirmation email sent to %s', recipient)
    return True
