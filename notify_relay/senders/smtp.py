# senders/smtp.py
"""
SMTP email sender built on aiosmtplib

Each send opens its own SMTP session:
- implicit TLS on port 465 when TLS is enabled
- STARTTLS on any other port when TLS is enabled
- plaintext when TLS is disabled
"""

import asyncio
import logging
import uuid
from email.message import EmailMessage
from email.utils import formatdate

import aiosmtplib

from ..config.settings import NotifierConfig
from ..core.errors import SendFailure
from ..core.validator import is_valid_email
from .base import NotificationSender

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


class SMTPSender(NotificationSender):
    """Delivers notifications as plain-text email"""

    service_name = 'smtp'

    def __init__(self, config: NotifierConfig):
        self.config = config

    def is_valid_recipient(self, recipient: str) -> bool:
        return is_valid_email(recipient)

    def build_message(self, title: str, recipient: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        # header values may not carry line breaks
        msg['Subject'] = ' '.join(title.splitlines())
        msg['From'] = self.config.smtp_from
        msg['To'] = recipient
        msg['Date'] = formatdate(localtime=True)
        domain = self.config.smtp_from.rpartition('@')[2] or 'localhost'
        msg['Message-ID'] = f'<{uuid.uuid4()}@{domain}>'
        msg.set_content(body)
        return msg

    def send(self, title: str, recipient: str, body: str) -> None:
        msg = self.build_message(title, recipient, body)

        try:
            asyncio.run(self._async_send(msg))
        except (aiosmtplib.SMTPException, OSError, asyncio.TimeoutError) as e:
            logger.error(f'SMTP send to {recipient} via {self.config.smtp_host}:{self.config.smtp_port} failed: {e}')
            raise SendFailure('smtp send failed') from e

        logger.info(f'Email sent to {recipient}')

    async def _async_send(self, msg: EmailMessage) -> None:
        config = self.config
        implicit_tls = config.smtp_tls and config.smtp_port == IMPLICIT_TLS_PORT

        smtp = aiosmtplib.SMTP(
            hostname=config.smtp_host,
            port=config.smtp_port,
            timeout=config.smtp_timeout,
            use_tls=implicit_tls,
            start_tls=config.smtp_tls and not implicit_tls,
        )

        async with smtp:
            if config.smtp_username and config.smtp_password:
                await smtp.login(config.smtp_username, config.smtp_password)
            await smtp.send_message(msg)
