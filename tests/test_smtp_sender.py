import dataclasses
from unittest.mock import AsyncMock, MagicMock, patch

import aiosmtplib
import pytest

from notify_relay.core.errors import SendFailure
from notify_relay.senders.smtp import SMTPSender


@pytest.fixture
def smtp_client():
    client = MagicMock()
    client.login = AsyncMock()
    client.send_message = AsyncMock()
    return client


@pytest.fixture
def smtp_class(smtp_client):
    with patch('notify_relay.senders.smtp.aiosmtplib.SMTP', return_value=smtp_client) as smtp_class:
        yield smtp_class


def test_sends_one_message(config, smtp_class, smtp_client):
    SMTPSender(config).send('T', 'a@b.com', 'B')

    smtp_class.assert_called_once_with(
        hostname='smtp.mailhost.io',
        port=587,
        timeout=30,
        use_tls=False,
        start_tls=True,
    )
    smtp_client.login.assert_awaited_once_with('relay', 'hunter2')
    smtp_client.send_message.assert_awaited_once()

    msg = smtp_client.send_message.await_args.args[0]
    assert msg['Subject'] == 'T'
    assert msg['To'] == 'a@b.com'
    assert msg['From'] == 'relay@mailhost.io'
    assert msg['Message-ID'].endswith('@mailhost.io>')
    assert msg['Date']
    assert msg.get_content().strip() == 'B'


def test_implicit_tls_on_port_465(config, smtp_class):
    SMTPSender(dataclasses.replace(config, smtp_port=465)).send('T', 'a@b.com', 'B')

    kwargs = smtp_class.call_args.kwargs
    assert kwargs['use_tls'] is True
    assert kwargs['start_tls'] is False


def test_plaintext_when_tls_disabled(config, smtp_class):
    SMTPSender(dataclasses.replace(config, smtp_tls=False, smtp_port=25)).send('T', 'a@b.com', 'B')

    kwargs = smtp_class.call_args.kwargs
    assert kwargs['use_tls'] is False
    assert kwargs['start_tls'] is False


def test_no_login_without_credentials(config, smtp_class, smtp_client):
    config = dataclasses.replace(config, smtp_username=None, smtp_password=None)
    SMTPSender(config).send('T', 'a@b.com', 'B')

    smtp_client.login.assert_not_awaited()
    smtp_client.send_message.assert_awaited_once()


@pytest.mark.parametrize(
    "error",
    [
        aiosmtplib.SMTPConnectError('connection refused'),
        aiosmtplib.SMTPAuthenticationError(535, 'bad credentials'),
        aiosmtplib.SMTPTimeoutError('timed out'),
        ConnectionRefusedError('refused'),
    ],
    ids=["connect", "auth", "timeout", "os_error"],
)
def test_backend_faults_become_send_failure(config, smtp_class, smtp_client, error):
    smtp_client.__aenter__.side_effect = error

    with pytest.raises(SendFailure) as exc_info:
        SMTPSender(config).send('T', 'a@b.com', 'B')

    assert exc_info.value.reason == 'smtp send failed'
    smtp_client.send_message.assert_not_awaited()


def test_rejected_message_becomes_send_failure(config, smtp_class, smtp_client):
    smtp_client.send_message.side_effect = aiosmtplib.SMTPDataError(554, 'rejected')

    with pytest.raises(SendFailure):
        SMTPSender(config).send('T', 'a@b.com', 'B')

    smtp_client.send_message.assert_awaited_once()


def test_recipient_rule(config):
    sender = SMTPSender(config)
    assert sender.is_valid_recipient('local@sub.domain.tld')
    assert not sender.is_valid_recipient('not-an-email')
    assert sender.service_name == 'smtp'


@pytest.mark.parametrize("title", ["Disk\nfull", "Disk\r\nfull", "Disk\rfull"])
def test_line_breaks_in_title_are_folded(config, smtp_class, smtp_client, title):
    SMTPSender(config).send(title, 'a@b.com', 'B')

    msg = smtp_client.send_message.await_args.args[0]
    assert msg['Subject'] == 'Disk full'
