import pytest

from notify_relay.app import create_app
from notify_relay.config.settings import NotifierConfig, TestingConfig
from notify_relay.core.authenticator import ApiKeyAuthenticator
from notify_relay.core.dispatcher import NotificationDispatcher
from notify_relay.core.errors import SendFailure
from notify_relay.core.service_registry import ServiceRegistry
from notify_relay.core.validator import is_valid_email
from notify_relay.senders.base import NotificationSender

API_KEY = 'test-api-key'


class RecordingSender(NotificationSender):
    """Sender double that records calls and can be told to fail"""

    def __init__(self, service_name='smtp', error=None):
        self.service_name = service_name
        self.error = error
        self.calls = []

    def send(self, title, recipient, body):
        self.calls.append((title, recipient, body))
        if self.error is not None:
            raise self.error

    def is_valid_recipient(self, recipient):
        return is_valid_email(recipient)


@pytest.fixture
def config():
    return NotifierConfig(
        api_key=API_KEY,
        smtp_host='smtp.mailhost.io',
        smtp_from='relay@mailhost.io',
        smtp_username='relay',
        smtp_password='hunter2',
    )


@pytest.fixture
def sender():
    return RecordingSender()


@pytest.fixture
def failing_sender():
    return RecordingSender(error=SendFailure('smtp send failed'))


@pytest.fixture
def registry(sender):
    return ServiceRegistry([sender])


@pytest.fixture
def dispatcher(registry):
    return NotificationDispatcher(ApiKeyAuthenticator(API_KEY), registry)


@pytest.fixture
def app(config, sender):
    return create_app(config, senders=[sender], settings=TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    return {'x-api-key': API_KEY}


@pytest.fixture
def payload():
    return {
        'service': 'smtp',
        'title': 'T',
        'to': 'a@b.com',
        'body': 'B',
    }
