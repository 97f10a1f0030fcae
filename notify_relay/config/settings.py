# config/settings.py
"""
Configuration for the notification relay

NotifierConfig is read once from the environment at startup and passed
explicitly to the dispatcher and senders. The Flask settings classes hold
HTTP-level defaults loaded with app.config.from_object.
"""

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from email_validator import EmailNotValidError, validate_email

from ..core.errors import ConfigurationError


TRUE_VALUES = {'1', 'true', 'yes', 'on'}
FALSE_VALUES = {'0', 'false', 'no', 'off'}


def parse_bool(raw: Optional[str]) -> Optional[bool]:
    """Parse a boolean env value; None when unset or unrecognized"""
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in TRUE_VALUES:
        return True
    if value in FALSE_VALUES:
        return False
    return None


def _require(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if value is None or not value.strip():
        raise ConfigurationError(f'missing env var: {name}')
    return value.strip()


def _parse_int(environ: Mapping[str, str], name: str, default: int, low: int, high: int) -> int:
    raw = environ.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f'{name} must be an integer, got {raw!r}')
    if not low <= value <= high:
        raise ConfigurationError(f'{name} must be between {low} and {high}')
    return value


@dataclass(frozen=True)
class NotifierConfig:
    """Immutable runtime configuration"""
    api_key: str = field(repr=False)
    smtp_host: str
    smtp_from: str
    smtp_port: int = 587
    smtp_username: Optional[str] = None
    smtp_password: Optional[str] = field(default=None, repr=False)
    smtp_tls: bool = True
    smtp_timeout: int = 30
    http_bind: str = '127.0.0.1:8080'
    log_level: str = 'INFO'
    cors_origins: Tuple[str, ...] = ('*',)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'NotifierConfig':
        """
        Build the configuration from environment variables

        Raises:
            ConfigurationError: a required variable is missing or a value is invalid
        """
        environ = os.environ if environ is None else environ

        smtp_from = _require(environ, 'SMTP_FROM')
        try:
            validate_email(smtp_from, check_deliverability=False)
        except EmailNotValidError as e:
            raise ConfigurationError(f'SMTP_FROM is not a valid email: {e}')

        tls = parse_bool(environ.get('SMTP_TLS'))
        origins = tuple(
            origin.strip()
            for origin in environ.get('CORS_ORIGINS', '*').split(',')
            if origin.strip()
        )

        return cls(
            api_key=_require(environ, 'NOTIFY_API_KEY'),
            smtp_host=_require(environ, 'SMTP_HOST'),
            smtp_from=smtp_from,
            smtp_port=_parse_int(environ, 'SMTP_PORT', 587, 1, 65535),
            smtp_username=environ.get('SMTP_USERNAME') or None,
            smtp_password=environ.get('SMTP_PASSWORD') or None,
            smtp_tls=True if tls is None else tls,
            smtp_timeout=_parse_int(environ, 'SMTP_TIMEOUT', 30, 1, 600),
            http_bind=environ.get('HTTP_BIND') or '127.0.0.1:8080',
            log_level=(environ.get('LOG_LEVEL') or 'INFO').upper(),
            cors_origins=origins or ('*',),
        )

    @property
    def bind_address(self) -> Tuple[str, int]:
        """Split HTTP_BIND into (host, port)"""
        host, sep, port = self.http_bind.rpartition(':')
        if not sep or not port.isdigit():
            raise ConfigurationError(f'HTTP_BIND must be host:port, got {self.http_bind!r}')
        return host or '127.0.0.1', int(port)


class BaseConfig:
    """Flask settings"""

    MAX_CONTENT_LENGTH = 256 * 1024  # 256KB

    SLOW_REQUEST_THRESHOLD = 1000  # ms

    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
        'Referrer-Policy': 'no-referrer',
        'Cache-Control': 'no-store',
    }


class TestingConfig(BaseConfig):
    TESTING = True
