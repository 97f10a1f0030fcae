# core/errors.py
"""
Error taxonomy for the dispatch pipeline
"""

from enum import Enum


class ErrorKind(Enum):
    """Terminal failure kinds and the HTTP status each one maps to"""
    UNAUTHORIZED = 401
    INVALID_ARGUMENT = 400
    SEND_FAILURE = 500

    @property
    def status_code(self) -> int:
        return self.value


class NotifierError(Exception):
    """Base exception for notification dispatch"""
    kind = ErrorKind.SEND_FAILURE

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class Unauthorized(NotifierError):
    """Missing or wrong API credential"""
    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, reason: str = 'unauthorized'):
        super().__init__(reason)


class InvalidArgument(NotifierError):
    """Malformed request, unknown service or failed field validation"""
    kind = ErrorKind.INVALID_ARGUMENT


class SendFailure(NotifierError):
    """Backend transport or delivery error"""
    kind = ErrorKind.SEND_FAILURE


class ConfigurationError(Exception):
    """Required configuration is missing or invalid; fatal at startup"""
    pass
