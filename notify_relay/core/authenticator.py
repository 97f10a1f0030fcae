# core/authenticator.py
"""
API key authentication for notification requests

The caller key is read from ``x-api-key`` or, when that header is absent,
from ``Authorization: Bearer <key>``. Keys are never logged.
"""

import hmac
import logging
from typing import Iterable, Mapping, Optional, Tuple, Union

from .errors import Unauthorized

logger = logging.getLogger(__name__)

API_KEY_HEADER = 'x-api-key'
AUTHORIZATION_HEADER = 'authorization'
BEARER_PREFIX = 'Bearer '

HeaderSource = Union[Mapping[str, str], Iterable[Tuple[str, str]]]


def _lowercase_headers(headers: HeaderSource) -> dict:
    items = headers.items() if hasattr(headers, 'items') else headers
    lowered = {}
    for name, value in items:
        # first occurrence wins for repeated headers
        lowered.setdefault(name.lower(), value)
    return lowered


def extract_credential(headers: HeaderSource) -> Optional[str]:
    """
    Pull the caller-supplied key out of the request headers

    Returns:
        The key, or None when neither supported header carries one
    """
    lowered = _lowercase_headers(headers)

    if API_KEY_HEADER in lowered:
        return lowered[API_KEY_HEADER]

    authorization = lowered.get(AUTHORIZATION_HEADER)
    if authorization is not None and authorization.startswith(BEARER_PREFIX):
        return authorization[len(BEARER_PREFIX):]

    return None


class ApiKeyAuthenticator:
    """Compares caller keys against the single configured secret"""

    def __init__(self, secret: str):
        if not secret:
            raise ValueError('API key secret must not be empty')
        self._secret = secret.encode('utf-8')

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(secret=***)'

    def authenticate(self, headers: HeaderSource) -> None:
        """
        Raises:
            Unauthorized: no credential supplied, or it does not match
        """
        credential = extract_credential(headers)
        if credential is None:
            logger.debug('Rejected request without credential')
            raise Unauthorized()

        if not hmac.compare_digest(credential.encode('utf-8'), self._secret):
            logger.debug('Rejected request with non-matching credential')
            raise Unauthorized()
