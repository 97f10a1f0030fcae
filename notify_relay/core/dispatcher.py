# core/dispatcher.py
"""
Notification dispatch pipeline

Each call runs the same fail-fast sequence:

    Received -> Authenticated -> Validated -> ServiceResolved -> Dispatched
             -> Succeeded | Failed

The first failing step ends the call; nothing is retried.
"""

import json
import logging
from typing import Callable, Optional, Union

from .authenticator import ApiKeyAuthenticator, HeaderSource
from .errors import InvalidArgument, NotifierError, SendFailure
from .models import DispatchOutcome, NotificationRequest
from .service_registry import ServiceRegistry
from .validator import validate_notification

logger = logging.getLogger(__name__)

Body = Union[bytes, str, None]


def parse_request(body: Body, service: Optional[str] = None) -> NotificationRequest:
    """
    Decode a JSON request body into a NotificationRequest

    Args:
        body: raw request body
        service: when given, used as the service name and the payload need
            not carry one

    Raises:
        InvalidArgument: malformed JSON, or a missing or non-string field
    """
    if not body:
        raise InvalidArgument('malformed json')

    try:
        payload = json.loads(body)
    except (ValueError, UnicodeDecodeError, RecursionError):
        raise InvalidArgument('malformed json')

    if service is not None and isinstance(payload, dict):
        payload = {**payload, 'service': service}

    return NotificationRequest.from_payload(payload)


class NotificationDispatcher:
    """Runs authenticate -> parse -> resolve -> validate -> send for one request"""

    def __init__(self, authenticator: ApiKeyAuthenticator, registry: ServiceRegistry):
        self.authenticator = authenticator
        self.registry = registry

    def dispatch(self,
                 headers: HeaderSource,
                 body: Union[Body, Callable[[], Body]],
                 service: Optional[str] = None) -> DispatchOutcome:
        """
        Process one notification request

        Args:
            headers: request headers, used only for authentication
            body: raw JSON body, or a callable returning it; a callable is
                only invoked once the caller is authenticated
            service: fixed service name for routes that imply one

        Returns:
            DispatchOutcome, Sent or Failed; this method does not raise for
            request-level errors
        """
        try:
            self.authenticator.authenticate(headers)
            if callable(body):
                body = body()
            request = parse_request(body, service=service)
            canonical = self.registry.resolve(request.service)
            sender = self.registry.sender_for(canonical)
            validate_notification(request, sender.is_valid_recipient)
        except NotifierError as e:
            logger.warning(f'Notification rejected ({e.kind.name.lower()}): {e.reason}')
            return DispatchOutcome.failed(e)

        try:
            sender.send(request.title, request.to, request.body)
        except SendFailure as e:
            logger.error(f'Notification to {request.to} via {canonical} failed: {e.reason}')
            return DispatchOutcome.failed(e)
        except Exception as e:
            logger.error(f'Unexpected error from {canonical} sender: {e}', exc_info=True)
            return DispatchOutcome.failed(SendFailure('send failed'))

        logger.info(f'Notification sent to {request.to} via {canonical}')
        return DispatchOutcome.sent()
