# core/validator.py
"""
Field validation for notification requests

Checks run in a fixed order (title, body, recipient) so that the first
violation reported for a given request is deterministic.
"""

import re
from typing import Callable

from email_validator import EmailNotValidError, validate_email

from .errors import InvalidArgument
from .models import NotificationRequest

RecipientRule = Callable[[str], bool]

_WHITESPACE = re.compile(r'\s')


def is_valid_email(address: str) -> bool:
    """
    Syntax check for an SMTP recipient: local-part@domain, a dot in the
    domain, no whitespace anywhere. No DNS lookups are made.
    """
    if not address or _WHITESPACE.search(address):
        return False

    local_part, sep, domain = address.rpartition('@')
    if not sep or not local_part or '@' in local_part:
        return False
    if '.' not in domain:
        return False

    try:
        validate_email(address, check_deliverability=False, globally_deliverable=False)
    except EmailNotValidError:
        return False
    return True


def validate_title(title: str) -> None:
    if not title.strip():
        raise InvalidArgument('empty title')


def validate_body(body: str) -> None:
    if not body.strip():
        raise InvalidArgument('empty body')


def validate_recipient(recipient: str, rule: RecipientRule) -> None:
    if not rule(recipient):
        raise InvalidArgument('invalid recipient')


def validate_notification(request: NotificationRequest, recipient_rule: RecipientRule) -> None:
    """
    Validate a request whose service has already been resolved

    Args:
        request: the parsed notification
        recipient_rule: format check for the resolved service's recipients

    Raises:
        InvalidArgument: on the first failing check
    """
    validate_title(request.title)
    validate_body(request.body)
    validate_recipient(request.to, recipient_rule)
