# core/models.py
"""
Request and outcome types passed between the HTTP adapter and the dispatcher
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ErrorKind, InvalidArgument, NotifierError


REQUIRED_FIELDS = ('service', 'title', 'to', 'body')


@dataclass(frozen=True)
class NotificationRequest:
    """A single notification as submitted by the caller"""
    service: str
    title: str
    to: str
    body: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'NotificationRequest':
        """
        Build a request from a decoded JSON document

        Raises:
            InvalidArgument: payload is not an object, or a field is missing
                or not a string
        """
        if not isinstance(payload, dict):
            raise InvalidArgument('malformed json')

        values = {}
        for field in REQUIRED_FIELDS:
            if field not in payload or payload[field] is None:
                raise InvalidArgument(f'missing field: {field}')
            if not isinstance(payload[field], str):
                raise InvalidArgument(f'invalid field: {field}')
            values[field] = payload[field]

        return cls(**values)


@dataclass(frozen=True)
class DispatchOutcome:
    """Sent, or Failed with an error kind and a short reason"""
    ok: bool
    message: str
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def sent(cls) -> 'DispatchOutcome':
        return cls(ok=True, message='sent')

    @classmethod
    def failed(cls, error: NotifierError) -> 'DispatchOutcome':
        return cls(ok=False, message=error.reason, error_kind=error.kind)

    @property
    def status_code(self) -> int:
        if self.ok:
            return 200
        return self.error_kind.status_code

    def to_dict(self) -> Dict[str, Any]:
        return {'ok': self.ok, 'message': self.message}
