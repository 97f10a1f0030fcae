# core/service_registry.py
"""
Service name resolution and sender lookup

Names are matched case-insensitively against canonical identifiers and a
static alias table. Both tables are fixed when the registry is built.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from .errors import InvalidArgument
from ..senders.base import NotificationSender

logger = logging.getLogger(__name__)

# "stmp" is the historical misspelling the service shipped under
DEFAULT_ALIASES: Mapping[str, str] = MappingProxyType({
    'stmp': 'smtp',
})


class ServiceRegistry:
    """Read-only mapping of canonical service id -> sender"""

    def __init__(self,
                 senders: Iterable[NotificationSender],
                 aliases: Optional[Mapping[str, str]] = None):
        registrations: Dict[str, NotificationSender] = {}
        for sender in senders:
            name = sender.service_name.lower()
            if name in registrations:
                raise ValueError(f'Duplicate sender registration for service: {name}')
            registrations[name] = sender

        alias_table: Dict[str, str] = {}
        for alias, target in (aliases if aliases is not None else DEFAULT_ALIASES).items():
            alias, target = alias.lower(), target.lower()
            if alias in registrations:
                raise ValueError(f'Alias shadows a registered service: {alias}')
            if target not in registrations:
                # aliases for services that are not deployed are dropped
                logger.debug(f'Skipping alias {alias!r}: service {target!r} not registered')
                continue
            alias_table[alias] = target

        self._senders = MappingProxyType(registrations)
        self._aliases = MappingProxyType(alias_table)

    @property
    def services(self) -> Mapping[str, NotificationSender]:
        return self._senders

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    def resolve(self, name) -> str:
        """
        Map a caller-supplied service name to its canonical identifier

        Raises:
            InvalidArgument: the name matches no service or alias
        """
        if not isinstance(name, str):
            raise InvalidArgument('unknown service')

        key = name.lower()
        if key in self._senders:
            return key
        if key in self._aliases:
            return self._aliases[key]
        raise InvalidArgument('unknown service')

    def sender_for(self, canonical: str) -> NotificationSender:
        return self._senders[canonical]
