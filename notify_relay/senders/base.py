# senders/base.py
"""
Sender capability shared by every delivery backend
"""

from abc import ABC, abstractmethod


class NotificationSender(ABC):
    """
    One delivery attempt per call for a single service type.

    Implementations own their transport setup and must translate every
    backend fault into SendFailure. They never retry.
    """

    #: canonical service identifier the sender is registered under
    service_name: str = ''

    @abstractmethod
    def send(self, title: str, recipient: str, body: str) -> None:
        """
        Deliver one notification

        Raises:
            SendFailure: the backend rejected or failed the delivery
        """

    @abstractmethod
    def is_valid_recipient(self, recipient: str) -> bool:
        """Format check for this service's recipient addresses"""
