# notify_relay/__init__.py
"""
Notification relay: authenticated HTTP front end dispatching to per-service senders
"""

__version__ = '0.1.0'
