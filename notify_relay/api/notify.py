# api/notify.py
"""
HTTP adapter for the dispatch pipeline
"""

import logging

from flask import Blueprint, current_app, jsonify, request

logger = logging.getLogger(__name__)

notify_bp = Blueprint('notify', __name__)


def _dispatch(service=None):
    outcome = current_app.dispatcher.dispatch(
        request.headers,
        lambda: request.get_data(cache=False),
        service=service,
    )
    return jsonify(outcome.to_dict()), outcome.status_code


@notify_bp.route('/healthz', methods=['GET'])
def healthz():
    """Liveness probe; no authentication"""
    return jsonify({'ok': True, 'message': 'ok'})


@notify_bp.route('/notify', methods=['POST'])
@notify_bp.route('/send-notification', methods=['POST'])
def notify():
    """
    Dispatch a notification

    Body: {"service": str, "title": str, "to": str, "body": str}
    Auth: x-api-key or Authorization: Bearer
    """
    return _dispatch()


@notify_bp.route('/send-email', methods=['POST'])
def send_email():
    """Legacy email-only route; the service is always smtp"""
    return _dispatch(service='smtp')
