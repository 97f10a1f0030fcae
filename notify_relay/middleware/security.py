# middleware/security.py
"""
Response middleware
"""

from flask import current_app


def security_headers(response):
    """Add the configured security headers to every response"""
    for name, value in current_app.config.get('SECURITY_HEADERS', {}).items():
        response.headers.setdefault(name, value)
    return response
