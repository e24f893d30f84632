"""
Request id tagging and access logging.
"""

import logging
import time
import uuid

logger = logging.getLogger(__name__)

# Probes hit these every few seconds.
QUIET_PATHS = ('/health/', '/ready/')


def client_ip(request) -> str:
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '')


class RequestIDMiddleware:
    """Reuse the caller's ``X-Request-ID`` or mint one, and echo it back."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = request.headers.get('X-Request-ID') or uuid.uuid4().hex
        response = self.get_response(request)
        response['X-Request-ID'] = request.request_id
        return response


class LoggingMiddleware:
    """One access log line per request; 4xx and 5xx log as warnings."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        if request.path in QUIET_PATHS:
            return self.get_response(request)

        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = round((time.monotonic() - started) * 1000, 2)

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.path} {response.status_code} in {elapsed_ms}ms",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'status_code': response.status_code,
                'duration_ms': elapsed_ms,
                'ip_address': client_ip(request),
            }
        )
        return response
