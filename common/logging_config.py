"""
Request id logging.

RequestIDMiddleware tags every request with a short id (or the one sent in
X-Request-ID by a proxy), echoes it back in the response header, and keeps it
in thread-local state so RequestIDFilter can stamp every log record written
while the request is handled, including service logs.
"""
import logging
import re
import threading
import uuid

_request_state = threading.local()

# Incoming ids are echoed into headers and logs; keep them short and plain
_VALID_REQUEST_ID = re.compile(r'^[A-Za-z0-9_.-]{1,64}$')


def get_request_id():
    return getattr(_request_state, 'request_id', None)


def _request_id_for(request):
    incoming = request.META.get('HTTP_X_REQUEST_ID', '')
    if _VALID_REQUEST_ID.match(incoming):
        return incoming
    return uuid.uuid4().hex[:8]


class RequestIDFilter(logging.Filter):
    """Adds record.request_id ('N/A' outside a request)"""

    def filter(self, record):
        record.request_id = getattr(record, 'request_id', None) or get_request_id() or 'N/A'
        return True


class RequestIDMiddleware:
    """Attach request.request_id and the X-Request-ID response header"""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = _request_id_for(request)
        request.request_id = request_id
        _request_state.request_id = request_id

        try:
            response = self.get_response(request)
        finally:
            _request_state.request_id = None

        response['X-Request-ID'] = request_id
        return response

    def process_exception(self, request, exception):
        """Unhandled view errors are logged with the request id before Django's 500 handling"""
        request_id = getattr(request, 'request_id', 'N/A')
        logging.getLogger('django.request').error(
            f"[{request_id}] Exception: {type(exception).__name__}: {exception}",
            exc_info=True,
            extra={'request_id': request_id},
        )
