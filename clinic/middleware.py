import logging
import time

logger = logging.getLogger(__name__)


class RequestLogMiddleware:
    """Log method, path, status and duration of every request."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        start_time = time.monotonic()
        response = self.get_response(request)
        duration = time.monotonic() - start_time
        logger.info(
            "Method: %s | Path: %s | Status: %s | Duration: %.4fs",
            request.method, request.path, response.status_code, duration,
        )
        return response
