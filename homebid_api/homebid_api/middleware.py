import logging
import time

logger = logging.getLogger('audit')


class UserActivityLoggingMiddleWare:
    """One audit line per request: actor, method, path, status, client IP and duration."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        started = time.monotonic()
        response = self.get_response(request)
        elapsed_ms = int((time.monotonic() - started) * 1000)

        user = getattr(request, 'user', None)
        actor = f"user:{user.pk}" if user is not None and user.is_authenticated else "anonymous"

        logger.info(
            f"{actor} - {request.method} {request.get_full_path()} - {response.status_code} "
            f"- ip={client_ip(request)} - {elapsed_ms}ms"
        )
        return response


def client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')
