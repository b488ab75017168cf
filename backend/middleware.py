import logging
import time
import uuid

logger = logging.getLogger('request')


def client_ip(request):
    ip = request.META.get('HTTP_X_FORWARDED_FOR') or request.META.get('REMOTE_ADDR') or '-'
    return ip.split(',')[0].strip() if ip else '-'


class RequestContextMiddleware:
    """
    Tag every request with a short request_id and write one access line:
    HTTP METHOD PATH -> STATUS (ms) user ip
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.request_id = uuid.uuid4().hex[:10]
        started = time.time()
        response = None
        try:
            response = self.get_response(request)
            response['X-Request-ID'] = request.request_id
            return response
        finally:
            duration_ms = int((time.time() - started) * 1000)
            status = getattr(response, 'status_code', 500)
            # DRF writes the JWT-authenticated user back onto the Django request
            user_obj = getattr(request, 'user', None)
            if user_obj is not None and getattr(user_obj, 'is_authenticated', False):
                user = getattr(user_obj, 'email', '-')
            else:
                user = 'anon'
            ip = client_ip(request)

            logger.info(
                'HTTP %s %s -> %s (%sms) user=%s ip=%s',
                request.method,
                request.path,
                status,
                duration_ms,
                user,
                ip,
                extra={
                    'request_id': request.request_id,
                    'user': user,
                    'ip': ip,
                    'method': request.method,
                    'path': request.path,
                    'status': status,
                    'duration_ms': duration_ms,
                },
            )
