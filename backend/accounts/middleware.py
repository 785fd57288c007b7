import threading
from typing import Optional
from django.utils.deprecation import MiddlewareMixin


_thread_locals = threading.local()


def get_current_user() -> Optional['User']:
    return getattr(_thread_locals, 'user', None)


def _resolve_request_user(request):
    user = getattr(request, 'user', None)
    if getattr(user, "is_authenticated", False):
        return user
    # DRF authenticates inside the view; resolve the bearer token here so model stamps work.
    # Imported lazily: model modules import get_current_user during app loading.
    from rest_framework_simplejwt.authentication import JWTAuthentication
    from rest_framework_simplejwt.exceptions import InvalidToken, AuthenticationFailed

    try:
        auth_result = JWTAuthentication().authenticate(request)
    except (InvalidToken, AuthenticationFailed):
        return user
    if auth_result:
        return auth_result[0]
    return user


class RequestUserMiddleware(MiddlewareMixin):
    """Expose the request's user to model saves (created_by/updated_by stamps)."""

    def process_request(self, request):
        _thread_locals.user = _resolve_request_user(request)

    def process_response(self, request, response):
        _thread_locals.user = None
        return response
