"""
================================================================================
BLOGIFY - CUSTOM MIDDLEWARE
================================================================================

@file        middleware.py
@description Credential extraction and API error rendering
@version     1.0.0

MODULE PURPOSE
================================================================================
1. CredentialMiddleware
   - Reads the raw credential from the Authorization header or the token
     cookie and stores it on ``request.credential``
   - Never decodes it: views resolve it once through
     ``publishing.identity.authenticate_request``

2. ApiExceptionMiddleware
   - Renders unexpected exceptions raised under /api/ as a generic JSON 500
   - Exception detail is only exposed when DEBUG is on

CREDENTIAL SOURCES
================================================================================
In order of precedence:
    Authorization: Token <jwt>
    Authorization: Bearer <jwt>
    Cookie: <TOKEN_COOKIE_NAME>=<jwt>

================================================================================
"""

import logging

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)

AUTH_SCHEMES = ("token", "bearer")


# ============================================================================
# CREDENTIAL MIDDLEWARE
# ============================================================================

class CredentialMiddleware:
    """
    Attach the caller's raw credential to the request.

    Attributes:
        get_response: Next middleware or view in the chain
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.credential = self.extract(request)
        return self.get_response(request)

    @staticmethod
    def extract(request):
        header = request.headers.get("Authorization", "")
        if header:
            scheme, _, value = header.partition(" ")
            if scheme.lower() in AUTH_SCHEMES and value.strip():
                return value.strip()
        return request.COOKIES.get(settings.TOKEN_COOKIE_NAME) or None


# ============================================================================
# API EXCEPTION MIDDLEWARE
# ============================================================================

class ApiExceptionMiddleware:
    """
    Turn uncaught exceptions on API paths into a generic JSON error.

    Expected failures never reach this point: ``api_view`` converts every
    ServiceError into a Result. Anything else is a bug or a store failure,
    logged with its traceback and reported without internal detail.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if not request.path.startswith("/api/"):
            return None

        logger.exception(f"Unhandled error on {request.method} {request.path}")
        payload = {"kind": "InternalError", "error": "Internal server error"}
        if settings.DEBUG:
            payload["detail"] = f"{type(exception).__name__}: {exception}"
        return JsonResponse(payload, status=500)
