import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.exceptions import APIException, Throttled
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)

THROTTLE_MESSAGES = {
    "negotiation_send": "Too many offers sent. Please wait before sending more proposals.",
    "negotiation_respond": "Too many responses. Please wait before accepting or rejecting again.",
    "offer_write": "Too many offer changes. Please wait a bit before trying again.",
}


def build_error_payload(exc: APIException, status_code: int) -> dict:
    """Envelope used for every domain error: same shape as BaseResponseMixin."""
    codes = exc.get_codes()
    return {
        "status": "error",
        "status_code": status_code,
        "message": exc.detail if isinstance(exc.detail, (list, dict)) else str(exc.detail),
        "data": {
            "code": codes if isinstance(codes, str) else "invalid",
            "retryable": getattr(exc, "retryable", False),
        },
    }


def custom_exception_handler(exc, context):
    """
    Intercept any DRF exception. Throttled errors get a message based on the
    throttle `scope`; every other API error is wrapped in the standard
    {status, status_code, message, data} envelope.
    """
    response = exception_handler(exc, context)

    if response is None:
        return response

    if isinstance(exc, Throttled):
        view = context.get("view", None)
        throttles = [] if view is None else getattr(view, "get_throttles", lambda: [])()
        scope = None
        if throttles:
            scope = getattr(throttles[0], "scope", None)

        wait_seconds = int(exc.wait) if exc.wait is not None else None

        if scope in THROTTLE_MESSAGES:
            detail = THROTTLE_MESSAGES[scope]
        elif wait_seconds is not None:
            detail = f"Request rate limit exceeded. Please wait {wait_seconds} seconds and try again."
        else:
            detail = "Request rate limit exceeded. Please try again later."

        response.data = {
            "status": "error",
            "message": detail,
            "retry_after": wait_seconds,
        }
        response.status_code = 429
        return response

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, APIException):
        if response.status_code >= 500:
            logger.error(f"Unhandled API error: {exc}")
        response.data = build_error_payload(exc, response.status_code)

    return response
