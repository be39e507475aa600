"""DRF exception handler that exposes the error kind to API clients."""

from __future__ import annotations

from django.core.exceptions import PermissionDenied  # type: ignore
from django.http import Http404  # type: ignore
from rest_framework import exceptions  # type: ignore
from rest_framework.views import exception_handler  # type: ignore


def api_exception_handler(exc, context):  # type: ignore
    """Render errors as ``{"detail": ..., "code": ...}``.

    Domain errors may also carry a ``reason`` (the rule that rejected the
    request) and ``errors`` (field level validation messages).
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound(*exc.args)
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied(*exc.args)

    response = exception_handler(exc, context)
    if response is None:
        return None

    codes = exc.get_codes() if hasattr(exc, "get_codes") else None
    code = getattr(exc, "default_code", None)
    if isinstance(codes, str):
        code = codes

    data = response.data if isinstance(response.data, dict) else {"errors": response.data}
    if "detail" not in data:
        data = {"detail": getattr(exc, "default_detail", "Invalid input."), "errors": data}
    data["code"] = code

    reason = getattr(exc, "reason", None)
    if reason:
        data["reason"] = reason
    field_errors = getattr(exc, "field_errors", None)
    if field_errors:
        data["errors"] = field_errors

    response.data = data
    return response
