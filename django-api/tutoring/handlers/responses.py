"""Uniform response envelope and domain error mapping.

Every tutoring endpoint answers with:
    {"success": true, "message": "...", "data": ...}
    {"success": false, "message": "...", "error": {"code": "..."}}
"""

import logging

from django.db import DatabaseError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from tutoring.domain.errors import DomainError, ErrorCode, PersistenceError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.SELF_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorCode.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_REQUEST: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_ENROLLMENT: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_ENROLLED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATE: status.HTTP_409_CONFLICT,
    ErrorCode.PERSISTENCE_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def success(message: str, data=None, status_code: int = status.HTTP_200_OK) -> Response:
    body = {"success": True, "message": message}
    if data is not None:
        body["data"] = data
    return Response(body, status=status_code)


def failure(code: str, message: str, status_code: int) -> Response:
    return Response(
        {"success": False, "message": message, "error": {"code": code}},
        status=status_code,
    )


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        fields = ", ".join(str(field) for field in detail)
        return f"Missing or invalid fields: {fields}"
    if isinstance(detail, list) and detail:
        return str(detail[0])
    return str(detail)


def domain_error_response(error: DomainError) -> Response:
    return failure(error.code.value, error.message, STATUS_BY_CODE[error.code])


def exception_handler(exc, context):
    """REST_FRAMEWORK["EXCEPTION_HANDLER"]: wrap every failure in the envelope."""
    view = context.get("view")
    view_name = view.__class__.__name__ if view is not None else "unknown"

    if isinstance(exc, DatabaseError):
        logger.exception("Storage failure in %s", view_name)
        exc = PersistenceError()

    if isinstance(exc, DomainError):
        if exc.code is not ErrorCode.PERSISTENCE_ERROR:
            logger.info("%s rejected: %s", view_name, exc)
        return domain_error_response(exc)

    response = drf_exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        return failure(
            ErrorCode.VALIDATION_ERROR.value, _first_message(exc.detail), response.status_code
        )
    code = getattr(exc, "default_code", "error")
    detail = getattr(exc, "detail", str(exc))
    failed = failure(str(code).upper(), _first_message(detail), response.status_code)
    for header, value in response.items():
        failed[header] = value
    return failed
