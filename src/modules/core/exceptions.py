"""Translation of domain errors into HTTP responses.

Each taxonomy base class maps to exactly one status code; the body carries
the message, a stable ``code`` and the error's structured context.
"""

from __future__ import annotations

from typing import Dict, Type

import structlog
from rest_framework import status
from rest_framework.response import Response

from shared.domain.exceptions import (
    ActionNotAllowed,
    ConcurrencyConflict,
    DomainError,
    EntityNotFound,
    InvalidInput,
    InvalidState,
    PolicyViolation,
)

logger = structlog.get_logger(__name__)

DOMAIN_ERROR_STATUS: Dict[Type[DomainError], int] = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    EntityNotFound: status.HTTP_404_NOT_FOUND,
    ActionNotAllowed: status.HTTP_403_FORBIDDEN,
    InvalidState: status.HTTP_400_BAD_REQUEST,
    PolicyViolation: status.HTTP_400_BAD_REQUEST,
    ConcurrencyConflict: status.HTTP_409_CONFLICT,
}


def domain_error_response(exc: DomainError) -> Response:
    """Render *exc* as ``{"detail", "code", **context}`` with its mapped status."""
    http_status = status.HTTP_400_BAD_REQUEST
    for base, mapped in DOMAIN_ERROR_STATUS.items():
        if isinstance(exc, base):
            http_status = mapped
            break

    logger.info(
        "request.domain_error",
        error=type(exc).__name__,
        code=exc.code,
        status_code=http_status,
    )
    body = {"detail": str(exc), "code": exc.code, **exc.context()}
    return Response(body, status=http_status)
