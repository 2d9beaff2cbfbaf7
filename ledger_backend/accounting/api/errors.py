# accounting/api/errors.py

"""
Service error -> HTTP response mapping.

    LedgerValidationError (incl. InvalidAmount, SameAccountError) -> 400
    NotFoundError                                                 -> 404
    InvalidStateError / UnbalancedEntryError / Concurrency...     -> 409

Body: {"detail": "<message>", "code": "<error code>"}
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response

from accounting.services.exceptions import (
    AccountingServiceError,
    ConcurrencyConflictError,
    InvalidStateError,
    LedgerValidationError,
    NotFoundError,
    UnbalancedEntryError,
)

STATUS_BY_ERROR = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (LedgerValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (UnbalancedEntryError, status.HTTP_409_CONFLICT),
    (ConcurrencyConflictError, status.HTTP_409_CONFLICT),
)


def service_error_response(exc: AccountingServiceError) -> Response:
    http_status = status.HTTP_400_BAD_REQUEST
    for error_class, code in STATUS_BY_ERROR:
        if isinstance(exc, error_class):
            http_status = code
            break

    return Response({"detail": str(exc), "code": exc.code}, status=http_status)
