"""Typed failures raised by the checklist services.

Services raise these; the API layer turns them into HTTP responses with
:func:`to_http_exception`. Anything else escaping a service is treated as an
internal error.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException


class ChecklistError(Exception):
    """Base class for expected, client-visible failures"""

    status_code = 500
    code = "Internal"

    def __init__(self, message: str, **details: Any):
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = details

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message, **self.details}


class NotFoundError(ChecklistError):
    """Referenced task, instance or list does not exist"""

    status_code = 404
    code = "NotFound"


class ForbiddenError(ChecklistError):
    """Authenticated but not allowed (may carry ``locked_by``)"""

    status_code = 403
    code = "Forbidden"


class ConflictError(ChecklistError):
    """State does not allow the operation (may carry ``current_status`` or ``locked_by``)"""

    status_code = 409
    code = "Conflict"


class ValidationFailedError(ChecklistError):
    """Missing or malformed input field"""

    status_code = 400
    code = "ValidationError"

    def __init__(self, message: str, field: Optional[str] = None, **details: Any):
        if field is not None:
            details["field"] = field
        super().__init__(message, **details)


def to_http_exception(error: ChecklistError) -> HTTPException:
    """Convert a typed failure into the HTTPException returned to clients"""
    return HTTPException(status_code=error.status_code, detail=error.to_dict())
