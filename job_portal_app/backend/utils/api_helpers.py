"""
Common API utilities shared by the routers.
"""
from typing import Optional

from fastapi import status
from fastapi.responses import JSONResponse

from ..utils.errors import NotFoundError, ValidationError


def parse_positive_id(value: str, message: str) -> int:
    """
    Parse a path segment as a positive integer id.

    Raises:
        ValidationError: If the value is not a positive integer
    """
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(message)
    if parsed <= 0:
        raise ValidationError(message)
    return parsed


def check_resource_exists(resource: Optional[object], message: str) -> None:
    """
    Raise NotFoundError when a lookup came back empty.
    """
    if resource is None:
        raise NotFoundError(message)


def validation_failure(message: str) -> JSONResponse:
    """400 response for an expected business-rule refusal."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Validation error", "message": message},
    )
