"""
Shared helpers for gateway routes
"""

from typing import Any, Dict, List, NoReturn, Optional
from fastapi import HTTPException, Request
import structlog

from app.utils.openpecha_client import OpenPechaAPIError
from app.utils.validators import ValidationIssue
from shared.schemas import ErrorResponse, error_body

logger = structlog.get_logger(__name__)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Bad request - invalid input data"},
    404: {"model": ErrorResponse, "description": "Resource not found"},
    500: {"model": ErrorResponse, "description": "Server error"},
}


def gateway_error(status_code: int, error: str, details: Any = None) -> HTTPException:
    """HTTPException carrying the {error, details} envelope"""
    return HTTPException(status_code=status_code, detail=error_body(error, details))


def reject_invalid(issues: List[ValidationIssue]) -> None:
    """Raise a 400 for the first validation issue, if any"""
    if issues:
        first = issues[0]
        logger.warning("Rejected invalid payload", error=first.error, details=first.details,
                       issue_count=len(issues))
        raise gateway_error(400, first.error, first.details)


def forwarded_authorization(request: Request) -> Optional[str]:
    return request.headers.get("authorization")


def raise_read_error(exc: OpenPechaAPIError, not_found: str, failure: str) -> NoReturn:
    """Map an upstream read failure onto 404 or 500"""
    if exc.is_not_found:
        raise gateway_error(404, not_found, exc.message)
    logger.error(failure, error=exc.message, upstream_status=exc.status_code)
    raise gateway_error(500, failure, exc.message)


def raise_list_error(exc: OpenPechaAPIError, failure: str) -> NoReturn:
    """Any upstream list failure is a 500"""
    logger.error(failure, error=exc.message, upstream_status=exc.status_code)
    raise gateway_error(500, failure, exc.message)


def raise_create_error(exc: OpenPechaAPIError, resource: str) -> NoReturn:
    """Forward an upstream write failure, or 500 when upstream was unreachable"""
    logger.error(f"Error creating {resource}", error=exc.message, upstream_status=exc.status_code)
    if exc.status_code is not None:
        raise gateway_error(
            exc.status_code,
            f"Failed to create {resource} in OpenPecha API",
            exc.body or exc.message
        )
    raise gateway_error(500, f"Failed to create {resource}", exc.message)


def list_envelope(data: Any, limit: int, offset: int) -> Dict[str, Any]:
    """
    Normalize an upstream list response to {results, count, limit, offset}

    The upstream returns either a bare array or an object that already has
    a results array; missing envelope fields are filled in from the request.
    """
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        results = data["results"]
        return {
            **data,
            "results": results,
            "count": data.get("count", len(results)),
            "limit": data.get("limit", limit),
            "offset": data.get("offset", offset),
        }
    results = data if isinstance(data, list) else []
    return {"results": results, "count": len(results), "limit": limit, "offset": offset}


def created_id(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        value = data.get("id")
        return str(value) if value is not None else None
    return None
