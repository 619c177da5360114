"""
Person routes
List, read and create OpenPecha persons
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, Request
import structlog

from app.config import settings
from app.utils.openpecha_client import OpenPechaClient, OpenPechaAPIError, get_openpecha_client
from app.utils.validators import validate_person_payload
from app.routes.helpers import (
    ERROR_RESPONSES,
    forwarded_authorization,
    list_envelope,
    raise_create_error,
    raise_list_error,
    raise_read_error,
    reject_invalid,
    created_id,
)
from shared.schemas import PersonCreateSchema, PersonListResponse
from shared.utils.logger import get_audit_logger

logger = structlog.get_logger(__name__)

router = APIRouter()

PERSON_EXAMPLE = PersonCreateSchema.model_config["json_schema_extra"]["example"]


@router.get("", responses={200: {"model": PersonListResponse}, 500: ERROR_RESPONSES[500]})
async def list_persons(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of persons to return"),
    offset: int = Query(0, ge=0, description="Number of persons to skip"),
    nationality: Optional[str] = Query(None, description="Filter persons by nationality"),
    occupation: Optional[str] = Query(None, description="Filter persons by occupation"),
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """Get a paginated list of persons with optional filtering"""
    limit = limit or settings.default_person_limit
    params: Dict[str, Any] = {"limit": limit, "offset": offset}
    if nationality:
        params["nationality"] = nationality
    if occupation:
        params["occupation"] = occupation

    try:
        data = await client.list_persons(params, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_list_error(e, "Failed to fetch persons from OpenPecha API")

    return list_envelope(data, limit, offset)


@router.get("/{person_id}", responses={k: ERROR_RESPONSES[k] for k in (404, 500)})
async def get_person(
    person_id: str,
    request: Request,
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """Get a person by ID"""
    try:
        return await client.get_person(person_id, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_read_error(e, "Person not found", "Failed to fetch person from OpenPecha API")


@router.post("", status_code=201, responses={k: ERROR_RESPONSES[k] for k in (400, 500)})
async def create_person(
    request: Request,
    person_data: Dict[str, Any] = Body(..., examples=[PERSON_EXAMPLE]),
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """
    Create a new person

    A name in English or Tibetan is required. Optional fields default to
    empty values before the person is forwarded upstream.
    """
    reject_invalid(validate_person_payload(person_data))

    payload = {
        "name": person_data["name"],
        "alt_names": person_data.get("alt_names") or [],
        "bdrc": person_data.get("bdrc") or "",
        "wiki": person_data.get("wiki") or "",
    }

    logger.info("Creating person", languages=sorted(payload["name"].keys()))
    try:
        created = await client.create_person(payload, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_create_error(e, "person")

    get_audit_logger().log_resource_created(
        "person", created_id(created),
        ip_address=request.client.host if request.client else None
    )
    return created
