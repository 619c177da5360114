"""
Text routes
List, read and create OpenPecha texts and their instances
"""

from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, Request
import structlog

from app.config import settings
from app.utils.openpecha_client import OpenPechaClient, OpenPechaAPIError, get_openpecha_client
from app.utils.validators import validate_text_payload, validate_instance_payload
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
from shared.schemas import TextCreateSchema, TextInstanceCreateSchema, TextListResponse
from shared.utils.logger import get_audit_logger

logger = structlog.get_logger(__name__)

router = APIRouter()

TEXT_EXAMPLE = TextCreateSchema.model_config["json_schema_extra"]["example"]
INSTANCE_EXAMPLE = TextInstanceCreateSchema.model_config["json_schema_extra"]["example"]


@router.get("", responses={200: {"model": TextListResponse}, 500: ERROR_RESPONSES[500]})
async def list_texts(
    request: Request,
    limit: Optional[int] = Query(None, ge=1, description="Maximum number of texts to return"),
    offset: int = Query(0, ge=0, description="Number of texts to skip"),
    language: Optional[str] = Query(None, description="Filter texts by language"),
    author: Optional[str] = Query(None, description="Filter texts by author"),
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """
    Get texts from OpenPecha API

    Retrieves a paginated list of texts with optional filtering. Pagination
    is forwarded upstream so consecutive pages preserve upstream order.
    """
    limit = limit or settings.default_text_limit
    params: Dict[str, Any] = {"limit": limit, "offset": offset}
    if language:
        params["language"] = language
    if author:
        params["author"] = author

    try:
        data = await client.list_texts(params, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_list_error(e, "Failed to fetch texts from OpenPecha API")

    return list_envelope(data, limit, offset)


@router.post("", status_code=201, responses={k: ERROR_RESPONSES[k] for k in (400, 500)})
async def create_text(
    request: Request,
    text_data: Dict[str, Any] = Body(..., examples=[TEXT_EXAMPLE]),
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """
    Create a new text

    Validates the required fields, the text type and the contribution roles,
    then forwards the body unchanged to the OpenPecha API.
    """
    reject_invalid(validate_text_payload(text_data))

    logger.info("Creating text", type=text_data.get("type"), language=text_data.get("language"))
    try:
        created = await client.create_text(text_data, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_create_error(e, "text")

    get_audit_logger().log_resource_created(
        "text", created_id(created),
        ip_address=request.client.host if request.client else None
    )
    return created


@router.get("/instances/{instance_id}", responses={k: ERROR_RESPONSES[k] for k in (404, 500)})
async def get_instance_legacy(
    instance_id: str,
    request: Request,
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """Get a text instance by ID (path kept for older clients, same as /instances/{id})"""
    try:
        return await client.get_instance(instance_id, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_read_error(e, "Instance not found", "Failed to fetch instance from OpenPecha API")


@router.get("/{text_id}", responses={k: ERROR_RESPONSES[k] for k in (404, 500)})
async def get_text(
    text_id: str,
    request: Request,
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """Get a text by ID"""
    try:
        return await client.get_text(text_id, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_read_error(e, "Text not found", "Failed to fetch text from OpenPecha API")


@router.get("/{text_id}/instances", responses={k: ERROR_RESPONSES[k] for k in (404, 500)})
async def list_text_instances(
    text_id: str,
    request: Request,
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """Get the instances of a text"""
    try:
        return await client.list_text_instances(text_id, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_read_error(e, "Text not found", "Failed to fetch text instances from OpenPecha API")


@router.post("/{text_id}/instances", status_code=201, responses={k: ERROR_RESPONSES[k] for k in (400, 500)})
async def create_text_instance(
    text_id: str,
    request: Request,
    instance_data: Dict[str, Any] = Body(..., examples=[INSTANCE_EXAMPLE]),
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """
    Create a text instance

    Requires non-empty content; annotation spans must lie inside the content.
    """
    reject_invalid(validate_instance_payload(instance_data))

    logger.info("Creating text instance", text_id=text_id,
                content_length=len(instance_data["content"]))
    try:
        created = await client.create_text_instance(
            text_id, instance_data, authorization=forwarded_authorization(request)
        )
    except OpenPechaAPIError as e:
        raise_create_error(e, "text instance")

    get_audit_logger().log_resource_created(
        "text instance", created_id(created),
        details={"text_id": text_id},
        ip_address=request.client.host if request.client else None
    )
    return created
