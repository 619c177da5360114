"""
Instance routes
Read text instances by their own ID
"""

from fastapi import APIRouter, Depends, Request

from app.utils.openpecha_client import OpenPechaClient, OpenPechaAPIError, get_openpecha_client
from app.routes.helpers import ERROR_RESPONSES, forwarded_authorization, raise_read_error

router = APIRouter()


@router.get("/{instance_id}", responses={k: ERROR_RESPONSES[k] for k in (404, 500)})
async def get_instance(
    instance_id: str,
    request: Request,
    client: OpenPechaClient = Depends(get_openpecha_client)
):
    """Get a text instance with its content and annotations"""
    try:
        return await client.get_instance(instance_id, authorization=forwarded_authorization(request))
    except OpenPechaAPIError as e:
        raise_read_error(e, "Instance not found", "Failed to fetch instance from OpenPecha API")
