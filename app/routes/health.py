"""
Health Check Routes
Gateway health monitoring endpoints
"""

from fastapi import APIRouter, Depends
from datetime import datetime
import os
import logging

from app.config import settings
from app.utils.openpecha_client import OpenPechaClient, get_openpecha_client

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def health_check():
    """Basic health check"""
    return {
        "status": "healthy",
        "service": settings.service_name,
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.service_version
    }


@router.get("/detailed")
async def detailed_health_check(client: OpenPechaClient = Depends(get_openpecha_client)):
    """Detailed health check including upstream reachability"""
    health_status = {
        "status": "healthy",
        "service": settings.service_name,
        "timestamp": datetime.utcnow().isoformat(),
        "version": settings.service_version,
        "components": {}
    }

    upstream_status = await client.health_check()
    health_status["components"]["openpecha"] = {
        "status": upstream_status,
        "endpoint": client.base_url,
        "pooled": client.started
    }
    if upstream_status != "healthy":
        logger.warning(f"OpenPecha API is {upstream_status}")
        health_status["status"] = "degraded"

    config_health = check_configuration()
    health_status["components"]["configuration"] = config_health
    if config_health["status"] != "healthy":
        health_status["status"] = "degraded"

    return health_status


def check_configuration():
    """Check environment configuration"""
    required_vars = ['OPENPECHA_ENDPOINT']
    optional_vars = ['PORT', 'LOG_LEVEL', 'LOG_FORMAT', 'CORS_ALLOWED_ORIGINS']

    config = {}
    missing_required = []

    for var in required_vars:
        value = os.getenv(var)
        if value:
            config[var] = value
        else:
            missing_required.append(var)

    for var in optional_vars:
        value = os.getenv(var)
        if value:
            config[var] = value

    if missing_required:
        return {
            "status": "unhealthy",
            "missing": missing_required,
            "config": config
        }

    return {
        "status": "healthy",
        "config": config
    }
