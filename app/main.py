"""
Pecha Gateway - FastAPI Application
Validates and forwards Text, Person and Instance requests to the OpenPecha API
"""

import os
import time
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from app.config import settings
from app.routes import health, texts, persons, instances
from app.utils.openpecha_client import openpecha_client
from shared.schemas import error_body
from shared.utils.logger import init_logging, get_request_logger


if os.getenv("ENVIRONMENT") != "testing":
    init_logging()

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.JSONRenderer()
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)
request_logger = get_request_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan events"""
    logger.info("Starting Pecha Gateway", upstream=settings.openpecha_endpoint)
    settings.log_config()

    # Shared upstream client with connection pooling
    await openpecha_client.start()

    yield

    await openpecha_client.stop()
    logger.info("Pecha Gateway shutdown complete")


app = FastAPI(
    title="OpenPecha Text API",
    description="Gateway for managing OpenPecha texts, persons and text instances",
    version=settings.service_version,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=settings.cors_origin_list != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and duration"""
    started = time.perf_counter()
    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        request_logger.log_request(
            method=request.method,
            url=str(request.url),
            status_code=status_code,
            response_time=time.perf_counter() - started,
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent")
        )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render HTTP errors with the {error, details} envelope"""
    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = error_body(str(exc.detail), None)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(content),
                        headers=getattr(exc, "headers", None))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed query parameters or bodies are client errors"""
    logger.warning("Request validation failed", url=str(request.url), errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder(error_body("Invalid request parameters", exc.errors()))
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(
        "Unhandled exception",
        error=str(exc),
        method=request.method,
        url=str(request.url),
        exc_info=True
    )
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", str(exc))
    )


app.include_router(health.router, prefix="/health", tags=["Health"])
app.include_router(texts.router, prefix="/text", tags=["Texts"])
app.include_router(instances.router, prefix="/instances", tags=["Instances"])
app.include_router(persons.router, prefix="/person", tags=["Persons"])


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "status": "running",
        "version": settings.service_version,
        "docs": "/docs"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.environment == "development"
    )
