"""
Error envelope shared by the gateway and its clients
"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class ErrorResponse(BaseModel):
    """Error envelope returned by every failing gateway route"""
    error: str = Field(..., description="Error message")
    details: Optional[Any] = Field(None, description="Detailed error information")


def error_body(error: str, details: Any = None) -> dict:
    """Build an error envelope"""
    return {"error": error, "details": details}
