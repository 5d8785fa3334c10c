"""
Pydantic Models and Schemas
===========================

Request and response models for the HTTP API.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class HealthStatus(BaseModel):
    """Health check response."""

    status: str = Field(default="ok", description="Always 'ok' while the process serves requests")
    message: Optional[str] = Field(None, description="Human-readable status message")


class ToolInvocation(BaseModel):
    """Body of ``POST /v1/tools``."""

    name: str = Field(..., min_length=1, description="Tool name")
    params: Dict[str, Any] = Field(default_factory=dict, description="Tool parameters")


class ToolResult(BaseModel):
    """Successful tool execution."""

    result: Any = Field(..., description="Tool result")


class ErrorDetail(BaseModel):
    """Error message and machine-readable code."""

    message: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error: ErrorDetail
