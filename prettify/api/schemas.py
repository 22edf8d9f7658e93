from typing import Optional

from pydantic import BaseModel, Field


class PrettifyRequest(BaseModel):
    """Text or code to prettify."""

    text: Optional[str] = Field(None, description="Raw text or source code")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 7807 problem body for unexpected failures."""

    type: str = Field("about:blank")
    title: str
    status: int
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    model: Optional[str] = None
