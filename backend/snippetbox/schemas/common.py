"""
Snippetbox — Shared Response Schemas
======================================

What:  Error and health documents shared by every part of the service.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error document.

    Example:
        {
            "error": "duplicate_email",
            "message": "Address is already in use",
            "fields": {"email": "Address is already in use"}
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    fields: Optional[Dict[str, str]] = Field(
        default=None,
        description="Per-field messages for form submissions",
    )


class FormPage(BaseModel):
    """Descriptor for a form the client renders (templates live outside the core)."""
    action: str
    fields: List[str]
    defaults: Dict[str, object] = Field(default_factory=dict)
    options: Dict[str, List[object]] = Field(default_factory=dict)
    flash: Optional[str] = None


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
