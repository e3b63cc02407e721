"""
Bug Reporter Backend — Pydantic Request/Response Schemas
=========================================================

What:  Pydantic models defining the API contract between the reporting
       client and the backend.
Why:   Strict input validation, automatic serialization, and OpenAPI docs.
How:   FastAPI validates request bodies and serializes responses with these
       models. The reporting client (app.reporter) parses responses with the
       same models, so both sides share one contract.

Wire format:
    JSON keys are camelCase (``screenshotUrl``, ``createdAt``). Inputs also
    accept the snake_case field names.

Metadata:
    Always nested under the ``metadata`` key. Values are scalars only:
    string, number, boolean or null.
"""

import enum
from datetime import datetime
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class BugStatus(str, enum.Enum):
    """Workflow state. Transitions are unconstrained."""
    OPEN = "OPEN"
    IN_PROGRESS = "IN_PROGRESS"
    CLOSED = "CLOSED"


class BugPriority(str, enum.Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


DEFAULT_STATUS = BugStatus.OPEN
DEFAULT_PRIORITY = BugPriority.MEDIUM

# Column widths of bugs.description and bugs.title
DESCRIPTION_MAX_LENGTH = 1000
TITLE_MAX_LENGTH = 255

MetadataValue = Union[str, int, float, bool, None]
Metadata = Dict[str, MetadataValue]


class CamelModel(BaseModel):
    """Base for wire models: camelCase aliases, snake_case accepted on input."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BugCreate(CamelModel):
    """
    Body of POST /api/bugs.

    Only ``title`` is required. Optional text fields are trimmed and dropped
    when blank; ``priority`` falls back to MEDIUM in the service layer when
    omitted. ``id``, ``createdAt`` and ``status`` are never accepted from
    the client.
    """
    title: str = Field(
        max_length=TITLE_MAX_LENGTH,
        description="Short summary of the bug (required, non-blank)",
    )
    description: Optional[str] = Field(
        default=None,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Detailed information about the bug",
    )
    screenshot_url: Optional[str] = Field(default=None, description="Link to a screenshot")
    priority: Optional[BugPriority] = Field(default=None, description="Defaults to MEDIUM")
    metadata: Optional[Metadata] = Field(
        default=None,
        description="Free-form scalar key/value pairs (context data, custom fields)",
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Title is required")
        return stripped

    @field_validator("description", "screenshot_url")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        return v.strip() or None


class StatusUpdate(CamelModel):
    """Body of PUT /api/bugs/{id}/status."""
    status: BugStatus


class PriorityUpdate(CamelModel):
    """Body of PUT /api/bugs/{id}/priority."""
    priority: BugPriority


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class BugResponse(CamelModel):
    """
    Full representation of a stored bug.

    Returned by every endpoint that produces a record. ``id``, ``createdAt``
    and ``status`` are always assigned by the store.
    """
    id: int = Field(description="Store-assigned identifier (increasing)")
    title: str
    description: Optional[str] = None
    screenshot_url: Optional[str] = None
    created_at: datetime = Field(description="When the bug was reported (UTC)")
    status: BugStatus
    priority: BugPriority
    metadata: Optional[Metadata] = None


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "bug with ID '42' was not found",
            "request_id": "1a2b3c4d"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")

