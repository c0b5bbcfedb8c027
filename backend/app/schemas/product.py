"""
Product API Backend: Pydantic Request/Response Schemas
=======================================================

What:  Pydantic models for the typed values handed to handlers and for the
       JSON the API returns.
Why:   Handlers work on typed, already-validated data and never look at raw
       request bodies.

Note:
    These models do NOT validate client input. Input is checked by the field
    validators in app/validation.py, which produce the 400 error collection.
    The body models below are only built from values that already passed.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class ProductResponse(BaseModel):
    """Full representation of a stored product."""
    id: int = Field(description="The product Id")
    name: str = Field(description="The product name")
    price: float = Field(description="The product price")
    availability: bool = Field(description="The product availability")

    model_config = {"from_attributes": True}


# ══════════════════════════════════════════════════════════════════════════
# Typed Request Bodies (built after validation)
# ══════════════════════════════════════════════════════════════════════════


class ProductCreate(BaseModel):
    """Body of POST /api/products. Availability is not accepted; it starts true."""
    name: str
    price: float


class ProductUpdate(BaseModel):
    """Body of PUT /api/products/{id}: a full replacement of the editable fields."""
    name: str
    price: float
    availability: bool


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models
# ══════════════════════════════════════════════════════════════════════════


class FieldErrorItem(BaseModel):
    """One failing field and the message of its first failing rule."""
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    """
    Body of every 400 response.

    Example:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "errors": [{"field": "id", "message": "invalid id"}],
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(default="validation_error")
    message: str
    errors: List[FieldErrorItem]
    request_id: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error format for every non-validation error."""
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and dependency status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
