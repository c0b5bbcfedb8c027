"""
Product API Backend: Custom Exception Hierarchy
================================================

What:  Application-specific exceptions for each error scenario.
Why:   Targeted error handling with the right HTTP status code and a stable
       JSON error shape, without leaking internal details to the client.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) turn them into
       structured JSON responses.
Who:   Raised by the dispatcher, services and the origin gate.

Exception Hierarchy:
    ProductAPIError (base)
    ├── ValidationError          → 400 Bad Request (field error collection)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    ├── OriginNotAllowedError    → 403 Forbidden (answered by the origin gate)
    └── DocumentationError       → startup failure, never an HTTP response
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence


class ProductAPIError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ProductAPIError):
    """
    Raised when one or more request fields fail their validation rules.

    What:    Carries the whole field error collection for the request, not just
             the first failure: every failing field is reported at once.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Request validation failed",
            "errors": [
                {"field": "name", "message": "name is required"},
                {"field": "price", "message": "not a number"}
            ]
        }
    """

    def __init__(
        self,
        errors: Mapping[str, Sequence[str]],
        message: str = "Request validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["fields"] = list(errors)
        super().__init__(message=message, context=ctx)
        self.errors = {field: list(messages) for field, messages in errors.items()}

    def as_list(self) -> List[Dict[str, str]]:
        """Flattens the collection into `{field, message}` items, field order preserved."""
        return [
            {"field": field, "message": message}
            for field, messages in self.errors.items()
            for message in messages
        ]


class NotFoundError(ProductAPIError):
    """
    Raised when a well-formed identifier matches no stored record.

    When:    GET/PUT/PATCH/DELETE /api/products/{id} for an id that is not in
             the products table. The id already passed validation.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(ProductAPIError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    Security Note:
        The message returned to the client is always generic.
        Driver errors, SQL and constraint names are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class OriginNotAllowedError(ProductAPIError):
    """
    Raised when a request's Origin header is not the configured frontend URL.

    Not recoverable by retrying: the caller has to change origin.
    """

    def __init__(
        self,
        origin: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["origin"] = origin
        super().__init__(message="Origin not allowed by CORS policy", context=ctx)
        self.origin = origin


class DocumentationError(ProductAPIError):
    """
    Raised when route documentation metadata cannot be turned into an API
    description. Raised while the app object is being built, so the server
    never starts accepting traffic with a broken route table.
    """

    def __init__(
        self,
        message: str = "Invalid route documentation metadata",
        route: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if route:
            ctx["route"] = route
            message = f"{route}: {message}"
        super().__init__(message=message, context=ctx)
        self.route = route
