"""
RecipeBox Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for every failure a request can hit.
How:   Each exception carries a user-facing message, an HTTP status code and
       an optional context dict. Global exception handlers (registered in
       main.py) translate them into `{"error": ...}` or `{"errors": [...]}`
       bodies. Context is logged server-side, never returned.
Who:   Raised by services and the authorization gate; caught by handlers.

Exception Hierarchy:
    RecipeBoxError (base)
    ├── ValidationError          → 400 Bad Request (one entry per bad field)
    ├── DuplicateEmailError      → 400 Bad Request
    ├── MissingCredentialError   → 401 Unauthorized
    ├── InvalidCredentialError   → 401 Unauthorized (wrong password)
    │   └── InvalidTokenError    → 400 Bad Request (bad signature / expired)
    ├── NotFoundError            → 404 Not Found
    ├── StoreError               → 500 Internal Server Error
    └── FileStorageError         → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class RecipeBoxError(Exception):
    """
    Base exception for all RecipeBox application errors.

    Attributes:
        message:      User-facing error description (safe to return)
        status_code:  HTTP status the global handler responds with
        context:      Additional debug info (logged but NOT returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class FieldError(dict):
    """
    A single field-level validation failure.

    Serialises as {"type": "field", "msg": ..., "path": ..., "location": ...},
    the shape existing recipe-manager clients already parse.
    """

    def __init__(self, path: str, msg: str, location: str = "body"):
        super().__init__(type="field", msg=msg, path=path, location=location)


class ValidationError(RecipeBoxError):
    """
    Raised when client input fails validation.

    Every violated field is collected before raising, so the response lists
    all problems at once rather than only the first.

    Example response:
        {"errors": [{"type": "field", "msg": "Title is required",
                     "path": "title", "location": "body"}]}
    """

    status_code = 400

    def __init__(
        self,
        errors: Optional[List[FieldError]] = None,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.errors: List[FieldError] = list(errors or [])

    @property
    def fields(self) -> List[str]:
        return [e["path"] for e in self.errors]


class DuplicateEmailError(RecipeBoxError):
    """Raised when signup uses an email that already belongs to a user."""

    status_code = 400

    def __init__(
        self,
        message: str = "Email already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class MissingCredentialError(RecipeBoxError):
    """Raised when an authenticated route receives no bearer token."""

    status_code = 401

    def __init__(
        self,
        message: str = "Access denied. No token provided.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidCredentialError(RecipeBoxError):
    """Raised when a login password does not match the stored hash."""

    status_code = 401

    def __init__(
        self,
        message: str = "Invalid credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTokenError(InvalidCredentialError):
    """
    Raised when a bearer token fails signature, format or expiry checks.

    HTTP 400 rather than 401: existing clients treat 401 as "log in first"
    and 400 as "your stored token is stale".
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid token.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(RecipeBoxError):
    """
    Raised when a requested resource does not exist or is not visible.

    Recipe lookups raise this for both "no such id" and "owned by someone
    else"; the two cases are never distinguished.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "Not found",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(RecipeBoxError):
    """
    Raised when a database operation fails unexpectedly.

    The message is short and generic ("Failed to add recipe"); the driver
    error goes into context and is logged only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class FileStorageError(RecipeBoxError):
    """Raised when writing an uploaded file to disk fails."""

    status_code = 500

    def __init__(
        self,
        message: str = "Failed to store uploaded file",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
