"""
Error types raised by the resource handlers.

Each error knows its HTTP status and how to render the JSON body returned to
the client, so handlers can raise and a single place converts.
"""

from typing import Any


class ApiError(Exception):
    """Base exception for errors surfaced through the HTTP API."""

    status_code = 500

    def __init__(self, message: str, error: str | None = None, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.error = error
        self.details = details or {}

    def to_response(self):
        """
        Build the JSON body sent back to the client.

        Returns:
            dict: Payload with ``message`` and, when set, ``error`` and extra fields.
        """
        body = {"message": self.message}
        body.update(self.details)
        if self.error:
            body["error"] = self.error
        return body


class ValidationError(ApiError):
    status_code = 400


class MissingFieldsError(ValidationError):
    """Raised when a payload lacks one or more required fields."""

    def __init__(self, missing_fields: list[str]):
        super().__init__("Missing required fields", details={"missingFields": list(missing_fields)})
        self.missing_fields = list(missing_fields)


class NotFoundError(ApiError):
    status_code = 404


class StorageError(ApiError):
    status_code = 500


class DatabaseNotInitializedError(StorageError):
    """Raised when a collection is requested before the database is connected."""

    def __init__(self, message: str = "Database not initialized. Call connect() first."):
        super().__init__(message)
