"""
Domain errors raised by the service layer.

Routers do not catch these; ``main.py`` maps each class to an HTTP status.
"""
from typing import Optional


class GarageError(Exception):
    """Base class for domain errors."""

    status_code = 400

    def __init__(self, detail: str, errors: Optional[list[str]] = None):
        super().__init__(detail)
        self.detail = detail
        self.errors = errors or []


class NotFoundError(GarageError):
    """Row does not exist or belongs to another garage."""

    status_code = 404


class ConflictError(GarageError):
    """Operation clashes with the current state of a row."""

    status_code = 409


class InvalidInputError(GarageError):
    """Business-rule validation failure."""

    status_code = 422
