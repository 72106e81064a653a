"""
Error taxonomy for the PriceCheck API.

Services raise these; the application maps them to HTTP responses in
``main.py`` so route handlers stay free of status-code plumbing.
"""
from fastapi import status


class PriceCheckError(Exception):
    """Base class for errors that carry a public message and a status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UnauthenticatedError(PriceCheckError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class ForbiddenError(PriceCheckError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Insufficient permissions."


class NotFoundError(PriceCheckError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(PriceCheckError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists."


class ValidationError(PriceCheckError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class ResolutionTimeoutError(PriceCheckError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = "Shopping list resolution timed out."
