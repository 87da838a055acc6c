"""Error taxonomy shared by the services and the HTTP layer."""

from typing import Optional

from fastapi import status


class AuthFlowError(Exception):
    """Base class for failures that map onto the JSON response envelope."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Server error. Please try again later."

    def __init__(self, message: str = "", status_code: Optional[int] = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(AuthFlowError):
    """A required field is missing."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing required fields."


class ConflictError(AuthFlowError):
    """The email address is already registered."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "User with this email already exists."


class AuthError(AuthFlowError):
    """Bad credentials, OTP or session token."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized."


class NotFoundError(AuthFlowError):
    """No user matches the given id or email."""

    status_code = status.HTTP_404_NOT_FOUND
    default_message = "User not found."


class StateError(AuthFlowError):
    """The account is in the wrong state for the request."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Operation not allowed in the current account state."


class ServerError(AuthFlowError):
    """Unexpected failure in the store or an external collaborator."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class EmailDeliveryError(ServerError):
    """The mail transport refused or failed to deliver a message."""
