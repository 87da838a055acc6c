"""Domain models for the authflow service."""

from .user import User

__all__ = [
    "User",
]
