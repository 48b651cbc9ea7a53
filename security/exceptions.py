"""Errors raised by the authentication and authorization layer.

Authorization failures are `HTTPException`s with fixed, generic messages so that
no caller can tell an expired token from a forged one. Infrastructure failures are
plain exceptions that route handlers log and turn into a generic 500.
"""
from fastapi import HTTPException, status


class HashingError(Exception):
    """Raised when a password could not be hashed."""


class SigningError(Exception):
    """Raised when a token could not be signed."""


class InvalidCredentials(HTTPException):
    """Unknown account or wrong password. The two are never told apart."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )


class MissingToken(HTTPException):
    """No bearer token on a protected request."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )


class InvalidOrExpiredToken(HTTPException):
    """Bearer token failed verification for any reason."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


class Forbidden(HTTPException):
    """Valid identity without the privilege the route requires."""

    def __init__(self):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions",
        )
