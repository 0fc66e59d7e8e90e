"""Custom exception classes for the application"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# Authentication Errors
class AuthenticationError(BaseAPIException):
    """Base authentication error"""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Invalid email or password"""
    def __init__(self):
        super().__init__("Invalid email or password")


class TokenInvalidError(AuthenticationError):
    """Access or refresh token is invalid"""
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


# Authorization Errors
class AuthorizationError(BaseAPIException):
    """Insufficient permissions"""
    def __init__(self, message: str = "Insufficient permissions"):
        super().__init__(message, status_code=403)


# Resource Errors
class ResourceNotFoundError(BaseAPIException):
    """Resource not found"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} not found", status_code=404)


class ResourceAlreadyExistsError(BaseAPIException):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409)


class DuplicateEmailError(ResourceAlreadyExistsError):
    """Email already registered"""
    def __init__(self, email: str):
        super().__init__(f"User with email '{email}'")
        self.details = {"email": email}


# Validation Errors
class ValidationError(BaseAPIException):
    """Validation error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


class PostTooLongError(ValidationError):
    """Post body exceeds the character limit"""
    def __init__(self, length: int, limit: int):
        self.length = length
        super().__init__(
            f"Post is too long ({length} characters, limit is {limit})",
            details={"length": length, "limit": limit}
        )


# System Errors
class HashingFailedError(BaseAPIException):
    """Password hashing failed"""
    def __init__(self, message: str = "Password hashing failed"):
        super().__init__(message, status_code=500)


class StorageIOError(BaseAPIException):
    """Reading or writing the document file failed"""
    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message, status_code=500)


class DocumentDecodeError(BaseAPIException):
    """Persisted document is not well-formed"""
    def __init__(self, message: str = "Stored document is corrupt"):
        super().__init__(message, status_code=500)
