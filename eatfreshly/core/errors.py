"""Domain exceptions mapped to HTTP status codes by the handlers in main."""

from fastapi import HTTPException, status


class DomainError(HTTPException):
    """Base class for errors raised by services and endpoints."""

    def __init__(self, message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> None:
        super().__init__(status_code=status_code, detail=message)
        self.message = message


class NotFoundError(DomainError):
    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class ValidationFailed(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class Unauthorized(DomainError):
    def __init__(self, message: str = "Could not validate credentials") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class PermissionDenied(DomainError):
    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class Conflict(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class ServiceUnavailable(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
