"""Error taxonomy shared by the identity gate, the store adapter and the routes."""

from fastapi import status


class MedRecallError(Exception):
    """Base error carrying a client-facing message and an HTTP status."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class Unauthenticated(MedRecallError):
    """No bearer credential was presented."""

    def __init__(self, message: str = "Missing token") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class Forbidden(MedRecallError):
    """A credential was presented but failed verification."""

    def __init__(self, message: str = "Invalid token") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class ValidationError(MedRecallError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class NotFound(MedRecallError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class Conflict(MedRecallError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class StoreUnavailable(MedRecallError):
    """A store operation failed. `detail` is for the logs only."""

    def __init__(self, detail: str, message: str = "Internal server error") -> None:
        self.detail = detail
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
