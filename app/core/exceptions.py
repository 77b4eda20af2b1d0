from fastapi import HTTPException
from typing import Dict, Any


class APIException(HTTPException):
    def __init__(self, status_code: int, detail: str, headers: Dict[str, Any] = None):
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=422, detail=detail)


class UnauthorizedError(APIException):
    def __init__(self, detail: str = "Invalid credentials"):
        super().__init__(status_code=401, detail=detail, headers={"WWW-Authenticate": "Bearer"})


class ForbiddenError(APIException):
    def __init__(self, detail: str = "You do not have permission to access this resource"):
        super().__init__(status_code=403, detail=detail)


class NotFoundError(APIException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=404, detail=detail)


class ConflictError(APIException):
    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(status_code=409, detail=detail)


class InternalError(APIException):
    def __init__(self, detail: str = "There was an internal server error"):
        super().__init__(status_code=500, detail=detail)


class RollbackFailedError(InternalError):
    """An operation failed and its compensating action failed too.

    Leaves the identity and profile stores inconsistent; needs an operator.
    """


class ConfigurationException(APIException):
    def __init__(self, detail: str):
        super().__init__(status_code=500, detail=f"Configuration Error: {detail}")


# Classified at their origin, propagated through every layer unchanged
DOMAIN_ERRORS = (ValidationError, ConflictError, UnauthorizedError, ForbiddenError, NotFoundError)

DUPLICATE_SIGNALS = ("duplicate key", "already registered", "already exists")


def is_duplicate_error(error: Exception) -> bool:
    message = str(getattr(error, "detail", None) or error).lower()
    return any(signal in message for signal in DUPLICATE_SIGNALS)
