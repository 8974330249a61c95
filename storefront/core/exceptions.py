from fastapi import HTTPException, status
from typing import Any, List, Optional


class RecordNotFound(Exception):
    """Raised when a lookup by id or field finds no row."""

    def __init__(self, model: str, **criteria: Any):
        self.model = model
        self.criteria = criteria
        rendered = ", ".join(f"{key}={value!r}" for key, value in criteria.items())
        super().__init__(f"Couldn't find {model} with {rendered}" if rendered else f"Couldn't find {model}")


class LoginRequired(Exception):
    """Raised by the authorization dependency for anonymous requests."""

    def __init__(self, return_to: Optional[str] = None):
        self.return_to = return_to
        super().__init__("Please log in")


class ProductNotFound(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Product not found"
        )


class UserNameTaken(HTTPException):
    def __init__(self):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Name has already been taken"
        )


class APIError(Exception):
    def __init__(self, status_code: int, message: str, errors: Optional[List[Any]] = None):
        self.status_code = status_code
        self.message = message
        self.errors = errors or []
