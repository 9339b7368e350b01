"""Typed failures raised by the recipe services."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """Hard validation failure tied to an input field."""

    field: str
    message: str


class RecipeServiceError(Exception):
    pass


class ValidationFailedError(RecipeServiceError):
    def __init__(self, errors: list[FieldError]):
        super().__init__(
            "Validation failed: " + "; ".join(error.message for error in errors)
        )
        self.errors = errors


class NotFoundError(RecipeServiceError):
    def __init__(self, resource: str = "Recipe"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class ForbiddenError(RecipeServiceError):
    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class InvalidRequestError(RecipeServiceError):
    """Request is well-formed but cannot be honoured in the current state."""


class ConflictError(RecipeServiceError):
    def __init__(self, message: str, retryable: bool = True):
        super().__init__(message)
        self.retryable = retryable
