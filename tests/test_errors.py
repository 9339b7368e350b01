"""Tests for service error types."""

from brewform.domain.errors import (
    ConflictError,
    FieldError,
    ForbiddenError,
    NotFoundError,
    RecipeServiceError,
    ValidationFailedError,
)


def test_validation_error_lists_messages() -> None:
    errors = [
        FieldError(field="dose_grams", message="Dose missing."),
        FieldError(field="grind_date", message="Grind too early."),
    ]
    exc = ValidationFailedError(errors)

    assert exc.errors == errors
    assert str(exc) == "Validation failed: Dose missing.; Grind too early."


def test_not_found_names_resource() -> None:
    assert str(NotFoundError()) == "Recipe not found"
    assert NotFoundError("Comment").resource == "Comment"


def test_errors_share_base_class() -> None:
    for exc in (
        ValidationFailedError([]),
        NotFoundError(),
        ForbiddenError(),
        ConflictError("taken"),
    ):
        assert isinstance(exc, RecipeServiceError)


def test_conflict_is_retryable_by_default() -> None:
    assert ConflictError("taken").retryable
    assert not ConflictError("taken", retryable=False).retryable
